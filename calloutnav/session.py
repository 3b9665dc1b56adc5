"""Keep the latest arranged annotations of a changing document."""

from __future__ import annotations

import logging

from calloutnav.config import Settings
from calloutnav.parser import arrange, extract_annotations
from calloutnav.parser.types import AnnotationList

logger = logging.getLogger(__name__)


class GenerationCounter:
    """Issue increasing tokens; only the newest token is current."""

    def __init__(self) -> None:
        self._current = 0

    @property
    def current(self) -> int:
        return self._current

    def next(self) -> int:
        self._current += 1
        return self._current

    def is_current(self, token: int) -> bool:
        return token == self._current


class AnnotationIndex:
    """Arranged annotations for the document currently being edited.

    Each refresh reserves a token before its (possibly slow) work begins and
    commits only if no newer refresh or settings change started meanwhile,
    so an older computation never replaces a newer result.

    Attributes:
        settings: Tag rules and ordering applied to each refresh.
        result: Last committed forest, or ``None`` before the first commit.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.result: AnnotationList | None = None
        self._generations = GenerationCounter()

    def begin(self) -> int:
        """Reserve a token for a new refresh."""

        return self._generations.next()

    def is_current(self, token: int) -> bool:
        return self._generations.is_current(token)

    def commit(self, token: int, text: str) -> AnnotationList | None:
        """Arrange ``text`` and store it when ``token`` is still current.

        Args:
            token: Value returned by ``begin`` for this refresh.
            text: Document content read for this refresh.

        Returns:
            The arranged forest, or ``None`` when the refresh went stale.
        """

        if not self.is_current(token):
            logger.debug(f"Discarding stale refresh {token}")
            return None

        annotations = extract_annotations(text, self.settings.users)
        arranged = arrange(annotations, self.settings.order_options())
        self.result = arranged
        return arranged

    def refresh(self, text: str) -> AnnotationList:
        """Rebuild the result from ``text`` immediately."""

        token = self.begin()
        arranged = self.commit(token, text)
        return arranged if arranged is not None else []

    def update_settings(self, settings: Settings) -> None:
        """Switch settings, invalidating refreshes already in flight."""

        self.settings = settings
        self._generations.next()
