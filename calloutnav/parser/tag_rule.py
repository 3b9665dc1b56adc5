"""A tracked callout tag and its display colour."""

from __future__ import annotations

from typing import Any

from attrs import field, frozen

DEFAULT_COLOR = "#888888"


def _non_empty(instance: Any, attribute: Any, value: str) -> None:  # noqa: ANN401
    """Reject empty or whitespace-only tags."""

    if not value or not value.strip():
        raise ValueError(f"{attribute.name} must be a non-empty string")


@frozen
class TagRule:
    """A tracked callout tag and its display colour.

    Attributes:
        tag: Marker used inside ``[!...]``. Compared case-insensitively.
        color: Colour token used when rendering the author badge.
    """

    tag: str = field(validator=_non_empty)
    color: str = DEFAULT_COLOR

    @property
    def key(self) -> str:
        """Lower-cased tag used to join against ``Annotation.author``."""

        return self.tag.lower()
