"""Match callout header lines against a set of tracked tags."""

from __future__ import annotations

import re
from typing import Iterable

from attrs import frozen

from .types import TagRuleList


@frozen
class TagMatch:
    """Parts of a matched callout header line.

    Attributes:
        depth: Number of ``>`` nesting markers before the tag.
        author: Matched tag, lower-cased.
        body: Raw text after the tag marker and its optional fold modifier.
    """

    depth: int
    author: str
    body: str


class TagMatcher:
    """Recognise callout headers such as ``> > [!me]- some text``.

    A header is optional leading whitespace, one or more ``>`` markers
    (whitespace allowed between them), the tag wrapped in ``[!`` and ``]``,
    an optional ``-`` or ``+`` fold modifier, then the body. Tags are
    matched case-insensitively and taken literally.
    """

    def __init__(self, tags: Iterable[str]) -> None:
        self.tags = [tag for tag in tags if tag]

        # Without any tag the matcher never matches.
        self._regex: re.Pattern[str] | None = None
        if self.tags:
            alternatives = "|".join(re.escape(tag) for tag in self.tags)
            self._regex = re.compile(
                rf"^\s*(>(?:\s*>)*)\s*\[!({alternatives})\][-+]?\s*(.*)",
                re.IGNORECASE,
            )

    @classmethod
    def from_rules(cls, rules: TagRuleList) -> TagMatcher:
        """Build a matcher for the tags of ``rules``."""

        return cls(rule.tag for rule in rules)

    @property
    def is_empty(self) -> bool:
        return self._regex is None

    def match(self, line: str) -> TagMatch | None:
        """Match a single line.

        Args:
            line: One line of the document without its newline.

        Returns:
            The matched header parts, or ``None`` when the line is not a
            tracked callout header.
        """

        if self._regex is None:
            return None

        found = self._regex.match(line)
        if found is None:
            return None

        markers, tag, body = found.groups()
        return TagMatch(
            depth=markers.count(">"),
            author=tag.lower(),
            body=body,
        )
