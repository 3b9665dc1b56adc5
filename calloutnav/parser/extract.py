"""Extract callout annotations from document text."""

from __future__ import annotations

import logging
import re
from datetime import datetime

from .annotation import UNTITLED, Annotation
from .tag_matcher import TagMatcher
from .types import AnnotationList, TagRuleList

logger = logging.getLogger(__name__)

# Stamp written by the quick insert helper, e.g. "me (2024-01-01 10:00)".
TIMESTAMP_RE = re.compile(
    r"\((\d{4}-\d{2}-\d{2})\s(\d{2}:\d{2})\)", re.ASCII
)
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"


def parse_timestamp(text: str) -> float | None:
    """Return the embedded local-time stamp of ``text`` as POSIX seconds.

    Args:
        text: Callout body that may contain ``(YYYY-MM-DD HH:MM)``.

    Returns:
        Seconds since the epoch, or ``None`` when no stamp is present or it
        does not describe a valid date and time.
    """

    match = TIMESTAMP_RE.search(text)
    if match is None:
        return None

    try:
        moment = datetime.strptime(
            f"{match.group(1)} {match.group(2)}", TIMESTAMP_FORMAT
        )

        # Naive datetimes are interpreted in local time.
        return moment.timestamp()
    except (ValueError, OverflowError, OSError):
        logger.debug(f"Ignoring invalid timestamp {match.group(0)!r}")
        return None


def extract_annotations(text: str, rules: TagRuleList) -> AnnotationList:
    """Extract tracked callouts from ``text`` in document order.

    Args:
        text: Full document content.
        rules: Tag rules selecting which callouts are tracked.

    Returns:
        Flat list of annotations with strictly increasing ``line_index``.
        Nothing is nested yet; see ``build_tree``.
    """

    matcher = TagMatcher.from_rules(rules)
    if matcher.is_empty:
        return []

    annotations: AnnotationList = []

    # Split on "\n" only so indices line up with editor line numbers.
    for index, line in enumerate(text.split("\n")):
        match = matcher.match(line)
        if match is None:
            continue

        body = match.body.strip() or UNTITLED
        annotations.append(
            Annotation(
                line_index=index,
                author=match.author,
                body=body,
                depth=match.depth,
                timestamp=parse_timestamp(body),
            )
        )

    logger.debug(f"Extracted {len(annotations)} annotations")
    return annotations
