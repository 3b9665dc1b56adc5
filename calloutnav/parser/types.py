"""Common type aliases for parser structures."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .annotation import Annotation  # noqa: F401
    from .tag_rule import TagRule  # noqa: F401


AnnotationList = list["Annotation"]
AnnotationChildren = tuple["Annotation", ...]
TagRuleList = list["TagRule"]
TagList = list[str]
