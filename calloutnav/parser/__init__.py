"""Parser package for callout comments."""

from .annotation import UNTITLED, Annotation
from .extract import extract_annotations, parse_timestamp
from .ordering import OrderOptions, arrange, order_children
from .tag_matcher import TagMatch, TagMatcher
from .tag_rule import DEFAULT_COLOR, TagRule
from .tree import build_tree, flatten_tree

__all__ = [
    "DEFAULT_COLOR",
    "UNTITLED",
    "Annotation",
    "OrderOptions",
    "TagMatch",
    "TagMatcher",
    "TagRule",
    "arrange",
    "build_tree",
    "extract_annotations",
    "flatten_tree",
    "order_children",
    "parse_timestamp",
]
