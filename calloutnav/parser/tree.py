"""Rebuild callout nesting from nesting depth."""

from __future__ import annotations

from attrs import evolve

from .annotation import Annotation
from .types import AnnotationList


def build_tree(annotations: AnnotationList) -> AnnotationList:
    """Nest a flat, line-ordered list of annotations by depth.

    Each annotation becomes a child of the closest preceding annotation with
    a smaller depth, or a root when there is none. Depth gaps are accepted:
    a depth 3 reply directly under a depth 1 callout is still its child.

    The input must be sorted by ``line_index``. Any other order produces a
    meaningless tree; this is not checked.

    Args:
        annotations: Extracted annotations in document order.

    Returns:
        Root annotations in input order, each holding its descendants.
    """

    roots: AnnotationList = []

    # Open annotations with the children collected for them so far. Depths
    # strictly increase from bottom to top.
    stack: list[tuple[Annotation, AnnotationList]] = []

    def close_top() -> None:
        # The top entry can receive no more children: freeze it and hand it
        # to the entry below, or to the roots.
        annotation, children = stack.pop()
        closed = evolve(annotation, children=children)
        if stack:
            stack[-1][1].append(closed)
        else:
            roots.append(closed)

    for annotation in annotations:
        while stack and stack[-1][0].depth >= annotation.depth:
            close_top()
        stack.append((annotation, []))

    while stack:
        close_top()

    return roots


def flatten_tree(forest: AnnotationList) -> AnnotationList:
    """Return annotations of ``forest`` in pre-order without their children.

    Applied to the output of ``build_tree`` this restores its input.
    """

    flat: AnnotationList = []
    for root in forest:
        flat.extend(evolve(node, children=()) for node in root.walk())
    return flat
