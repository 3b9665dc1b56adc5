"""Arrange annotations for presentation."""

from __future__ import annotations

from attrs import evolve, frozen

from .annotation import Annotation
from .tree import build_tree
from .types import AnnotationList


@frozen
class OrderOptions:
    """How annotations are presented.

    Attributes:
        by_timestamp: Order chronologically instead of by document line.
        flatten: In chronological mode, drop nesting and return one list.
        ascending: Oldest/first entries first when true.
    """

    by_timestamp: bool = False
    flatten: bool = True
    ascending: bool = True


def _by_timestamp(
    annotations: AnnotationList, ascending: bool
) -> AnnotationList:
    # ``sorted`` keeps ties in input order even with ``reverse=True``.
    return sorted(
        annotations,
        key=lambda annotation: annotation.sort_timestamp,
        reverse=not ascending,
    )


def order_children(
    children: AnnotationList, options: OrderOptions
) -> AnnotationList:
    """Order the direct children of one node.

    Chronological mode sorts every level by timestamp in the requested
    direction. Line mode keeps children in document order regardless of
    direction; only the roots are ever reversed.
    """

    if options.by_timestamp:
        return _by_timestamp(children, options.ascending)
    return list(children)


def _order_descendants(
    annotation: Annotation, options: OrderOptions
) -> Annotation:
    def combine(node: Annotation, children: AnnotationList) -> Annotation:
        if not children:
            return node
        return evolve(node, children=order_children(children, options))

    return annotation.fold(combine)


def arrange(
    annotations: AnnotationList, options: OrderOptions
) -> AnnotationList:
    """Produce the final presentation order.

    Args:
        annotations: Flat annotations as returned by the extractor.
        options: Ordering mode and direction.

    Returns:
        A flat chronological list when ``options.by_timestamp`` and
        ``options.flatten`` are set, otherwise a forest whose every level is
        already ordered.
    """

    if options.by_timestamp and options.flatten:
        return _by_timestamp(annotations, options.ascending)

    # Nesting always follows document order.
    in_line_order = sorted(
        annotations, key=lambda annotation: annotation.line_index
    )
    roots = build_tree(in_line_order)

    if options.by_timestamp:
        roots = _by_timestamp(roots, options.ascending)
    elif not options.ascending:
        roots.reverse()

    return [_order_descendants(root, options) for root in roots]
