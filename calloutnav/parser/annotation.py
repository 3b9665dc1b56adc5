"""A callout comment extracted from a document."""

from __future__ import annotations

from typing import Any, Callable, Iterator, TypeVar

from attrs import field, frozen

from .types import AnnotationChildren

UNTITLED = "Untitled"

T = TypeVar("T")


@frozen
class Annotation:
    """A callout comment extracted from a document.

    Records are immutable. The extractor creates them without children and
    the tree builder composes new records that own their child tuples.

    Attributes:
        line_index: Zero-based line of the callout header in the source.
        author: Matched tag, lower-cased.
        body: Trimmed text following the tag marker.
        depth: Number of ``>`` markers before the tag, at least 1.
        timestamp: POSIX seconds of the embedded ``(YYYY-MM-DD HH:MM)``
            stamp, or ``None`` when absent or invalid.
        children: Nested replies in presentation order.
    """

    line_index: int
    author: str
    body: str = UNTITLED
    depth: int = 1
    timestamp: float | None = None
    children: AnnotationChildren = field(default=(), converter=tuple, repr=False)

    @property
    def sort_timestamp(self) -> float:
        """Timestamp used for ordering; missing stamps sort as 0."""

        return self.timestamp if self.timestamp is not None else 0

    @property
    def line_number(self) -> int:
        """One-based line number shown next to the callout."""

        return self.line_index + 1

    def walk(self) -> Iterator[Annotation]:
        """Yield this annotation followed by its descendants in pre-order."""

        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def fold(self, combine: Callable[[Annotation, list[T]], T]) -> T:
        """Combine the tree bottom-up without recursing per nesting level.

        Args:
            combine: Called once per node with the node and the results of
                its children, in child order.

        Returns:
            The result of ``combine`` for this annotation.
        """

        done: list[T] = []
        stack: list[tuple[Annotation, bool]] = [(self, False)]
        while stack:
            node, expanded = stack.pop()
            if not expanded:
                stack.append((node, True))
                stack.extend((child, False) for child in reversed(node.children))
                continue

            # Every finished subtree left exactly one result on ``done``.
            count = len(node.children)
            results = done[len(done) - count :]
            del done[len(done) - count :]
            done.append(combine(node, results))

        return done[0]

    def to_dict(self) -> dict[str, Any]:
        """Return a nested plain-data representation."""

        return self.fold(
            lambda node, children: {
                "line_index": node.line_index,
                "author": node.author,
                "body": node.body,
                "depth": node.depth,
                "timestamp": node.timestamp,
                "children": children,
            }
        )
