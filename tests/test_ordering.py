"""Tests for arranging annotations for presentation."""

from __future__ import annotations

from calloutnav.parser import (
    Annotation,
    OrderOptions,
    TagRule,
    arrange,
    extract_annotations,
    order_children,
)


def _ann(
    line: int, depth: int = 1, timestamp: float | None = None
) -> Annotation:
    return Annotation(
        line_index=line,
        author="me",
        body=f"n{line}",
        depth=depth,
        timestamp=timestamp,
    )


def _bodies(forest: list[Annotation]) -> list[str]:
    return [node.body for node in forest]


def _shape(forest: list[Annotation]) -> list[object]:
    return [(node.body, _shape(list(node.children))) for node in forest]


def test_worked_example_line_order(
    sample_text: str, rules: list[TagRule]
) -> None:
    annotations = extract_annotations(sample_text, rules)

    forest = arrange(annotations, OrderOptions())

    assert [(n.body[0], _bodies(list(n.children))) for n in forest] == [
        ("A", ["B"]),
        ("C", []),
    ]


def test_worked_example_chronological_flat(
    sample_text: str, rules: list[TagRule]
) -> None:
    annotations = extract_annotations(sample_text, rules)

    ascending = arrange(
        annotations, OrderOptions(by_timestamp=True, flatten=True)
    )
    descending = arrange(
        annotations,
        OrderOptions(by_timestamp=True, flatten=True, ascending=False),
    )

    assert [n.body[0] for n in ascending] == ["A", "B", "C"]
    assert [n.body[0] for n in descending] == ["C", "A", "B"]
    assert all(n.children == () for n in ascending + descending)


def test_line_mode_descending_reverses_roots_only() -> None:
    flat = [_ann(0), _ann(1, 2), _ann(2, 2), _ann(3), _ann(4, 2)]

    ascending = arrange(flat, OrderOptions(ascending=True))
    descending = arrange(flat, OrderOptions(ascending=False))

    assert _shape(ascending) == [
        ("n0", [("n1", []), ("n2", [])]),
        ("n3", [("n4", [])]),
    ]
    assert _shape(descending) == [
        ("n3", [("n4", [])]),
        ("n0", [("n1", []), ("n2", [])]),
    ]


def test_line_mode_sorts_unordered_input_before_nesting() -> None:
    flat = [_ann(2), _ann(0), _ann(1, 2)]

    forest = arrange(flat, OrderOptions())

    assert _shape(forest) == [("n0", [("n1", [])]), ("n2", [])]


def test_chronological_sort_is_stable_for_ties() -> None:
    flat = [_ann(0, timestamp=5), _ann(1), _ann(2, timestamp=5), _ann(3)]

    ascending = arrange(flat, OrderOptions(by_timestamp=True))
    descending = arrange(flat, OrderOptions(by_timestamp=True, ascending=False))

    assert _bodies(ascending) == ["n1", "n3", "n0", "n2"]
    assert _bodies(descending) == ["n0", "n2", "n1", "n3"]


def test_chronological_nested_keeps_document_structure() -> None:
    # The reply is older than its parent but still nests under it.
    flat = [
        _ann(0, timestamp=300),
        _ann(1, 2, timestamp=100),
        _ann(2, 2, timestamp=200),
        _ann(3, timestamp=50),
    ]

    ascending = arrange(flat, OrderOptions(by_timestamp=True, flatten=False))
    descending = arrange(
        flat, OrderOptions(by_timestamp=True, flatten=False, ascending=False)
    )

    assert _shape(ascending) == [
        ("n3", []),
        ("n0", [("n1", []), ("n2", [])]),
    ]
    assert _shape(descending) == [
        ("n0", [("n2", []), ("n1", [])]),
        ("n3", []),
    ]


def test_chronological_nested_orders_every_level() -> None:
    flat = [
        _ann(0, timestamp=1),
        _ann(1, 2, timestamp=9),
        _ann(2, 3, timestamp=7),
        _ann(3, 3, timestamp=3),
        _ann(4, 2, timestamp=2),
    ]

    forest = arrange(flat, OrderOptions(by_timestamp=True, flatten=False))

    assert _shape(forest) == [
        ("n0", [("n4", []), ("n1", [("n3", []), ("n2", [])])]),
    ]


def test_flatten_is_ignored_in_line_mode() -> None:
    flat = [_ann(0), _ann(1, 2)]

    forest = arrange(flat, OrderOptions(by_timestamp=False, flatten=True))

    assert _shape(forest) == [("n0", [("n1", [])])]


def test_order_children_line_mode_never_reverses() -> None:
    children = [_ann(1, 2), _ann(2, 2)]

    ordered = order_children(children, OrderOptions(ascending=False))

    assert _bodies(ordered) == ["n1", "n2"]


def test_order_children_chronological_mode() -> None:
    children = [_ann(1, 2, timestamp=20), _ann(2, 2, timestamp=10)]

    ordered = order_children(children, OrderOptions(by_timestamp=True))

    assert _bodies(ordered) == ["n2", "n1"]


def test_arrange_leaves_input_untouched() -> None:
    flat = [_ann(0), _ann(1, 2)]

    arrange(flat, OrderOptions())

    assert flat == [_ann(0), _ann(1, 2)]


def test_empty_input() -> None:
    assert arrange([], OrderOptions()) == []
    assert arrange([], OrderOptions(by_timestamp=True)) == []


def test_deep_reply_chain_is_arranged_in_every_mode(
    rules: list[TagRule],
) -> None:
    text = "\n".join("> " * (i + 1) + "[!me] r" for i in range(2000))
    annotations = extract_annotations(text, rules)

    for options in (
        OrderOptions(),
        OrderOptions(ascending=False),
        OrderOptions(by_timestamp=True, flatten=False),
    ):
        forest = arrange(annotations, options)

        assert len(forest) == 1
        depths = [node.depth for node in forest[0].walk()]
        assert depths == list(range(1, 2001))
