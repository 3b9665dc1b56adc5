"""Present arranged annotations."""

from __future__ import annotations

import re
from typing import Any

import click

from calloutnav.parser import Annotation
from calloutnav.parser.types import AnnotationList, TagRuleList

# Badge colour for authors without a configured rule.
NEUTRAL_COLOR = "#666666"

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{6})$")


def color_for(author: str, rules: TagRuleList) -> str:
    """Return the colour of the first rule matching ``author``."""

    author = author.lower()
    return next(
        (rule.color for rule in rules if rule.key == author), NEUTRAL_COLOR
    )


def navigation_line(line_index: int) -> int:
    """Return the line to place the cursor on when jumping to a callout.

    The cursor goes one line above the header so a folded callout is not
    expanded by the jump.
    """

    return max(0, line_index - 1)


def _rgb(color: str) -> tuple[int, int, int] | None:
    """Convert ``#RRGGBB`` to an RGB tuple, ``None`` for other tokens."""

    match = _HEX_RE.match(color.strip())
    if match is None:
        return None
    value = match.group(1)
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


def annotation_data(
    annotation: Annotation, rules: TagRuleList
) -> dict[str, Any]:
    """Return plain data for one annotation including display hints."""

    return annotation.fold(
        lambda node, children: {
            "line_index": node.line_index,
            "line_number": node.line_number,
            "navigation_line": navigation_line(node.line_index),
            "author": node.author,
            "color": color_for(node.author, rules),
            "body": node.body,
            "depth": node.depth,
            "timestamp": node.timestamp,
            "children": children,
        }
    )


def annotations_to_data(
    forest: AnnotationList, rules: TagRuleList
) -> list[dict[str, Any]]:
    """Return plain data for an arranged forest or flat list."""

    return [annotation_data(annotation, rules) for annotation in forest]


def _render_lines(
    forest: AnnotationList, rules: TagRuleList, color: bool
) -> list[str]:
    lines: list[str] = []

    # Pre-order over (annotation, level) pairs.
    stack = [(annotation, 0) for annotation in reversed(forest)]
    while stack:
        annotation, level = stack.pop()

        badge = f" {annotation.author.upper()} "
        rgb = _rgb(color_for(annotation.author, rules))
        if color and rgb is not None:
            badge = click.style(badge, fg=(255, 255, 255), bg=rgb, bold=True)

        hint = f"L:{annotation.line_number}"
        if color:
            hint = click.style(hint, dim=True)

        lines.append(f"{'  ' * level}{badge} {hint}  {annotation.body}")
        stack.extend(
            (child, level + 1) for child in reversed(annotation.children)
        )

    return lines


def render_text(
    forest: AnnotationList, rules: TagRuleList, color: bool = False
) -> str:
    """Render an arranged forest as an indented outline.

    Args:
        forest: Output of ``arrange``.
        rules: Tag rules providing badge colours.
        color: Emit ANSI styles.

    Returns:
        One line per annotation, children indented under their parent.
    """

    if not forest:
        return "No tracked callouts found."
    return "\n".join(_render_lines(forest, rules, color))
