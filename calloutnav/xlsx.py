"""Utilities for exporting annotations to Excel workbooks."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

from openpyxl import Workbook  # type: ignore[import-untyped]
from openpyxl.styles import Alignment  # type: ignore[import-untyped]
from openpyxl.utils import get_column_letter  # type: ignore[import-untyped]
from openpyxl.worksheet.table import (  # type: ignore[import-untyped]
    Table,
    TableStyleInfo,
)

from calloutnav.parser import Annotation
from calloutnav.parser.types import AnnotationList, TagRuleList
from calloutnav.render import color_for
from calloutnav.template import format_timestamp

Row = Dict[str, Any]

SHEET_NAME = "Annotation"
HEADERS = [
    "annotation_id",
    "parent_id",
    "position",
    "line",
    "author",
    "color",
    "depth",
    "timestamp",
    "body",
]


def _annotation_id(annotation: Annotation) -> str:
    """Line numbers are unique within a document."""

    return f"L{annotation.line_number}"


def _flatten(forest: AnnotationList, rules: TagRuleList) -> List[Row]:
    """Flatten an arranged forest into rows in presentation order.

    Args:
        forest: Output of ``arrange``.
        rules: Tag rules providing badge colours.

    Returns:
        One row per annotation, children following their parent and
        referencing it through ``parent_id``.
    """

    rows: List[Row] = []

    # Pre-order over (annotation, parent id) pairs.
    stack: list[tuple[Annotation, str | None]] = [
        (root, None) for root in reversed(forest)
    ]
    while stack:
        annotation, parent_id = stack.pop()
        annotation_id = _annotation_id(annotation)
        stamp = (
            format_timestamp(datetime.fromtimestamp(annotation.timestamp))
            if annotation.timestamp is not None
            else None
        )
        rows.append(
            {
                "annotation_id": annotation_id,
                "parent_id": parent_id,
                "position": len(rows) + 1,
                "line": annotation.line_number,
                "author": annotation.author,
                "color": color_for(annotation.author, rules),
                "depth": annotation.depth,
                "timestamp": stamp,
                "body": annotation.body,
            }
        )
        stack.extend(
            (child, annotation_id) for child in reversed(annotation.children)
        )

    return rows


def write_workbook(
    forest: AnnotationList, path: Path, rules: TagRuleList
) -> None:
    """Write arranged annotations into an Excel workbook.

    Args:
        forest: Output of ``arrange``.
        path: Destination file path for the workbook.
        rules: Tag rules providing badge colours.
    """

    rows = _flatten(forest, rules)

    # Replace the default sheet created by openpyxl.
    workbook = Workbook()
    default_sheet = workbook.active
    if default_sheet is not None:
        workbook.remove(default_sheet)

    ws = workbook.create_sheet(title=SHEET_NAME)
    ws.append(HEADERS)

    # Track which column indexes contain long text.
    long_text_columns: set[int] = set()

    for row in rows:
        values: List[Any] = []
        for idx, header in enumerate(HEADERS):
            cell_value = row.get(header)
            if isinstance(cell_value, str) and len(cell_value) > 50:
                long_text_columns.add(idx)
            values.append(cell_value)
        ws.append(values)

    # Wrap long text so bodies stay readable.
    for col_idx in long_text_columns:
        for col_cells in ws.iter_cols(
            min_col=col_idx + 1,
            max_col=col_idx + 1,
            min_row=1,
            max_row=ws.max_row,
        ):
            for cell in col_cells:
                cell.alignment = Alignment(wrapText=True)

    for idx, header in enumerate(HEADERS):
        col_letter = get_column_letter(idx + 1)
        if idx in long_text_columns:
            ws.column_dimensions[col_letter].width = 100
        elif header in ("body", "timestamp"):
            ws.column_dimensions[col_letter].width = 20
        else:
            ws.column_dimensions[col_letter].width = 12

    # A table needs at least one data row.
    if rows:
        end_column = get_column_letter(len(HEADERS))
        table = Table(
            displayName=SHEET_NAME, ref=f"A1:{end_column}{len(rows) + 1}"
        )
        table.tableStyleInfo = TableStyleInfo(
            name="TableStyleMedium9", showRowStripes=True
        )
        ws.add_table(table)

    workbook.save(path)
