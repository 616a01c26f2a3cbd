"""Utilities for exporting the note index to Excel workbooks."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

from openpyxl import Workbook  # type: ignore[import-untyped]
from openpyxl.styles import Alignment  # type: ignore[import-untyped]
from openpyxl.utils import get_column_letter  # type: ignore[import-untyped]
from openpyxl.worksheet.table import (  # type: ignore[import-untyped]
    Table,
    TableStyleInfo,
)

Rows = List[Dict[str, Any]]
Sheets = Dict[str, Rows]

# Sheet names for each exported collection.
SHEET_NAMES = {"notes": "Note", "references": "Reference"}


def _sheets(data: Dict[str, Rows]) -> Sheets:
    """Map exported collections to sheet names, dropping empty ones."""

    return {
        SHEET_NAMES.get(key, key.title()): rows
        for key, rows in data.items()
        if rows
    }


def write_workbook(data: Dict[str, Rows], path: Path) -> None:
    """Write exported index data into an Excel workbook.

    Args:
        data: Mapping of collection names to row dictionaries.
        path: Destination file path for the workbook.
    """

    sheets = _sheets(data)

    workbook = Workbook()

    # Remove the default sheet created by openpyxl when present.
    default_sheet = workbook.active
    if default_sheet is not None:
        workbook.remove(default_sheet)

    # openpyxl refuses to save a workbook without sheets.
    if not sheets:
        workbook.create_sheet(title=SHEET_NAMES["notes"])

    for sheet_name, rows in sheets.items():
        ws = workbook.create_sheet(title=sheet_name)

        headers = list(rows[0].keys())
        ws.append(headers)

        # Columns holding long text are wrapped and widened.
        long_text_columns: set[int] = set()

        for row in rows:
            values: List[Any] = []
            for idx, header in enumerate(headers):
                cell_value = row.get(header)
                if isinstance(cell_value, str) and len(cell_value) > 50:
                    long_text_columns.add(idx)
                values.append(cell_value)
            ws.append(values)

        for col_idx in long_text_columns:
            for col_cells in ws.iter_cols(
                min_col=col_idx + 1,
                max_col=col_idx + 1,
                min_row=1,
                max_row=ws.max_row,
            ):
                for cell in col_cells:
                    cell.alignment = Alignment(wrapText=True)

        for idx, header in enumerate(headers):
            col_letter = get_column_letter(idx + 1)
            if idx in long_text_columns:
                ws.column_dimensions[col_letter].width = 80
            else:
                ws.column_dimensions[col_letter].width = max(12, len(header) + 2)

        # Each sheet holds a single table named after the sheet.
        end_column = get_column_letter(len(headers))
        end_row = len(rows) + 1
        table = Table(displayName=sheet_name, ref=f"A1:{end_column}{end_row}")
        table.tableStyleInfo = TableStyleInfo(
            name="TableStyleMedium9", showRowStripes=True
        )
        ws.add_table(table)

    workbook.save(path)
