"""Excel (.xlsx) export built on openpyxl."""

from __future__ import annotations

import io
from decimal import Decimal
from typing import Any, Iterable, Sequence

from flask import Response
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from .csv_export import Column, extract_value

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

_HEADER_FILL = PatternFill(start_color="366092", end_color="366092", fill_type="solid")
_HEADER_FONT = Font(bold=True, color="FFFFFF")


def _cell_value(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    return value


def _auto_size_columns(worksheet) -> None:
    for column in worksheet.columns:
        letter = get_column_letter(column[0].column)
        longest = max((len(str(cell.value)) for cell in column if cell.value is not None), default=0)
        worksheet.column_dimensions[letter].width = min(longest + 2, 50)


def build_workbook(rows: Iterable[object], columns: Sequence[Column], sheet_title: str) -> bytes:
    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = sheet_title[:31]

    worksheet.append([header for _, header in columns])
    for cell in worksheet[1]:
        cell.fill = _HEADER_FILL
        cell.font = _HEADER_FONT
        cell.alignment = Alignment(horizontal="center", vertical="center")

    for row in rows:
        worksheet.append([_cell_value(extract_value(row, field)) for field, _ in columns])

    _auto_size_columns(worksheet)

    output = io.BytesIO()
    workbook.save(output)
    return output.getvalue()


def export_rows_to_xlsx(
    rows: Iterable[object],
    columns: Sequence[Column],
    filename: str,
    *,
    sheet_title: str = "Sheet1",
) -> Response:
    payload = build_workbook(rows, columns, sheet_title)
    response = Response(payload, mimetype=XLSX_MIMETYPE)
    response.headers["Content-Disposition"] = f"attachment; filename={filename}"
    return response
