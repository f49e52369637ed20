"""Tabular PDF export built on reportlab."""

from __future__ import annotations

from io import BytesIO
from typing import Iterable, Sequence

from flask import Response
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from .csv_export import Column, extract_value, serialize_value


def table_data(rows: Iterable[object], columns: Sequence[Column]) -> list[list[str]]:
    data = [[header for _, header in columns]]
    for row in rows:
        data.append([serialize_value(extract_value(row, field)) for field, _ in columns])
    return data


def build_table_pdf(rows: Iterable[object], columns: Sequence[Column], title: str) -> bytes:
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=24,
        leftMargin=24,
        topMargin=24,
        bottomMargin=24,
        title=title,
    )
    styles = getSampleStyleSheet()
    elements = [Paragraph(title, styles["Title"]), Spacer(1, 10)]

    table = Table(table_data(rows, columns), repeatRows=1)
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#366092")),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
                ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.whitesmoke]),
            ]
        )
    )
    elements.append(table)

    doc.build(elements)
    return buffer.getvalue()


def export_rows_to_pdf(
    rows: Iterable[object],
    columns: Sequence[Column],
    filename: str,
    *,
    title: str,
) -> Response:
    response = Response(build_table_pdf(rows, columns, title), mimetype="application/pdf")
    response.headers["Content-Disposition"] = f"attachment; filename={filename}"
    return response
