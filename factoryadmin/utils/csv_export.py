"""CSV export utilities."""

from __future__ import annotations

import csv
import io
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Iterable, Sequence, Union

from flask import Response, stream_with_context

# A column is (field, header); ``field`` is an attribute/key name or a callable.
Column = tuple[Union[str, Callable[[Any], Any]], str]


def serialize_value(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


def extract_value(row: Any, field) -> Any:
    if callable(field):
        return field(row)
    if isinstance(row, dict):
        return row.get(field)
    return getattr(row, field, None)


def export_rows_to_csv(
    rows: Iterable[object],
    columns: Sequence[Column],
    filename: str,
) -> Response:
    headers = [header for _, header in columns]

    def generate():
        output = io.StringIO()
        writer = csv.writer(output)
        writer.writerow(headers)
        yield output.getvalue()
        output.seek(0)
        output.truncate(0)
        for row in rows:
            writer.writerow([serialize_value(extract_value(row, field)) for field, _ in columns])
            yield output.getvalue()
            output.seek(0)
            output.truncate(0)

    response = Response(stream_with_context(generate()), mimetype="text/csv")
    response.headers["Content-Disposition"] = f"attachment; filename={filename}"
    return response
