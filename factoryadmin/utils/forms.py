"""Small parsers for submitted form values."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Optional

from flask import request


def form_text(name: str, default: str = "") -> str:
    return (request.form.get(name) or default).strip()


def parse_int(raw: Optional[str], *, minimum: Optional[int] = None) -> Optional[int]:
    """Return ``raw`` as an int, or ``None`` when it is blank, malformed or below ``minimum``."""

    if raw is None or not str(raw).strip():
        return None
    try:
        value = int(str(raw).strip())
    except ValueError:
        return None
    if minimum is not None and value < minimum:
        return None
    return value


def parse_decimal(raw: Optional[str], *, minimum: Optional[Decimal] = None) -> Optional[Decimal]:
    if raw is None or not str(raw).strip():
        return None
    try:
        value = Decimal(str(raw).strip())
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    if minimum is not None and value < minimum:
        return None
    return value
