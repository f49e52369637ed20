"""Filtering and paging for lists already fetched from the backend."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Sequence, TypeVar

T = TypeVar("T")


def matches_query(record: Any, query: str, fields: Sequence[Callable[[Any], Optional[str]]]) -> bool:
    needle = query.strip().lower()
    if not needle:
        return True
    for accessor in fields:
        value = accessor(record)
        if value and needle in str(value).lower():
            return True
    return False


def filter_records(
    records: Iterable[T],
    query: Optional[str],
    fields: Sequence[Callable[[Any], Optional[str]]],
) -> list[T]:
    """Case-insensitive substring match of ``query`` over the given fields."""

    if not query or not query.strip():
        return list(records)
    return [record for record in records if matches_query(record, query, fields)]


@dataclass(frozen=True)
class Pagination:
    items: tuple
    page: int
    pages: int
    total: int
    per_page: int

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.pages


def parse_page(raw: Any) -> int:
    try:
        page = int(raw)
    except (TypeError, ValueError):
        return 1
    return page if page > 0 else 1


def paginate(records: Sequence[T], page: int, per_page: int) -> Pagination:
    per_page = max(per_page, 1)
    total = len(records)
    pages = max(1, -(-total // per_page))
    page = min(max(page, 1), pages)
    start = (page - 1) * per_page
    return Pagination(
        items=tuple(records[start:start + per_page]),
        page=page,
        pages=pages,
        total=total,
        per_page=per_page,
    )
