from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping, Optional, TypeVar

from factoryadmin.models import Page

T = TypeVar("T")


def unwrap_list(payload: Any, key: str) -> list[Any]:
    """Return the records of a list response.

    List endpoints answer either with a bare JSON array or with an object that
    carries the array under ``key`` next to paging metadata.
    """

    if payload is None:
        return []
    if isinstance(payload, list):
        return payload
    if isinstance(payload, Mapping):
        records = payload.get(key)
        if isinstance(records, list):
            return records
    return []


def build_objects(records: Iterable[Mapping[str, Any]], factory: Callable[[Mapping[str, Any]], T]) -> list[T]:
    return [factory(record) for record in records if isinstance(record, Mapping)]


def _as_positive_int(value: Any, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def build_page(
    payload: Any,
    key: str,
    factory: Callable[[Mapping[str, Any]], T],
    *,
    page: int = 1,
    limit: Optional[int] = None,
) -> Page:
    items = tuple(build_objects(unwrap_list(payload, key), factory))
    if not isinstance(payload, Mapping):
        return Page(items=items, page=1, pages=1, total=len(items))

    current = _as_positive_int(payload.get("page"), page)
    total = _as_positive_int(payload.get("total"), 0) if payload.get("total") is not None else len(items)
    pages = payload.get("pages") or payload.get("totalPages")
    if pages is None and limit:
        pages = max(1, -(-total // limit))
    return Page(items=items, page=current, pages=_as_positive_int(pages, 1), total=total)
