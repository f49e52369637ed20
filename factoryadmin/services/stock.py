from __future__ import annotations

from typing import Any, Optional

from factoryadmin.extensions import api
from factoryadmin.models import Page, StockTransaction

from .base import build_page


def list_transactions(
    *,
    page: int = 1,
    limit: Optional[int] = None,
    search: Optional[str] = None,
    type: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
) -> Page:
    data = api.get(
        "/stock",
        params={
            "page": page,
            "limit": limit,
            "search": search,
            "type": type,
            "startDate": start_date,
            "endDate": end_date,
        },
        error_message="Error fetching transactions",
    )
    return build_page(data, "transactions", StockTransaction.from_api, page=page, limit=limit)


def create_transaction(product_id: str, type: str, quantity: int, reason: str = "") -> Any:
    return api.post(
        "/stock",
        json={
            "productId": product_id,
            "type": type,
            "quantity": quantity,
            "reason": reason,
        },
        error_message="Error adding stock entry",
    )
