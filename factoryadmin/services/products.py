from __future__ import annotations

import random
from typing import Any, Mapping, Optional

from werkzeug.datastructures import FileStorage

from factoryadmin.extensions import api
from factoryadmin.models import Page, Product

from .base import build_page

FORM_FIELDS: tuple[tuple[str, str], ...] = (
    ("name", "name"),
    ("sku", "sku"),
    ("category", "category"),
    ("description", "description"),
    ("unit_price", "unitPrice"),
    ("cost_price", "costPrice"),
    ("stock_quantity", "stockQuantity"),
)


def generate_sku(name: str = "", *, rng: Optional[random.Random] = None) -> str:
    """Suggest a SKU from the product name, e.g. ``SUM-4821``."""

    prefix = name.strip()[:3].upper() if name and name.strip() else "PROD"
    number = (rng or random).randint(1000, 9999)
    return f"{prefix}-{number}"


def _multipart(fields: Mapping[str, Any], image: Optional[FileStorage]) -> dict[str, tuple]:
    # Plain fields travel as filename-less parts so the body is always
    # multipart/form-data, with or without an image.
    parts: dict[str, tuple] = {}
    for form_key, api_key in FORM_FIELDS:
        value = fields.get(form_key)
        parts[api_key] = (None, "" if value is None else str(value))

    if image is not None and image.filename:
        parts["image"] = (
            image.filename,
            image.stream,
            image.mimetype or "application/octet-stream",
        )
    return parts


def list_products(
    *,
    keyword: Optional[str] = None,
    category: Optional[str] = None,
    page: Optional[int] = None,
    limit: Optional[int] = None,
) -> Page:
    data = api.get(
        "/products",
        params={"keyword": keyword, "category": category, "page": page, "limit": limit},
        error_message="Error fetching products",
    )
    return build_page(data, "products", Product.from_api, page=page or 1, limit=limit)


def all_products() -> list[Product]:
    return list(list_products().items)


def get_product(product_id: str) -> Product:
    return Product.from_api(api.get(f"/products/{product_id}", error_message="Error fetching product") or {})


def create_product(fields: Mapping[str, Any], image: Optional[FileStorage] = None) -> Any:
    return api.post("/products", files=_multipart(fields, image), error_message="Error saving product")


def update_product(product_id: str, fields: Mapping[str, Any], image: Optional[FileStorage] = None) -> Any:
    return api.put(
        f"/products/{product_id}",
        files=_multipart(fields, image),
        error_message="Error saving product",
    )


def delete_product(product_id: str) -> Any:
    return api.delete(f"/products/{product_id}", error_message="Error deleting product")
