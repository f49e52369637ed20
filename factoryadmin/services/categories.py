from __future__ import annotations

from typing import Any

from factoryadmin.extensions import api
from factoryadmin.models import Category

from .base import build_objects, unwrap_list


def _payload(name: str, code: str, description: str) -> dict[str, Any]:
    return {"name": name, "code": code, "description": description}


def list_categories() -> list[Category]:
    data = api.get("/categories", error_message="Error fetching categories")
    return build_objects(unwrap_list(data, "categories"), Category.from_api)


def get_category(category_id: str) -> Category:
    return Category.from_api(
        api.get(f"/categories/{category_id}", error_message="Error fetching category") or {}
    )


def create_category(name: str, code: str, description: str = "") -> Any:
    return api.post(
        "/categories",
        json=_payload(name, code, description),
        error_message="Error saving category",
    )


def update_category(category_id: str, name: str, code: str, description: str = "") -> Any:
    return api.put(
        f"/categories/{category_id}",
        json=_payload(name, code, description),
        error_message="Error saving category",
    )


def delete_category(category_id: str) -> Any:
    return api.delete(f"/categories/{category_id}", error_message="Error deleting category")
