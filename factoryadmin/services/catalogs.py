from __future__ import annotations

from typing import Any

from factoryadmin.extensions import api
from factoryadmin.models import Catalog

from .base import build_objects, unwrap_list


def list_catalogs() -> list[Catalog]:
    data = api.get("/catalogs", error_message="Error fetching catalogs")
    return build_objects(unwrap_list(data, "catalogs"), Catalog.from_api)


def get_catalog(catalog_id: str) -> Catalog:
    return Catalog.from_api(api.get(f"/catalogs/{catalog_id}", error_message="Error fetching catalog") or {})


def create_catalog(name: str, code: str) -> Any:
    return api.post("/catalogs", json={"name": name, "code": code}, error_message="Error saving catalog")


def update_catalog(catalog_id: str, name: str, code: str) -> Any:
    return api.put(
        f"/catalogs/{catalog_id}",
        json={"name": name, "code": code},
        error_message="Error saving catalog",
    )


def delete_catalog(catalog_id: str) -> Any:
    return api.delete(f"/catalogs/{catalog_id}", error_message="Error deleting catalog")
