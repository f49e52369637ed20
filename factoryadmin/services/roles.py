from __future__ import annotations

from typing import Any, Iterable, Optional

from factoryadmin.extensions import api
from factoryadmin.models import Role

from .base import build_objects, unwrap_list


def _payload(name: str, description: str, permissions: Iterable[str]) -> dict[str, Any]:
    return {
        "name": name,
        "description": description,
        "permissions": list(dict.fromkeys(permissions)),
    }


def list_roles(search: Optional[str] = None) -> list[Role]:
    data = api.get("/roles", params={"search": search}, error_message="Error fetching roles")
    return build_objects(unwrap_list(data, "roles"), Role.from_api)


def get_role(role_id: str) -> Role:
    return Role.from_api(api.get(f"/roles/{role_id}", error_message="Error fetching role") or {})


def create_role(name: str, description: str, permissions: Iterable[str]) -> Any:
    return api.post(
        "/roles",
        json=_payload(name, description, permissions),
        error_message="Error saving role",
    )


def update_role(role_id: str, name: str, description: str, permissions: Iterable[str]) -> Any:
    return api.put(
        f"/roles/{role_id}",
        json=_payload(name, description, permissions),
        error_message="Error saving role",
    )


def delete_role(role_id: str) -> Any:
    return api.delete(f"/roles/{role_id}", error_message="Error deleting role")
