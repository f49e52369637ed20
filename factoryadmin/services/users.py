from __future__ import annotations

from typing import Any, Mapping, Optional

from factoryadmin.extensions import api
from factoryadmin.models import Identity, UserAccount

from .base import build_objects, unwrap_list


def login(email: str, password: str) -> Identity:
    data = api.post(
        "/users/login",
        json={"email": email, "password": password},
        error_message="Login failed",
    )
    return Identity.from_api(data or {})


def list_users(search: Optional[str] = None) -> list[UserAccount]:
    data = api.get("/users", params={"search": search}, error_message="Error fetching users")
    return build_objects(unwrap_list(data, "users"), UserAccount.from_api)


def get_user(user_id: str) -> UserAccount:
    return UserAccount.from_api(api.get(f"/users/{user_id}", error_message="Error fetching user") or {})


def create_user(payload: Mapping[str, Any]) -> Any:
    return api.post("/users", json=dict(payload), error_message="Error saving user")


def update_user(user_id: str, payload: Mapping[str, Any]) -> Any:
    return api.put(f"/users/{user_id}", json=dict(payload), error_message="Error saving user")


def delete_user(user_id: str) -> Any:
    return api.delete(f"/users/{user_id}", error_message="Error deleting user")


def update_profile(payload: Mapping[str, Any]) -> Identity:
    data = api.put("/users/profile", json=dict(payload), error_message="Error updating profile")
    return Identity.from_api(data or {})
