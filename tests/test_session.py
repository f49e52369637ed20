import json

import pytest

from factoryadmin.models import Identity
from factoryadmin.services.api_client import ApiError
from factoryadmin.session import AuthenticationError, MemoryStorage, SessionManager

from conftest import identity_payload


class StubUsersService:
    def __init__(self, payload=None, error=None):
        self.payload = payload
        self.error = error
        self.calls = []

    def login(self, email, password):
        self.calls.append((email, password))
        if self.error is not None:
            raise self.error
        return Identity.from_api(self.payload)


def make_manager(payload=None, error=None):
    storage = MemoryStorage()
    return SessionManager(storage, StubUsersService(payload, error)), storage


def test_signed_out_manager_denies_everything():
    manager, _ = make_manager()

    assert manager.current is None
    assert manager.token is None
    assert manager.is_authenticated is False
    assert manager.has_permission("view_dashboard") is False


def test_login_stores_identity_and_permissions():
    manager, storage = make_manager(identity_payload(["view_products", "manage_stock"]))

    identity = manager.login("ada@example.com", "pw")

    assert identity.token == "secret-token"
    assert manager.is_authenticated is True
    stored = json.loads(storage.load())
    assert stored["email"] == "ada@example.com"
    assert sorted(stored["role"]["permissions"]) == ["manage_stock", "view_products"]
    assert manager.has_permission("view_products")
    assert manager.has_permission("manage_stock")
    assert not manager.has_permission("view_users")


def test_permission_match_is_exact():
    manager, _ = make_manager(identity_payload(["view_products"]))
    manager.login("ada@example.com", "pw")

    assert not manager.has_permission("view_product")
    assert not manager.has_permission("view_*")
    assert not manager.has_permission("")


def test_identity_without_role_has_no_permissions():
    payload = identity_payload()
    payload["role"] = None
    manager, _ = make_manager(payload)
    manager.login("ada@example.com", "pw")

    assert manager.current is not None
    assert manager.has_permission("view_dashboard") is False


def test_login_failure_carries_server_message():
    manager, storage = make_manager(error=ApiError("Invalid email or password", status_code=401))

    with pytest.raises(AuthenticationError) as excinfo:
        manager.login("ada@example.com", "wrong")

    assert excinfo.value.message == "Invalid email or password"
    assert storage.load() is None


def test_login_failure_without_message_uses_fallback():
    manager, _ = make_manager(error=ApiError("", status_code=500))

    with pytest.raises(AuthenticationError) as excinfo:
        manager.login("ada@example.com", "pw")

    assert excinfo.value.message == "Login failed"


def test_logout_clears_identity():
    manager, storage = make_manager(identity_payload(["view_dashboard"]))
    manager.login("ada@example.com", "pw")

    manager.logout()

    assert storage.load() is None
    assert manager.current is None
    assert manager.has_permission("view_dashboard") is False


def test_corrupt_record_is_discarded():
    manager, storage = make_manager()
    storage.save("{not json")

    assert manager.current is None
    assert storage.load() is None


def test_non_object_record_is_discarded():
    manager, storage = make_manager()
    storage.save(json.dumps(["a", "b"]))

    assert manager.current is None
    assert storage.load() is None


def test_update_user_keeps_token_and_role_when_missing():
    manager, _ = make_manager(identity_payload(["view_reports"]))
    manager.login("ada@example.com", "pw")

    updated = manager.update_user(Identity.from_api({"_id": "u1", "name": "Ada L.", "email": "ada@new.example"}))

    current = manager.current
    assert updated.token == "secret-token"
    assert current.name == "Ada L."
    assert current.email == "ada@new.example"
    assert current.token == "secret-token"
    assert manager.has_permission("view_reports")


def test_update_user_replaces_token_when_provided():
    manager, _ = make_manager(identity_payload(["view_reports"]))
    manager.login("ada@example.com", "pw")

    manager.update_user(Identity.from_api(identity_payload(["view_users"], token="fresh")))

    assert manager.token == "fresh"
    assert manager.has_permission("view_users")
    assert not manager.has_permission("view_reports")


def test_identity_round_trips_through_dict():
    identity = Identity.from_api(identity_payload(["view_dashboard", "view_roles"]))

    restored = Identity.from_dict(identity.to_dict())

    assert restored == identity
    assert restored.permissions == frozenset({"view_dashboard", "view_roles"})
    assert restored.get_id() == "u1"
