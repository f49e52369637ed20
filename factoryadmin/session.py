"""Authenticated identity storage and permission checks.

The identity returned by the backend on login (profile, role with its
permission tags, bearer token) is persisted as one JSON record under a fixed
key.  Absence of the record means the visitor is signed out.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, MutableMapping, Optional, Protocol

from flask import current_app, g, has_request_context, session

from .models import Identity
from .services.api_client import ApiError

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "user"


class AuthenticationError(Exception):
    """Raised when the backend rejects a login attempt."""

    def __init__(self, message: str = "Login failed") -> None:
        super().__init__(message)
        self.message = message


class IdentityStore(Protocol):
    def load(self) -> Optional[str]:
        ...

    def save(self, value: str) -> None:
        ...

    def clear(self) -> None:
        ...


class MappingStorage:
    """Keeps the serialized identity in any mutable mapping."""

    def __init__(self, mapping: MutableMapping[str, Any], key: str = DEFAULT_STORAGE_KEY) -> None:
        self._mapping = mapping
        self.key = key

    def load(self) -> Optional[str]:
        return self._mapping.get(self.key)

    def save(self, value: str) -> None:
        self._mapping[self.key] = value

    def clear(self) -> None:
        self._mapping.pop(self.key, None)


class MemoryStorage(MappingStorage):
    def __init__(self, key: str = DEFAULT_STORAGE_KEY) -> None:
        super().__init__({}, key)


class FlaskSessionStorage(MappingStorage):
    """Persists the identity in the signed session cookie across reloads."""

    def __init__(self, key: str = DEFAULT_STORAGE_KEY) -> None:
        super().__init__(session, key)

    def save(self, value: str) -> None:
        super().save(value)
        session.permanent = True


class SessionManager:
    def __init__(self, storage: IdentityStore, users_service=None) -> None:
        self.storage = storage
        if users_service is None:
            from .services import users as users_service
        self.users_service = users_service

    @property
    def current(self) -> Optional[Identity]:
        raw = self.storage.load()
        if not raw:
            return None
        try:
            payload = json.loads(raw)
            if not isinstance(payload, Mapping):
                raise ValueError("stored identity is not an object")
            return Identity.from_dict(payload)
        except (TypeError, ValueError) as exc:
            logger.error("Failed to parse the stored identity: %s", exc)
            self.storage.clear()
            return None

    @property
    def token(self) -> Optional[str]:
        identity = self.current
        if identity is None or not identity.token:
            return None
        return identity.token

    @property
    def is_authenticated(self) -> bool:
        return self.current is not None

    def _store(self, identity: Identity) -> None:
        self.storage.save(json.dumps(identity.to_dict()))

    def login(self, email: str, password: str) -> Identity:
        try:
            identity = self.users_service.login(email, password)
        except ApiError as exc:
            logger.warning("Login failed for %s: %s", email, exc.message)
            raise AuthenticationError(exc.message or "Login failed") from exc
        self._store(identity)
        logger.info("User %s signed in", identity.email or email)
        return identity

    def logout(self) -> None:
        identity = self.current
        self.storage.clear()
        if identity is not None:
            logger.info("User %s signed out", identity.email)

    def update_user(self, identity: Identity) -> Identity:
        existing = self.current
        if existing is not None:
            if not identity.id:
                identity.id = existing.id
            if not identity.token:
                identity.token = existing.token
            # Profile responses may omit the populated role.
            if identity.role is None:
                identity.role = existing.role
        self._store(identity)
        return identity

    def has_permission(self, permission: str) -> bool:
        identity = self.current
        if identity is None or identity.role is None:
            return False
        return identity.role.grants(permission)


def get_session_manager() -> SessionManager:
    """Return the session manager bound to the current request."""

    manager = g.get("session_manager")
    if manager is None:
        key = current_app.config.get("SESSION_USER_KEY", DEFAULT_STORAGE_KEY)
        manager = SessionManager(FlaskSessionStorage(key))
        g.session_manager = manager
    return manager


def current_token() -> Optional[str]:
    if not has_request_context():
        return None
    return get_session_manager().token


def has_permission(permission: str) -> bool:
    if not has_request_context():
        return False
    return get_session_manager().has_permission(permission)
