import json
import os
import sys

import pytest

sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

from factoryadmin import create_app
from factoryadmin.extensions import api

API_BASE_URL = "http://backend.test/api"


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload
        self.content = b"" if payload is None else json.dumps(payload).encode("utf-8")
        self.text = self.content.decode("utf-8")

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("no body")
        return self._payload


class FakeBackend:
    """Stands in for the ``requests.Session`` used by the API client."""

    def __init__(self):
        self.headers = {}
        self.routes = {}
        self.calls = []

    def add(self, method, path, payload=None, status=200):
        self.routes[(method.upper(), path)] = (status, payload)

    def request(self, method, url, **kwargs):
        path = url[len(API_BASE_URL):] if url.startswith(API_BASE_URL) else url
        self.calls.append({"method": method, "path": path, **kwargs})
        status, payload = self.routes.get((method.upper(), path), (404, {"message": "Not found"}))
        return FakeResponse(status, payload)

    def last(self, method, path):
        for call in reversed(self.calls):
            if call["method"] == method and call["path"] == path:
                return call
        return None


def identity_payload(permissions=(), token="secret-token"):
    return {
        "_id": "u1",
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "role": {"_id": "r1", "name": "Manager", "permissions": list(permissions)},
        "token": token,
    }


@pytest.fixture
def backend(monkeypatch):
    fake = FakeBackend()
    monkeypatch.setattr(api, "session", fake)
    return fake


@pytest.fixture
def app(backend, tmp_path):
    app = create_app(
        {
            "TESTING": True,
            "SECRET_KEY": "test",
            "API_BASE_URL": API_BASE_URL,
            "LOG_DIR": str(tmp_path / "logs"),
        }
    )
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(client, backend):
    def _login(*permissions):
        backend.add("POST", "/users/login", identity_payload(permissions))
        return client.post(
            "/auth/login",
            data={"email": "ada@example.com", "password": "pw"},
            follow_redirects=False,
        )

    return _login
