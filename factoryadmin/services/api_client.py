"""HTTP client for the inventory REST backend.

Every call carries the bearer token of the current session, so pages never
build headers themselves.  Failures are normalised to :class:`ApiError` with
the server's ``message`` text when it supplied one.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional

import requests
from flask import Flask

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "Request failed"


class ApiError(Exception):
    """Raised when the backend answers with a non-2xx status or is unreachable."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        payload: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401


def _server_message(response: requests.Response) -> Optional[str]:
    try:
        payload = response.json()
    except ValueError:
        return None
    if isinstance(payload, Mapping):
        message = payload.get("message")
        if isinstance(message, str) and message.strip():
            return message.strip()
    return None


class ApiClient:
    def __init__(
        self,
        base_url: str = "",
        *,
        timeout: float = 10,
        token_provider: Optional[Callable[[], Optional[str]]] = None,
        on_unauthorized: Optional[Callable[[ApiError], None]] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.token_provider = token_provider
        self.on_unauthorized = on_unauthorized
        self.session = session or requests.Session()
        self.session.headers["Accept"] = "application/json"

    def init_app(
        self,
        app: Flask,
        *,
        token_provider: Callable[[], Optional[str]],
        on_unauthorized: Optional[Callable[[ApiError], None]] = None,
    ) -> None:
        self.base_url = str(app.config.get("API_BASE_URL", "")).rstrip("/")
        self.timeout = float(app.config.get("API_TIMEOUT", 10))
        self.token_provider = token_provider
        self.on_unauthorized = on_unauthorized
        app.extensions["factoryadmin_api"] = self

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _auth_headers(self) -> dict[str, str]:
        if self.token_provider is None:
            return {}
        token = self.token_provider()
        if not token:
            return {}
        return {"Authorization": f"Bearer {token}"}

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
        data: Optional[Mapping[str, Any]] = None,
        files: Optional[Mapping[str, Any]] = None,
        error_message: str = DEFAULT_ERROR_MESSAGE,
    ) -> Any:
        url = self.url_for(path)
        clean_params = None
        if params:
            clean_params = {key: value for key, value in params.items() if value not in (None, "")}

        try:
            response = self.session.request(
                method,
                url,
                params=clean_params,
                json=json,
                data=data,
                files=files,
                headers=self._auth_headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.error("Backend request %s %s failed: %s", method, url, exc)
            raise ApiError(error_message) from exc

        if not response.ok:
            message = _server_message(response) or error_message
            payload = None
            try:
                payload = response.json()
            except ValueError:
                payload = response.text
            error = ApiError(message, status_code=response.status_code, payload=payload)
            logger.warning(
                "Backend request %s %s returned %s: %s",
                method,
                url,
                response.status_code,
                message,
            )
            if error.is_unauthorized and self.on_unauthorized is not None:
                self.on_unauthorized(error)
            raise error

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    def get(self, path: str, **kwargs: Any) -> Any:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> Any:
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs: Any) -> Any:
        return self.request("PUT", path, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> Any:
        return self.request("DELETE", path, **kwargs)
