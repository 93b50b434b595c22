from __future__ import annotations

import logging
from http.client import HTTPConnection, HTTPException, HTTPSConnection
from typing import Any
from urllib.parse import urlparse

from .jsonutil import json_bytes, read_json
from .storage import TOKEN_KEY


logger = logging.getLogger(__name__)


class GatewayError(Exception):
    def __init__(self, message: str, status: int | None = None, payload: Any = None):
        super().__init__(message)
        self.status = status
        self.payload = payload

    @property
    def message(self) -> str:
        return str(self)


def error_message(status: int, payload: Any) -> str:
    if isinstance(payload, dict):
        for key in ("message", "error"):
            value = payload.get(key)
            if value:
                return str(value)
    return f"HTTP error! status: {status}"


class Gateway:
    def __init__(self, base_url: str, storage, timeout: float | None = None):
        parsed = urlparse(base_url)
        if parsed.scheme not in ("http", "https") or not parsed.hostname:
            raise ValueError(f"invalid base url: {base_url!r}")
        self.base_url = base_url.rstrip("/")
        self.storage = storage
        self.timeout = timeout
        self._scheme = parsed.scheme
        self._host = parsed.hostname
        self._port = parsed.port
        self._prefix = parsed.path.rstrip("/")

    def auth_headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self.storage.get_item(TOKEN_KEY)
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _connection(self) -> HTTPConnection:
        cls = HTTPSConnection if self._scheme == "https" else HTTPConnection
        return cls(self._host, self._port, timeout=self.timeout)

    def request(self, method: str, endpoint: str, *, json_body: Any = None) -> Any:
        headers = self.auth_headers()
        body = None
        if json_body is not None:
            body = json_bytes(json_body)
            headers["Content-Length"] = str(len(body))
        conn = self._connection()
        try:
            conn.request(method, self._prefix + endpoint, body=body, headers=headers)
            res = conn.getresponse()
            raw = res.read()
            status = res.status
        except (OSError, HTTPException) as e:
            logger.warning("%s %s failed: %s", method, endpoint, e)
            raise GatewayError(str(e) or e.__class__.__name__) from e
        finally:
            conn.close()

        payload = read_json(raw)
        if not 200 <= status < 300:
            logger.warning("%s %s -> %s", method, endpoint, status)
            raise GatewayError(error_message(status, payload), status=status, payload=payload)
        return {} if payload is None else payload

    # auth
    def login(self, username: str, password: str) -> Any:
        return self.request("POST", "/auth/login", json_body={"username": username, "password": password})

    def register(self, user_data: dict[str, Any]) -> Any:
        return self.request("POST", "/auth/register", json_body=user_data)

    # users
    def get_current_user(self) -> Any:
        return self.request("GET", "/users/me")

    def get_all_users(self) -> Any:
        return self.request("GET", "/users")

    def get_user_by_id(self, user_id) -> Any:
        return self.request("GET", f"/users/{user_id}")

    def create_user(self, user_data: dict[str, Any]) -> Any:
        return self.request("POST", "/users", json_body=user_data)

    def update_user(self, user_id, user_data: dict[str, Any]) -> Any:
        return self.request("PUT", f"/users/{user_id}", json_body=user_data)

    def delete_user(self, user_id) -> Any:
        return self.request("DELETE", f"/users/{user_id}")

    # requests
    def create_request(self, request_data: dict[str, Any]) -> Any:
        return self.request("POST", "/requests", json_body=request_data)

    def get_all_requests(self) -> Any:
        return self.request("GET", "/requests")

    def get_my_requests(self) -> Any:
        return self.request("GET", "/requests/my-requests")

    def get_request_by_id(self, request_id) -> Any:
        return self.request("GET", f"/requests/{request_id}")

    def update_request_status(self, request_id, status_data: dict[str, Any]) -> Any:
        return self.request("PUT", f"/requests/{request_id}/status", json_body=status_data)

    def delete_request(self, request_id) -> Any:
        return self.request("DELETE", f"/requests/{request_id}")

    def health_check(self) -> Any:
        return self.request("GET", "/health")

    def get_dashboard_stats(self) -> Any:
        return self.request("GET", "/dashboard/stats")
