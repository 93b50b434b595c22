from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from .gateway import GatewayError
from .jsonutil import json_dumps
from .storage import TOKEN_KEY, USER_KEY


logger = logging.getLogger(__name__)

OPERATOR_ROLE = "operator"
USER_ROLE = "user"


@dataclass(frozen=True)
class LoginResult:
    success: bool
    message: str | None = None


def _normalize_login_response(response: Any) -> tuple[str, dict[str, Any]] | None:
    # Accepts {success, token, user} and the older {token, user}; the flag adds nothing.
    if not isinstance(response, dict):
        return None
    token = response.get("token")
    user = response.get("user")
    if not token or not isinstance(user, dict) or not user:
        return None
    return str(token), user


class SessionStore:
    def __init__(self, gateway, storage):
        self.gateway = gateway
        self.storage = storage
        self.user: dict[str, Any] | None = None
        self.is_authenticated = False
        self.loading = True
        self._mounted = True

    @property
    def token(self) -> str | None:
        return self.storage.get_item(TOKEN_KEY)

    @property
    def role(self) -> str | None:
        return None if not self.user else self.user.get("role")

    def has_role(self, *roles: str) -> bool:
        return self.is_authenticated and self.role in roles

    @property
    def is_operator(self) -> bool:
        return self.has_role(OPERATOR_ROLE)

    def initialize(self) -> None:
        if not self.token:
            self.loading = False
            return
        try:
            user = self.gateway.get_current_user()
        except GatewayError as e:
            if not self._mounted:
                return
            logger.info("stored token rejected (%s); clearing session", e.status)
            self._forget()
            self.loading = False
            return
        if not self._mounted:
            return
        self.user = user
        self.is_authenticated = True
        self.loading = False

    def close(self) -> None:
        self._mounted = False

    def login(self, username: str, password: str) -> LoginResult:
        try:
            response = self.gateway.login(username, password)
        except GatewayError as e:
            return LoginResult(False, e.message or "Login failed")
        normalized = _normalize_login_response(response)
        if normalized is None:
            return LoginResult(False, "Invalid response format")
        token, user = normalized
        self._remember(token, user)
        return LoginResult(True)

    def logout(self) -> None:
        self.user = None
        self.is_authenticated = False
        self._forget()

    def update_profile(self, changes: dict[str, Any]) -> dict[str, Any]:
        updated = {**(self.user or {}), **changes}
        self.user = updated
        self.storage.set_item(USER_KEY, json_dumps(updated))
        return updated

    def _remember(self, token: str, user: dict[str, Any]) -> None:
        self.user = user
        self.is_authenticated = True
        self.storage.set_item(USER_KEY, json_dumps(user))
        self.storage.set_item(TOKEN_KEY, token)

    def _forget(self) -> None:
        self.storage.remove_item(USER_KEY)
        self.storage.remove_item(TOKEN_KEY)
