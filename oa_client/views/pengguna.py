from __future__ import annotations

import logging
from typing import Any, Callable

from ..forms import FormError
from ..gateway import GatewayError


logger = logging.getLogger(__name__)

REQUIRED_FIELDS = {
    "username": "Username wajib diisi",
    "password": "Password wajib diisi",
    "name": "Nama wajib diisi",
    "email": "Email wajib diisi",
    "unit": "Unit wajib diisi",
    "role": "Role wajib dipilih",
}
EDITABLE_FIELDS = ("name", "role", "unit", "email")


def validate_new_user(data: dict[str, Any]) -> None:
    errors = {}
    for key, message in REQUIRED_FIELDS.items():
        value = data.get(key)
        if value is None or not str(value).strip():
            errors[key] = message
    if errors:
        raise FormError(errors)


def _user_list(response: Any) -> list[dict[str, Any]]:
    if isinstance(response, dict):
        response = response.get("data", [])
    return [u for u in response if isinstance(u, dict)] if isinstance(response, list) else []


class PenggunaView:
    """User administration, operator only."""

    def __init__(self, gateway, session, notifications):
        self.gateway = gateway
        self.session = session
        self.notifications = notifications
        self.users: list[dict[str, Any]] = []
        self.loading = False
        self.submitting = False
        self.errors: dict[str, str] = {}
        self.edit_data: dict[str, Any] = {}
        self.selected: dict[str, Any] | None = None

    @property
    def access_denied(self) -> bool:
        return not self.session.is_operator

    def load(self) -> list[dict[str, Any]]:
        if self.access_denied:
            return []
        self.loading = True
        try:
            self.users = _user_list(self.gateway.get_all_users())
        except GatewayError:
            logger.warning("failed to load users", exc_info=True)
            self.notifications.show_error("Gagal", "Gagal memuat data pengguna")
        finally:
            self.loading = False
        return self.users

    def create(self, data: dict[str, Any]) -> bool:
        data = {"role": "user", **data}
        try:
            validate_new_user(data)
        except FormError as e:
            self.errors = e.errors
            return False
        self.errors = {}
        self.submitting = True
        try:
            self.gateway.create_user(data)
        except GatewayError as e:
            self.notifications.show_error("Gagal", e.message or "Gagal menambahkan pengguna")
            return False
        finally:
            self.submitting = False
        self.notifications.show_success("Berhasil", "Pengguna berhasil ditambahkan")
        self.load()
        return True

    def start_edit(self, user: dict[str, Any]) -> dict[str, Any]:
        self.edit_data = {"id": user.get("id"), **{k: user.get(k) for k in EDITABLE_FIELDS}}
        return self.edit_data

    def save_edit(self, changes: dict[str, Any] | None = None) -> bool:
        if not self.edit_data:
            return False
        data = {**self.edit_data, **{k: v for k, v in (changes or {}).items() if k in EDITABLE_FIELDS}}
        user_id = data.pop("id")
        self.submitting = True
        try:
            self.gateway.update_user(user_id, data)
        except GatewayError as e:
            self.notifications.show_error("Gagal", e.message or "Gagal memperbarui pengguna")
            return False
        finally:
            self.submitting = False
        self.notifications.show_success("Berhasil", "Pengguna berhasil diperbarui")
        self.edit_data = {}
        self.load()
        return True

    def delete(self, user_id, confirm: Callable[[str], bool]) -> bool:
        if not confirm("Apakah Anda yakin ingin menghapus pengguna ini?"):
            return False
        try:
            self.gateway.delete_user(user_id)
        except GatewayError:
            logger.warning("failed to delete user %s", user_id, exc_info=True)
            self.notifications.show_error("Gagal", "Gagal menghapus pengguna")
            return False
        self.notifications.show_success("Berhasil", "Pengguna berhasil dihapus")
        self.load()
        return True

    def view_detail(self, user_id) -> dict[str, Any] | None:
        self.selected = next((u for u in self.users if str(u.get("id")) == str(user_id)), None)
        return self.selected
