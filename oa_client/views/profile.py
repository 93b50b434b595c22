from __future__ import annotations

from typing import Any


PROFILE_FIELDS = ("name", "unit", "kelas", "email")
MIN_PASSWORD_LENGTH = 6


class ProfileView:
    def __init__(self, session):
        self.session = session
        self.is_editing = False
        self.form: dict[str, Any] = {}
        self.message: dict[str, str] = {"type": "", "text": ""}
        self.cancel()

    def _snapshot(self) -> dict[str, Any]:
        user = self.session.user or {}
        return {k: user.get(k) or "" for k in PROFILE_FIELDS}

    def start_edit(self) -> None:
        self.form = self._snapshot()
        self.is_editing = True

    def set_field(self, name: str, value: Any) -> None:
        if name not in PROFILE_FIELDS:
            raise KeyError(name)
        self.form[name] = value

    def save(self) -> bool:
        # local only: the backend has no self-service profile endpoint
        self.session.update_profile(dict(self.form))
        self.message = {"type": "success", "text": "Profil berhasil diperbarui!"}
        self.is_editing = False
        return True

    def cancel(self) -> None:
        self.form = self._snapshot()
        self.is_editing = False

    def change_password(self, current: str, new: str, confirm: str) -> bool:
        if new != confirm:
            self.message = {"type": "error", "text": "Password baru tidak cocok dengan konfirmasi"}
            return False
        if len(new) < MIN_PASSWORD_LENGTH:
            self.message = {"type": "error", "text": f"Password minimal {MIN_PASSWORD_LENGTH} karakter"}
            return False
        # TODO: call a password endpoint once the backend exposes one; accepted locally for now.
        self.message = {"type": "success", "text": "Password berhasil diubah!"}
        return True

    def clear_message(self) -> None:
        self.message = {"type": "", "text": ""}
