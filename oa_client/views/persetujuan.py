from __future__ import annotations

import logging
from typing import Any

from ..gateway import GatewayError


logger = logging.getLogger(__name__)

LOAD_ERROR = "Gagal memuat data pengajuan"
ACCESS_DENIED = "Halaman ini hanya dapat diakses oleh operator."

PENDING_STATUS = "DIAJUKAN"
APPROVED_STATUS = "DISETUJUI"
REJECTED_STATUS = "DITOLAK"
PROCESSING_STATUS = "DIPROSES"
COMPLETED_STATUS = "SELESAI"

DEFAULT_APPROVE_NOTE = "Disetujui oleh operator"
DEFAULT_REJECT_NOTE = "Ditolak oleh operator"


def _request_list(response: Any) -> list[dict[str, Any]]:
    data = response.get("data", response) if isinstance(response, dict) else response
    if not isinstance(data, list):
        return []
    return [it for it in data if isinstance(it, dict)]


class PersetujuanView:
    """Operator approval queue.

    Status updates are plain writes followed by a full reload. Two operators acting on the
    same request are not coordinated; whichever write reaches the backend last wins.
    """

    def __init__(self, gateway, session, notifications):
        self.gateway = gateway
        self.session = session
        self.notifications = notifications
        self.requests: list[dict[str, Any]] = []
        self.loading = False
        self.updating = False
        self.error: str | None = None
        self.show_all = False
        self.selected: dict[str, Any] | None = None

    @property
    def access_denied(self) -> bool:
        return not self.session.is_operator

    def load(self) -> list[dict[str, Any]]:
        if self.access_denied:
            self.error = ACCESS_DENIED
            return []
        self.loading = True
        self.error = None
        try:
            self.requests = _request_list(self.gateway.get_all_requests())
        except GatewayError:
            logger.warning("failed to load approval queue", exc_info=True)
            self.error = LOAD_ERROR
        finally:
            self.loading = False
        return self.requests

    def toggle_show_all(self) -> bool:
        self.show_all = not self.show_all
        return self.show_all

    @property
    def pending_requests(self) -> list[dict[str, Any]]:
        return [r for r in self.requests if r.get("status_request") == PENDING_STATUS]

    @property
    def display_requests(self) -> list[dict[str, Any]]:
        return list(self.requests) if self.show_all else self.pending_requests

    @property
    def counts(self) -> dict[str, int]:
        return {
            "pending": len(self.pending_requests),
            "approved": sum(1 for r in self.requests if r.get("status_request") == APPROVED_STATUS),
            "rejected": sum(1 for r in self.requests if r.get("status_request") == REJECTED_STATUS),
        }

    def find(self, request_id) -> dict[str, Any] | None:
        for r in self.requests:
            if str(r.get("id")) == str(request_id):
                return r
        return None

    def open_detail(self, request_id) -> dict[str, Any] | None:
        self.selected = self.find(request_id)
        return self.selected

    def close_detail(self) -> None:
        self.selected = None

    def update_status(self, request_id, status: str, keterangan: str = "") -> bool:
        if self.access_denied:
            self.error = ACCESS_DENIED
            return False
        approver = (self.session.user or {}).get("name")
        self.updating = True
        try:
            self.gateway.update_request_status(
                request_id,
                {"status_request": status, "approved_by": approver, "keterangan": keterangan},
            )
        except GatewayError:
            logger.warning("status update for request %s failed", request_id, exc_info=True)
            self.notifications.show_error(
                "Gagal Mengupdate Status",
                "Terjadi kesalahan saat mengupdate status pengajuan. Silakan coba lagi.",
            )
            return False
        finally:
            self.updating = False

        request = self.find(request_id)
        if request is not None:
            self._notify(status, str(request.get("jenis_request") or ""), approver or "", keterangan)
        self.load()
        self.close_detail()
        return True

    def _notify(self, status: str, jenis_request: str, approver: str, keterangan: str) -> None:
        if status == APPROVED_STATUS:
            self.notifications.show_pengajuan_approved(jenis_request, approver)
        elif status == REJECTED_STATUS:
            self.notifications.show_pengajuan_rejected(jenis_request, approver, keterangan)
        elif status == PROCESSING_STATUS:
            self.notifications.show_pengajuan_processed(jenis_request, approver)
        elif status == COMPLETED_STATUS:
            self.notifications.show_pengajuan_completed(jenis_request, approver)

    def approve(self, request_id, keterangan: str = DEFAULT_APPROVE_NOTE) -> bool:
        return self.update_status(request_id, APPROVED_STATUS, keterangan)

    def reject(self, request_id, keterangan: str = DEFAULT_REJECT_NOTE) -> bool:
        return self.update_status(request_id, REJECTED_STATUS, keterangan)

    def mark_processing(self, request_id, keterangan: str = "") -> bool:
        return self.update_status(request_id, PROCESSING_STATUS, keterangan)

    def mark_completed(self, request_id, keterangan: str = "") -> bool:
        return self.update_status(request_id, COMPLETED_STATUS, keterangan)
