from __future__ import annotations

import datetime as dt
import logging
from typing import Any

from .gateway import GatewayError
from .serializers import row_to_riwayat


logger = logging.getLogger(__name__)

LOAD_ERROR = "Gagal memuat data riwayat"
EMPTY_EXPORT_ERROR = "Tidak ada data yang dapat diexport"

EXPORT_COLUMNS = (
    ("ID", "id"),
    ("Jenis Request", "jenis_request"),
    ("Unit", "unit"),
    ("Pemohon", "pemohon"),
    ("Tanggal Pengajuan", "tanggal_pengajuan"),
    ("Status", "status"),
    ("Approver", "approver"),
)


class ExportError(ValueError):
    pass


def empty_stats() -> dict[str, int]:
    return {"total": 0, "pending": 0, "approved": 0, "rejected": 0}


def compute_stats(items: list[dict[str, Any]]) -> dict[str, int]:
    stats = empty_stats()
    stats["total"] = len(items)
    for item in items:
        if item.get("status") in ("pending", "approved", "rejected"):
            stats[item["status"]] += 1
    return stats


def parse_date(value: Any) -> dt.date | None:
    if not value:
        return None
    text = str(value).strip()
    try:
        return dt.date.fromisoformat(text[:10])
    except ValueError:
        return None


def _contains(haystack: Any, needle: str) -> bool:
    return bool(haystack) and needle in str(haystack).lower()


def apply_filters(items: list[dict[str, Any]], criteria: dict[str, Any]) -> list[dict[str, Any]]:
    result = list(items)

    start = parse_date(criteria.get("start_date"))
    end = parse_date(criteria.get("end_date"))
    if criteria.get("start_date") and criteria.get("end_date"):
        if start is None or end is None:
            return []
        kept = []
        for item in result:
            day = parse_date(item.get("tanggal_pengajuan"))
            if day is not None and start <= day <= end:
                kept.append(item)
        result = kept

    unit = str(criteria.get("unit") or "").lower()
    if unit:
        result = [it for it in result if _contains(it.get("unit"), unit)]

    status = criteria.get("status")
    if status:
        result = [it for it in result if it.get("status") == status]
    return result


def search_items(items: list[dict[str, Any]], term: str) -> list[dict[str, Any]]:
    if not term:
        return list(items)
    needle = term.lower()
    return [
        it
        for it in items
        if _contains(it.get("unit"), needle) or _contains(it.get("pemohon"), needle) or _contains(it.get("jenis_request"), needle)
    ]


def to_csv(items: list[dict[str, Any]]) -> str:
    # Plain comma join: values containing commas are not quoted.
    lines = [",".join(label for label, _ in EXPORT_COLUMNS)]
    for it in items:
        lines.append(",".join("" if it.get(key) is None else str(it.get(key)) for _, key in EXPORT_COLUMNS))
    return "\n".join(lines)


class RiwayatStore:
    def __init__(self, gateway):
        self.gateway = gateway
        self.items: list[dict[str, Any]] = []
        self.filtered: list[dict[str, Any]] = []
        self.loading = False
        self.error: str | None = None
        self.stats = empty_stats()

    def load(self) -> list[dict[str, Any]]:
        self.loading = True
        self.error = None
        try:
            response = self.gateway.get_all_requests()
            data = response.get("data") if isinstance(response, dict) else None
            items = [row_to_riwayat(it) for it in (data or []) if isinstance(it, dict)]
        except GatewayError:
            logger.warning("failed to load request history", exc_info=True)
            self.error = LOAD_ERROR
            self.items = []
            self.filtered = []
            self.stats = empty_stats()
            raise
        finally:
            self.loading = False

        self.items = items
        self.filtered = list(items)
        self.stats = compute_stats(items)
        return items

    def refresh(self) -> list[dict[str, Any]]:
        return self.load()

    def filter(self, criteria: dict[str, Any]) -> list[dict[str, Any]]:
        self.filtered = apply_filters(self.items, criteria)
        return self.filtered

    def search(self, term: str) -> list[dict[str, Any]]:
        self.filtered = search_items(self.items, term)
        return self.filtered

    def clear_filters(self) -> list[dict[str, Any]]:
        self.filtered = list(self.items)
        return self.filtered

    def export(self) -> str:
        if not self.filtered:
            raise ExportError(EMPTY_EXPORT_ERROR)
        return to_csv(self.filtered)

    @staticmethod
    def export_filename(today: dt.date | None = None) -> str:
        day = today or dt.date.today()
        return f"riwayat-pengajuan-{day.isoformat()}.csv"

    def dashboard_stats(self) -> dict[str, Any]:
        try:
            return self.gateway.get_dashboard_stats()
        except GatewayError:
            logger.warning("dashboard stats unavailable; using local history counts")
            return {
                "total_pengajuan": 0,
                "total_persetujuan": 0,
                "total_riwayat": self.stats["total"],
                "total_pengguna": 0,
            }
