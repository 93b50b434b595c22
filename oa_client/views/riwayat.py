from __future__ import annotations

import datetime as dt
from pathlib import Path
from typing import Any

from ..gateway import GatewayError
from ..riwayat import ExportError
from ..serializers import request_items


EMPTY_FILTERS = {"start_date": "", "end_date": "", "unit": "", "status": ""}


class RiwayatView:
    def __init__(self, store, notifications):
        self.store = store
        self.notifications = notifications
        self.filters: dict[str, Any] = dict(EMPTY_FILTERS)
        self.selected: dict[str, Any] | None = None

    def load(self) -> bool:
        try:
            self.store.load()
        except GatewayError:
            self.notifications.show_warning("Gagal Memuat Data", self.store.error)
            return False
        if self.store.items:
            self.notifications.show_success("Data Dimuat", f"Berhasil memuat {len(self.store.items)} data riwayat pengajuan.")
        else:
            self.notifications.show_info("Data Kosong", "Belum ada data riwayat pengajuan yang tersedia.")
        return True

    def refresh(self) -> bool:
        try:
            self.store.refresh()
        except GatewayError:
            self.notifications.show_warning(
                "Gagal Memperbarui Data",
                "Terjadi kesalahan saat memperbarui data. Silakan coba lagi.",
            )
            return False
        self.notifications.show_success("Data Diperbarui", "Data riwayat telah diperbarui dengan informasi terbaru.")
        return True

    def set_filter(self, name: str, value: Any) -> None:
        if name not in EMPTY_FILTERS:
            raise KeyError(name)
        self.filters[name] = value

    def apply_filters(self) -> list[dict[str, Any]]:
        result = self.store.filter(self.filters)
        if not result:
            self.notifications.show_warning(
                "Filter Diterapkan",
                "Tidak ada data yang sesuai dengan kriteria filter yang dipilih.",
            )
        else:
            self.notifications.show_info("Filter Diterapkan", f"Ditemukan {len(result)} data yang sesuai dengan filter.")
        return result

    def clear_filters(self) -> list[dict[str, Any]]:
        self.filters = dict(EMPTY_FILTERS)
        result = self.store.clear_filters()
        self.notifications.show_success("Filter Dihapus", "Semua filter telah dihapus dan menampilkan semua data.")
        return result

    def search(self, term: str) -> list[dict[str, Any]]:
        return self.store.search(term)

    def view_detail(self, riwayat_id) -> dict[str, Any] | None:
        self.selected = next((it for it in self.store.items if str(it.get("id")) == str(riwayat_id)), None)
        if self.selected is not None:
            self.notifications.show_info(
                "Detail Dibuka",
                f"Melihat detail pengajuan {self.selected.get('jenis_request')} dari unit {self.selected.get('unit')}",
            )
        return self.selected

    def detail_items(self) -> list[dict[str, Any]]:
        return [] if self.selected is None else request_items(self.selected)

    def export_to(self, directory: Path, today: dt.date | None = None) -> Path | None:
        try:
            content = self.store.export()
        except ExportError as e:
            self.notifications.show_warning("Export Gagal", str(e))
            return None
        directory.mkdir(parents=True, exist_ok=True)
        target = directory / self.store.export_filename(today)
        target.write_text(content, encoding="utf-8")
        self.notifications.show_success(
            "Export Berhasil",
            f"Data berhasil diexport ke CSV dengan {len(self.store.filtered)} records.",
        )
        return target
