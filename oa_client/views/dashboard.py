from __future__ import annotations

from dataclasses import dataclass
from typing import Any


STAT_KEYS = {
    "pengajuan": "total_pengajuan",
    "persetujuan": "total_persetujuan",
    "riwayat": "total_riwayat",
    "pengguna": "total_pengguna",
}


def _count(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


@dataclass(frozen=True)
class StatCard:
    key: str
    title: str
    value: int
    href: str


class DashboardView:
    def __init__(self, session, riwayat):
        self.session = session
        self.riwayat = riwayat
        self.stats = {"pengajuan": 0, "persetujuan": 0, "riwayat": 0, "pengguna": 0}
        self.loading = False

    def load(self) -> dict[str, int]:
        if not self.session.is_authenticated:
            return self.stats
        self.loading = True
        try:
            response = self.riwayat.dashboard_stats()
        finally:
            self.loading = False
        if not isinstance(response, dict):
            response = {}
        self.stats = {key: _count(response.get(field)) for key, field in STAT_KEYS.items()}
        return self.stats

    def cards(self) -> list[StatCard]:
        cards = [StatCard("pengajuan", "Total Pengajuan", self.stats["pengajuan"], "/pengajuan")]
        if self.session.is_operator:
            cards.append(StatCard("persetujuan", "Total Persetujuan", self.stats["persetujuan"], "/persetujuan"))
        cards.append(StatCard("riwayat", "Total Riwayat", self.stats["riwayat"], "/riwayat"))
        if self.session.is_operator:
            cards.append(StatCard("pengguna", "Total Pengguna", self.stats["pengguna"], "/pengguna"))
        return cards
