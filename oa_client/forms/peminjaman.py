from __future__ import annotations

from typing import Any

from .common import Column, is_blank


VARIANT = "peminjaman"

COLUMNS = (
    Column("lokasi", "lokasi_peminjaman_array", "", required=True),
    Column("kegunaan", "kegunaan_array", ""),
    Column("tgl_peminjaman", "tgl_peminjaman_array", ""),
    Column("tgl_pengembalian", "tgl_pengembalian_array", ""),
)


def _date_or_none(value: Any) -> Any:
    return None if is_blank(value) else value


def try_build(jenis_request: str, rows: list[dict[str, Any]], base: dict[str, Any]) -> tuple[bool, dict[str, Any]]:
    if jenis_request != VARIANT:
        return False, base
    first = rows[0] if rows else {}
    payload = dict(base)
    payload.update(
        {
            "lokasi_array": [r["lokasi"] for r in rows],
            "kegunaan_array": [r["kegunaan"] for r in rows],
            # no start <= return check; the backend owns date validation
            "tgl_peminjaman_array": [_date_or_none(r["tgl_peminjaman"]) for r in rows],
            "tgl_pengembalian_array": [_date_or_none(r["tgl_pengembalian"]) for r in rows],
            "lokasi": first.get("lokasi", ""),
            "kegunaan": first.get("kegunaan", ""),
            "tgl_peminjaman": _date_or_none(first.get("tgl_peminjaman")),
            "tgl_pengembalian": _date_or_none(first.get("tgl_pengembalian")),
        }
    )
    return True, payload
