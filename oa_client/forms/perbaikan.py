from __future__ import annotations

from typing import Any

from .common import Column


VARIANT = "perbaikan"

COLUMNS = (
    Column("nama_barang", "nama_barang_perbaikan_array", "", required=True),
    Column("type_model", "type_model_perbaikan_array", ""),
    Column("jumlah", "jumlah_perbaikan_array", 1, required=True),
    Column("jenis_pekerjaan", "jenis_pekerjaan_array", ""),
    Column("lokasi", "lokasi_perbaikan_array", "", required=True),
)


def try_build(jenis_request: str, rows: list[dict[str, Any]], base: dict[str, Any]) -> tuple[bool, dict[str, Any]]:
    if jenis_request != VARIANT:
        return False, base
    first = rows[0] if rows else {}
    payload = dict(base)
    payload.update(
        {
            "nama_barang_array": [r["nama_barang"] for r in rows],
            "type_model_array": [r["type_model"] for r in rows],
            "jumlah_array": [r["jumlah"] for r in rows],
            "jenis_pekerjaan_array": [r["jenis_pekerjaan"] for r in rows],
            "lokasi_array": [r["lokasi"] for r in rows],
            "nama_barang": first.get("nama_barang", ""),
            "type_model": first.get("type_model", ""),
            "jumlah": first.get("jumlah") or 1,
            "jenis_pekerjaan": first.get("jenis_pekerjaan", ""),
            "lokasi": first.get("lokasi", ""),
        }
    )
    return True, payload
