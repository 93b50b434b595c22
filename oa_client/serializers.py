from __future__ import annotations

from typing import Any


STATUS_DISPLAY = {
    "DIAJUKAN": "pending",
    "DISETUJUI": "approved",
    "DITOLAK": "rejected",
    "DIPROSES": "processing",
    "SELESAI": "completed",
}

STATUS_LABELS = {
    "DIAJUKAN": "Diajukan",
    "DISETUJUI": "Disetujui",
    "DITOLAK": "Ditolak",
    "DIPROSES": "Diproses",
    "SELESAI": "Selesai",
}

# variant -> (wire array name, legacy scalar name) per column, primary column first
ITEM_COLUMNS: dict[str, list[tuple[str, str]]] = {
    "pengadaan": [
        ("nama_barang_array", "nama_barang"),
        ("type_model_array", "type_model"),
        ("jumlah_array", "jumlah"),
        ("keterangan_array", "keterangan"),
    ],
    "perbaikan": [
        ("nama_barang_array", "nama_barang"),
        ("type_model_array", "type_model"),
        ("jumlah_array", "jumlah"),
        ("jenis_pekerjaan_array", "jenis_pekerjaan"),
        ("lokasi_array", "lokasi"),
    ],
    "peminjaman": [
        ("lokasi_array", "lokasi"),
        ("kegunaan_array", "kegunaan"),
        ("tgl_peminjaman_array", "tgl_peminjaman"),
        ("tgl_pengembalian_array", "tgl_pengembalian"),
    ],
}

EXTRA_ITEM_NOUN = {"pengadaan": "barang", "perbaikan": "barang", "peminjaman": "lokasi"}

_LEGACY_FIELDS = (
    "nama_barang",
    "type_model",
    "jumlah",
    "lokasi",
    "jenis_pekerjaan",
    "kegunaan",
    "tgl_peminjaman",
    "tgl_pengembalian",
)
_ARRAY_FIELDS = tuple(sorted({arr for cols in ITEM_COLUMNS.values() for arr, _ in cols}))


def map_status(backend_status: Any) -> Any:
    return STATUS_DISPLAY.get(backend_status, backend_status)


def status_label(backend_status: Any) -> str:
    return STATUS_LABELS.get(backend_status, STATUS_LABELS["DIAJUKAN"])


def row_to_riwayat(item: dict[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {
        "id": item.get("id"),
        "jenis_request": item.get("jenis_request"),
        "unit": item.get("unit"),
        "pemohon": item.get("requested_by"),
        "tanggal_pengajuan": item.get("tgl_request"),
        "status": map_status(item.get("status_request")),
        "approver": item.get("approved_by"),
    }
    for key in _LEGACY_FIELDS:
        out[key] = item.get(key)
    for key in _ARRAY_FIELDS:
        value = item.get(key)
        out[key] = list(value) if isinstance(value, list) else []
    out["keterangan"] = item.get("keterangan")
    out["created_at"] = item.get("created_at")
    out["updated_at"] = item.get("updated_at")
    return out


def request_items(request: dict[str, Any]) -> list[dict[str, Any]]:
    columns = ITEM_COLUMNS.get(str(request.get("jenis_request") or ""))
    if not columns:
        return []
    primary_array, primary_scalar = columns[0]
    primaries = request.get(primary_array) or []
    if primaries:
        items = []
        for idx in range(len(primaries)):
            row = {}
            for array_name, scalar_name in columns:
                values = request.get(array_name) or []
                row[scalar_name] = values[idx] if idx < len(values) else None
            items.append(row)
        return items
    if request.get(primary_scalar):
        return [{scalar_name: request.get(scalar_name) for _, scalar_name in columns}]
    return []


def primary_label(request: dict[str, Any]) -> tuple[str | None, int]:
    items = request_items(request)
    if not items:
        return None, 0
    columns = ITEM_COLUMNS[str(request.get("jenis_request"))]
    primary_scalar = columns[0][1]
    return items[0].get(primary_scalar), len(items) - 1


def extra_items_text(request: dict[str, Any]) -> str | None:
    _, extra = primary_label(request)
    if extra <= 0:
        return None
    noun = EXTRA_ITEM_NOUN.get(str(request.get("jenis_request")), "item")
    return f"+{extra} {noun} lainnya"
