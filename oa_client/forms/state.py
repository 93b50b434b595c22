from __future__ import annotations

from typing import Any

from . import peminjaman, pengadaan, perbaikan
from .common import Column, FormError, coerce_jumlah, is_blank


SCHEMAS: dict[str, tuple[Column, ...]] = {
    pengadaan.VARIANT: pengadaan.COLUMNS,
    perbaikan.VARIANT: perbaikan.COLUMNS,
    peminjaman.VARIANT: peminjaman.COLUMNS,
}
VARIANTS = tuple(SCHEMAS)
DEFAULT_VARIANT = pengadaan.VARIANT


def _columns(variant: str) -> tuple[Column, ...]:
    try:
        return SCHEMAS[variant]
    except KeyError:
        raise ValueError(f"unknown jenis_request: {variant}") from None


class PengajuanForm:
    """Form state for a new request.

    Every variant keeps its line items as parallel arrays (one per column). All arrays of a
    variant always have the same length and never drop below one row, because detail views
    index them together.
    """

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        self.jenis_request = DEFAULT_VARIANT
        self.keterangan = ""
        self._arrays: dict[str, dict[str, list[Any]]] = {
            variant: {col.state_array: [col.default] for col in cols} for variant, cols in SCHEMAS.items()
        }

    def select(self, variant: str) -> None:
        _columns(variant)
        self.jenis_request = variant

    def row_count(self, variant: str | None = None) -> int:
        variant = variant or self.jenis_request
        first = _columns(variant)[0]
        return len(self._arrays[variant][first.state_array])

    def arrays(self, variant: str | None = None) -> dict[str, list[Any]]:
        variant = variant or self.jenis_request
        _columns(variant)
        return {name: list(values) for name, values in self._arrays[variant].items()}

    def rows(self, variant: str | None = None) -> list[dict[str, Any]]:
        variant = variant or self.jenis_request
        cols = _columns(variant)
        arrays = self._arrays[variant]
        return [{col.field: arrays[col.state_array][idx] for col in cols} for idx in range(self.row_count(variant))]

    def set_field(self, variant: str, field: str, index: int, value: Any) -> None:
        cols = {col.field: col for col in _columns(variant)}
        if field not in cols:
            raise KeyError(field)
        if field == "jumlah":
            value = coerce_jumlah(value)
        self._arrays[variant][cols[field].state_array][index] = value

    def add_row(self, variant: str | None = None) -> int:
        variant = variant or self.jenis_request
        for col in _columns(variant):
            self._arrays[variant][col.state_array].append(col.default)
        return self.row_count(variant)

    def remove_row(self, index: int, variant: str | None = None) -> bool:
        variant = variant or self.jenis_request
        count = self.row_count(variant)
        if count <= 1:
            return False
        if not -count <= index < count:
            raise IndexError(index)
        for col in _columns(variant):
            del self._arrays[variant][col.state_array][index]
        return True

    def check_required(self) -> None:
        errors: dict[str, str] = {}
        for idx, row in enumerate(self.rows()):
            for col in _columns(self.jenis_request):
                if col.required and is_blank(row[col.field]):
                    errors[f"{col.field}[{idx}]"] = f"{col.field} wajib diisi"
        if errors:
            raise FormError(errors)
