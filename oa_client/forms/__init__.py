from __future__ import annotations

import datetime as dt
from typing import Any

from . import peminjaman, pengadaan, perbaikan
from .common import FormError, is_blank, today_iso
from .state import SCHEMAS, VARIANTS, PengajuanForm


def build_request_payload(form: PengajuanForm, *, unit: str | None, today: dt.date | None = None) -> dict[str, Any]:
    jenis_request = form.jenis_request
    primary = SCHEMAS[jenis_request][0].field
    rows = [row for row in form.rows(jenis_request) if not is_blank(row[primary])]
    base = {
        "jenis_request": jenis_request,
        "unit": unit or "",
        "tgl_request": today_iso(today),
        "keterangan": form.keterangan,
    }

    for mod in (pengadaan, perbaikan, peminjaman):
        handled, payload = mod.try_build(jenis_request, rows, base)
        if handled:
            return payload

    raise ValueError(f"unknown jenis_request: {jenis_request}")


__all__ = ["FormError", "PengajuanForm", "VARIANTS", "build_request_payload"]
