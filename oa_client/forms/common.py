from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Column:
    field: str
    state_array: str
    default: Any = ""
    required: bool = False


class FormError(ValueError):
    def __init__(self, errors: dict[str, str]):
        super().__init__("missing_fields")
        self.errors = errors


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def coerce_jumlah(value: Any) -> int:
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        return 1
    return parsed if parsed >= 1 else 1


def today_iso(today: dt.date | None = None) -> str:
    return (today or dt.date.today()).isoformat()
