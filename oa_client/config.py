from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping


DEFAULT_BASE_URL = "http://localhost:8080/api"
DEFAULT_HOME = Path("~") / ".oa_client"
STORAGE_FILENAME = "storage.json"


@dataclass(frozen=True)
class ClientConfig:
    base_url: str = DEFAULT_BASE_URL
    home: Path = DEFAULT_HOME
    timeout: float | None = None
    log_level: str = "WARNING"

    @property
    def storage_path(self) -> Path:
        return self.home.expanduser() / STORAGE_FILENAME


def _parse_timeout(raw: str | None) -> float | None:
    if raw is None or not raw.strip():
        return None
    value = float(raw)
    if value <= 0:
        raise ValueError("OA_CLIENT_TIMEOUT must be positive")
    return value


def load_config(environ: Mapping[str, str] | None = None) -> ClientConfig:
    env = os.environ if environ is None else environ
    base_url = (env.get("OA_API_BASE_URL") or DEFAULT_BASE_URL).strip().rstrip("/")
    home_raw = (env.get("OA_CLIENT_HOME") or "").strip()
    level = (env.get("OA_LOG_LEVEL") or "WARNING").strip().upper()
    return ClientConfig(
        base_url=base_url,
        home=Path(home_raw) if home_raw else DEFAULT_HOME,
        timeout=_parse_timeout(env.get("OA_CLIENT_TIMEOUT")),
        log_level=level,
    )
