from __future__ import annotations

import json
import logging
from pathlib import Path

from .jsonutil import json_dumps


logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
USER_KEY = "user"


class MemoryStorage:
    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = str(value)

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()

    def keys(self) -> list[str]:
        return list(self._data)


class FileStorage(MemoryStorage):
    """Local storage persisted as one JSON object.

    The file is read once on construction and rewritten on every mutation; edits made by
    another process after that are not observed.
    """

    def __init__(self, path: Path):
        self.path = path
        super().__init__(self._read(path))

    @staticmethod
    def _read(path: Path) -> dict[str, str]:
        if not path.exists():
            return {}
        try:
            obj = json.loads(path.read_text(encoding="utf-8") or "{}")
        except (OSError, json.JSONDecodeError):
            logger.warning("ignoring unreadable storage file %s", path)
            return {}
        if not isinstance(obj, dict):
            return {}
        return {str(k): str(v) for k, v in obj.items() if v is not None}

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json_dumps(self._data), encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        super().set_item(key, value)
        self._flush()

    def remove_item(self, key: str) -> None:
        super().remove_item(key)
        self._flush()

    def clear(self) -> None:
        super().clear()
        self._flush()
