"""
Durable key-value store backed by a single JSON file.

Values are strings (callers serialize), mirroring browser localStorage so the
cart layout on disk is exactly what a web client would keep under the same key.
"""

from __future__ import annotations

import json
import os
from pathlib import Path

from medquote.utils.config import cart_store_path
from medquote.utils.logger import get_logger

logger = get_logger()


class JsonFileStore:
    """
    String key -> string value store persisted to a JSON object on disk.

    Reads go to disk each time so another writer's last write wins.
    Writes replace the file atomically; IO errors propagate to the caller.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = Path(path) if path is not None else cart_store_path()

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        p = self._path
        if not p.is_file():
            return {}
        try:
            with open(p, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Durable store read failed for %s: %s", p, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Durable store %s does not hold an object; ignoring", p)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, entries: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_name(self._path.name + ".tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(entries, f, ensure_ascii=False, indent=2)
        os.replace(tmp, self._path)

    def get_item(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        entries = self._read_all()
        entries[key] = value
        self._write_all(entries)

    def remove_item(self, key: str) -> None:
        entries = self._read_all()
        if entries.pop(key, None) is not None:
            self._write_all(entries)
