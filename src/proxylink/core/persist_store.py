"""String key-value store for small UI flags kept across sessions."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from proxylink.core.storage import atomic_write_json, get_config_dir, load_json

logger = logging.getLogger(__name__)

PERSIST_FILE = "persist.json"


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryPersistStore:
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = str(value)

    def delete(self, key: str) -> None:
        self._values.pop(key, None)


class PersistStore:
    """JSON-file-backed store; every write is flushed atomically."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or (get_config_dir() / PERSIST_FILE)
        self._values: dict[str, str] = {}
        self.load()

    def load(self) -> None:
        data = load_json(self.path, {})
        if not isinstance(data, dict):
            logger.warning("Ignoring invalid persisted flags file: %s", self.path)
            data = {}
        self._values = {str(k): str(v) for k, v in data.items() if isinstance(v, str)}

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = str(value)
        atomic_write_json(self.path, self._values)

    def delete(self, key: str) -> None:
        if self._values.pop(key, None) is not None:
            atomic_write_json(self.path, self._values)
