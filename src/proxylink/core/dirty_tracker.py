"""Accumulator of fields touched since the last flush."""

from __future__ import annotations

import threading
from typing import Any


class DirtyFieldTracker:
    """Presence-only change record.

    A field stays touched until ``flush()`` no matter how many times it changed
    or whether it went back to its original value.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._changes: dict[str, Any] = {}

    def touch(self, field: str, value: Any = True) -> None:
        with self._lock:
            self._changes[field] = value

    def is_touched(self, field: str) -> bool:
        with self._lock:
            return field in self._changes

    def last_value(self, field: str, default: Any = None) -> Any:
        with self._lock:
            return self._changes.get(field, default)

    def flush(self) -> frozenset[str]:
        with self._lock:
            fields = frozenset(self._changes)
            self._changes = {}
        return fields

    def __len__(self) -> int:
        with self._lock:
            return len(self._changes)
