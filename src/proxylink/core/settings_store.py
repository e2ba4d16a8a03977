"""Committed settings persisted in the config directory."""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any, Callable, Mapping

from proxylink.core.errors import SettingsStoreError
from proxylink.core.settings_model import DEFAULT_SETTINGS
from proxylink.core.storage import atomic_write_json, backup_corrupt_file, get_config_dir

logger = logging.getLogger(__name__)

SETTINGS_FILE = "settings.json"

SettingsListener = Callable[[dict[str, Any]], None]


class CommittedSettingsStore:
    def __init__(self, path: Path | None = None) -> None:
        self.path = path or (get_config_dir() / SETTINGS_FILE)
        self._settings: dict[str, Any] = copy.deepcopy(DEFAULT_SETTINGS)
        self._listeners: list[SettingsListener] = []
        self.last_load_error: str | None = None

    @property
    def settings(self) -> dict[str, Any]:
        return copy.deepcopy(self._settings)

    def load(self) -> None:
        self.last_load_error = None
        if not self.path.exists():
            self._settings = copy.deepcopy(DEFAULT_SETTINGS)
            return

        try:
            with self.path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except json.JSONDecodeError as exc:
            backup_note = backup_corrupt_file(self.path)
            self._settings = copy.deepcopy(DEFAULT_SETTINGS)
            self.last_load_error = (
                f"Saved settings file is corrupted ({exc}). Started with defaults.{backup_note}"
            )
            logger.warning(self.last_load_error)
            return
        except OSError as exc:
            raise SettingsStoreError(
                f"Failed to read settings: {self.path}: {exc}",
                user_message="Failed to read saved settings.",
            ) from exc

        if not isinstance(payload, dict):
            self._settings = copy.deepcopy(DEFAULT_SETTINGS)
            self.last_load_error = "Saved settings file format is invalid. Started with defaults."
            return

        merged = copy.deepcopy(DEFAULT_SETTINGS)
        merged.update(payload)
        self._settings = merged

    def save(self) -> None:
        try:
            atomic_write_json(self.path, self._settings)
        except OSError as exc:
            logger.exception("Failed to write settings: %s", self.path)
            raise SettingsStoreError(
                f"Failed to write settings: {self.path}: {exc}",
                user_message="Failed to save settings. Check file permissions.",
            ) from exc

    def set_setting(self, key: str, value: Any) -> None:
        self._settings[key] = copy.deepcopy(value)
        self.save()
        self._notify()

    def replace(self, settings: Mapping[str, Any]) -> None:
        merged = copy.deepcopy(DEFAULT_SETTINGS)
        merged.update(copy.deepcopy(dict(settings)))
        self._settings = merged
        self.save()
        self._notify()

    def subscribe(self, listener: SettingsListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self.settings)
