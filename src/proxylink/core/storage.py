"""Storage paths and JSON helpers."""

from __future__ import annotations

import json
import os
from pathlib import Path
import tempfile
from typing import Any

from platformdirs import user_config_path, user_state_path

APP_NAME = "proxylink-client"


def get_config_dir() -> Path:
    return Path(user_config_path(APP_NAME))


def get_state_dir() -> Path:
    return Path(user_state_path(APP_NAME))


def get_logs_dir() -> Path:
    return get_state_dir() / "logs"


def load_json(path: Path, default: Any) -> Any:
    if not path.exists():
        return default
    try:
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)
    except json.JSONDecodeError:
        return default


def atomic_write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path_str = tempfile.mkstemp(
        prefix=f".{path.name}.",
        suffix=".tmp",
        dir=str(path.parent),
    )
    tmp_path = Path(tmp_path_str)
    try:
        if os.name == "posix":
            os.fchmod(fd, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            json.dump(data, handle, indent=2, sort_keys=True)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, path)
    except Exception:
        if tmp_path.exists():
            tmp_path.unlink()
        raise


def backup_corrupt_file(path: Path) -> str:
    """Move an unreadable JSON file aside and describe what happened."""
    backup_path = path.with_suffix(".json.bak")
    try:
        if backup_path.exists():
            backup_path.unlink()
        os.replace(path, backup_path)
    except OSError:
        return " Failed to create backup file."
    return f" Backed up as {backup_path.name}."
