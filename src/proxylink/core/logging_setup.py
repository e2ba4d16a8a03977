"""Logging configuration for the settings core.

The root logger level follows the ``verbose`` setting: DEBUG when it is on,
INFO otherwise. ``setup_logging`` applies it once at start-up and
``set_verbose`` whenever the setting is committed.
"""

from __future__ import annotations

import logging
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path
from urllib.parse import urlparse

from proxylink.core.storage import get_logs_dir

LOG_FILE_NAME = "settings.log"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_LOG_BYTES = 2 * 1024 * 1024
BACKUP_COUNT = 5

logger = logging.getLogger(__name__)


def level_for(verbose: bool) -> int:
    return logging.DEBUG if verbose else logging.INFO


def set_verbose(enabled: bool) -> None:
    root = logging.getLogger()
    level = level_for(enabled)
    if root.level != level:
        root.setLevel(level)
        logger.info("Log level set to %s", logging.getLevelName(level))


def setup_logging(logs_dir: Path | None = None, *, verbose: bool = False) -> Path:
    """Attach the rotating file and console handlers once; returns the log file."""
    logs_dir = logs_dir or get_logs_dir()
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = logs_dir / LOG_FILE_NAME

    root = logging.getLogger()
    if not root.handlers:
        formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
        handlers = (
            RotatingFileHandler(log_path, maxBytes=MAX_LOG_BYTES, backupCount=BACKUP_COUNT),
            logging.StreamHandler(),
        )
        for handler in handlers:
            handler.setFormatter(formatter)
            root.addHandler(handler)

    set_verbose(verbose)
    return log_path


_URL_PATTERN = re.compile(r"\b[\w+.-]+://[^\s]+")
# Share links carry credentials in what looks like the host part.
_OPAQUE_SCHEMES = frozenset({"ss", "ssr"})


def _redact_url(match: re.Match[str]) -> str:
    parsed = urlparse(match.group(0))
    if parsed.scheme in _OPAQUE_SCHEMES:
        return f"{parsed.scheme}://<redacted>"
    if not parsed.scheme or not parsed.hostname:
        return "<redacted>"
    port = f":{parsed.port}" if parsed.port else ""
    return f"{parsed.scheme}://{parsed.hostname}{port}"


def redact(text: str) -> str:
    """Reduce every URL in ``text`` to scheme, host and port."""
    if not text:
        return text
    return _URL_PATTERN.sub(_redact_url, text)
