"""Launch-on-boot registration."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from platformdirs import user_config_path

from proxylink.core.errors import StartupRegistrationError

logger = logging.getLogger(__name__)

DESKTOP_FILE_NAME = "proxylink.desktop"


class StartupRegistrar(Protocol):
    async def get_startup_on_boot(self) -> bool:
        ...

    async def set_startup_on_boot(self, enabled: bool) -> None:
        ...


class XdgAutostartRegistrar:
    """Registers the app through an XDG autostart desktop entry.

    ``exec_command`` is the command line of the host application that embeds
    the settings surface; this package ships no launcher of its own.
    """

    def __init__(self, exec_command: str, autostart_dir: Path | None = None) -> None:
        if not exec_command.strip():
            raise StartupRegistrationError(
                "Autostart entry needs a command to run",
                user_message="Launch on boot is not available.",
            )
        self.exec_command = exec_command
        self.autostart_dir = autostart_dir or (Path(user_config_path()) / "autostart")

    @property
    def entry_path(self) -> Path:
        return self.autostart_dir / DESKTOP_FILE_NAME

    def _render_entry(self) -> str:
        lines = [
            "[Desktop Entry]",
            "Type=Application",
            "Name=proxylink",
            f"Exec={self.exec_command}",
            "X-GNOME-Autostart-enabled=true",
            "Hidden=false",
        ]
        return "\n".join(lines) + "\n"

    async def get_startup_on_boot(self) -> bool:
        path = self.entry_path
        if not path.exists():
            return False
        try:
            content = path.read_text(encoding="utf-8")
        except OSError:
            logger.exception("Failed to read autostart entry: %s", path)
            return False
        return "Hidden=true" not in content

    async def set_startup_on_boot(self, enabled: bool) -> None:
        path = self.entry_path
        try:
            if enabled:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(self._render_entry(), encoding="utf-8")
                logger.info("Registered autostart entry: %s", path)
            elif path.exists():
                path.unlink()
                logger.info("Removed autostart entry: %s", path)
        except OSError as exc:
            logger.exception("Failed to update autostart entry: %s", path)
            raise StartupRegistrationError(
                f"Failed to update autostart entry {path}: {exc}",
                user_message="Failed to change launch-on-boot setting.",
            ) from exc
