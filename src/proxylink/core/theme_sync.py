"""Keep the app theme in step with the operating system's dark/light mode."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Final, Mapping

from proxylink.core.events import THEME_UPDATE, EventChannel
from proxylink.core.mediator import (
    MAIN_TARGET,
    THEME_SERVICE,
    CommandMediator,
    CommandRequest,
)
from proxylink.core.persist_store import KeyValueStore

logger = logging.getLogger(__name__)

AUTO_THEME_KEY: Final[str] = "autoTheme"
DARK_MODE_KEY: Final[str] = "darkMode"

LISTEN_ACTION: Final[str] = "listenForUpdate"
UNLISTEN_ACTION: Final[str] = "unlistenForUpdate"
THEME_INFO_ACTION: Final[str] = "getSystemThemeInfo"

DarkModeWriter = Callable[[bool], Awaitable[Any]]


def flag_to_str(value: bool) -> str:
    return "true" if value else "false"


def needs_mount_broadcast(persisted: str | None, dark_mode: bool) -> bool:
    """Whether the persisted theme flag disagrees with the draft dark mode."""
    if persisted == "true":
        return not dark_mode
    if persisted == "false":
        return dark_mode
    return persisted is None and dark_mode


class ThemeSyncWorkflow:
    def __init__(
        self,
        mediator: CommandMediator,
        persist: KeyValueStore,
        events: EventChannel,
        write_dark_mode: DarkModeWriter,
        *,
        target: str = MAIN_TARGET,
        is_active: Callable[[], bool] = lambda: True,
    ) -> None:
        self._mediator = mediator
        self._persist = persist
        self._events = events
        self._write_dark_mode = write_dark_mode
        self._target = target
        self._is_active = is_active

    async def set_auto_theme(self, enabled: bool) -> None:
        # Both requests go out together; each one handles its own answer.
        await asyncio.gather(
            self._toggle_listening(enabled),
            self._sync_system_theme(enabled),
        )

    async def _toggle_listening(self, enabled: bool) -> None:
        action = LISTEN_ACTION if enabled else UNLISTEN_ACTION
        response = await self._mediator.invoke(
            self._target, THEME_SERVICE, CommandRequest(action)
        )
        if not response.ok:
            logger.debug("%s failed with code=%s; auto theme flag unchanged", action, response.code)
            return
        self._persist.set(AUTO_THEME_KEY, flag_to_str(enabled))

    async def _sync_system_theme(self, enabled: bool) -> None:
        response = await self._mediator.invoke(
            self._target, THEME_SERVICE, CommandRequest(THEME_INFO_ACTION)
        )
        if not response.ok:
            logger.debug("%s failed with code=%s", THEME_INFO_ACTION, response.code)
            return
        result = response.result if isinstance(response.result, Mapping) else {}
        if "shouldUseDarkColors" not in result:
            logger.warning("%s answered without shouldUseDarkColors: %r", THEME_INFO_ACTION, response.result)
            return
        should_use_dark = bool(result["shouldUseDarkColors"])
        self._events.publish(THEME_UPDATE, {"shouldUseDarkColors": should_use_dark})
        if enabled:
            return
        if not self._is_active():
            logger.debug("System theme arrived after surface closed; dark mode left as is")
            return
        # Manual control resumes from the OS state, not from the stale toggle.
        await self._write_dark_mode(should_use_dark)

    def reconcile_on_mount(self, dark_mode: bool) -> bool:
        persisted = self._persist.get(DARK_MODE_KEY)
        if not needs_mount_broadcast(persisted, bool(dark_mode)):
            return False
        self._events.publish(THEME_UPDATE, {"shouldUseDarkColors": bool(dark_mode)})
        return True
