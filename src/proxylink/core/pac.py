"""PAC file regeneration through the backend."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Final, Literal, Mapping

from proxylink.core.errors import PacRequestError
from proxylink.core.events import EventChannel, StatusBoard
from proxylink.core.logging_setup import redact
from proxylink.core.mediator import (
    MAIN_SERVICE,
    MAIN_TARGET,
    CommandMediator,
    CommandRequest,
    CommandResponse,
)

logger = logging.getLogger(__name__)

# Keeps the surface busy a little after the answer so the spinner does not flicker.
WAITING_CLEAR_DELAY_S: Final[float] = 1.0
WAITING_STATUS: Final[str] = "waiting"
REGENERATE_ACTION: Final[str] = "reGeneratePacFile"

PacState = Literal["idle", "requesting"]
Sleep = Callable[[float], Awaitable[Any]]


class PacRegenerationWorkflow:
    def __init__(
        self,
        mediator: CommandMediator,
        status: StatusBoard,
        events: EventChannel,
        *,
        target: str = MAIN_TARGET,
        clear_delay_s: float = WAITING_CLEAR_DELAY_S,
        sleep: Sleep = asyncio.sleep,
        is_active: Callable[[], bool] = lambda: True,
    ) -> None:
        self._mediator = mediator
        self._status = status
        self._events = events
        self._target = target
        self._clear_delay_s = clear_delay_s
        self._sleep = sleep
        self._is_active = is_active
        self.state: PacState = "idle"

    async def regenerate(
        self,
        *,
        settings: Mapping[str, Any],
        url: str | None = None,
        text: str | None = None,
    ) -> CommandResponse:
        """Rebuild the PAC file from a rule-list URL or literal PAC text.

        The ``waiting`` status is raised before the request and lowered
        ``WAITING_CLEAR_DELAY_S`` after the response, whatever the outcome.
        """
        if (url is None) == (text is None):
            raise PacRequestError(
                "Exactly one of url or text is required",
                user_message="Provide either a rule list URL or PAC text.",
            )

        params: dict[str, Any] = {"url": url} if url is not None else {"text": text}
        params["settings"] = dict(settings)

        if url is not None:
            logger.info("Regenerating PAC file from %s", redact(url))
        else:
            logger.info("Regenerating PAC file from %d chars of text", len(text or ""))

        self._status.set_status(WAITING_STATUS, True)
        try:
            self.state = "requesting"
            try:
                response = await self._mediator.invoke(
                    self._target, MAIN_SERVICE, CommandRequest(REGENERATE_ACTION, params)
                )
            finally:
                self.state = "idle"

            if not self._is_active():
                logger.debug("PAC regeneration finished after surface closed; ignoring result")
            elif response.ok:
                self._events.notify("successful_operation", "success")
            else:
                logger.warning("PAC regeneration failed: code=%s error=%r", response.code, response.error)
                self._events.notify("failed_to_download_file", "error")

            await self._sleep(self._clear_delay_s)
        finally:
            self._status.set_status(WAITING_STATUS, False)
        return response
