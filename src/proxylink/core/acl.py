"""ACL file selection through the backend."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Final, Mapping

from proxylink.core.events import EventChannel
from proxylink.core.mediator import (
    MAIN_SERVICE,
    MAIN_TARGET,
    USER_CANCELED_CODE,
    CommandMediator,
    CommandRequest,
    CommandResponse,
)

logger = logging.getLogger(__name__)

SET_ACL_URL_ACTION: Final[str] = "setAclUrl"

ERROR_MESSAGES: Final[dict[int, str]] = {USER_CANCELED_CODE: "user_canceled"}
DEFAULT_ERROR_MESSAGE: Final[str] = "failed_operation"

AclUrlWriter = Callable[[str], Awaitable[Any]]


def _extract_url(result: Any) -> str | None:
    if isinstance(result, str):
        return result
    if isinstance(result, Mapping) and isinstance(result.get("url"), str):
        return result["url"]
    return None


class AclUrlWorkflow:
    def __init__(
        self,
        mediator: CommandMediator,
        events: EventChannel,
        write_acl_url: AclUrlWriter,
        *,
        target: str = MAIN_TARGET,
        is_active: Callable[[], bool] = lambda: True,
    ) -> None:
        self._mediator = mediator
        self._events = events
        self._write_acl_url = write_acl_url
        self._target = target
        self._is_active = is_active

    async def select(self) -> CommandResponse:
        response = await self._mediator.invoke(
            self._target, MAIN_SERVICE, CommandRequest(SET_ACL_URL_ACTION)
        )
        if not self._is_active():
            logger.debug("ACL selection finished after surface closed; ignoring result")
            return response
        if not response.ok:
            self._events.notify(ERROR_MESSAGES.get(response.code, DEFAULT_ERROR_MESSAGE), "error")
            return response

        url = _extract_url(response.result)
        if url is not None:
            await self._write_acl_url(url)
        self._events.notify("successful_operation", "success")
        return response
