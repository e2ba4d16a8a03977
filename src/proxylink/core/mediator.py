"""Request/response mediation with the privileged backend process.

Every call into the backend goes through ``CommandMediator.invoke``. Transport
failures are folded into coded responses so workflows only ever branch on
``CommandResponse.code``. There is no retry and no timeout here; callers own
the interpretation of failure codes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any, Final, Mapping, Protocol, Union

from proxylink.core.errors import TransportError

logger = logging.getLogger(__name__)

SUCCESS_CODE: Final[int] = 200
# The backend answers 404 when the user dismissed a dialog it opened.
USER_CANCELED_CODE: Final[int] = 404
UNKNOWN_ACTION_CODE: Final[int] = 501
TRANSPORT_FAILURE_CODE: Final[int] = 500
BAD_RESPONSE_CODE: Final[int] = 502

MAIN_TARGET: Final[str] = "main"
MAIN_SERVICE: Final[str] = "service:main"
THEME_SERVICE: Final[str] = "service:theme"


@dataclass(frozen=True, slots=True)
class CommandRequest:
    action: str
    params: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"action": self.action, "params": dict(self.params)}


@dataclass(frozen=True, slots=True)
class CommandResponse:
    code: int
    result: Any = None
    error: Any = None

    @property
    def ok(self) -> bool:
        return self.code == SUCCESS_CODE

    @classmethod
    def from_dict(cls, data: Any) -> "CommandResponse" | None:
        if not isinstance(data, Mapping):
            return None
        code = data.get("code")
        if isinstance(code, bool) or not isinstance(code, int):
            return None
        return cls(code=code, result=data.get("result"), error=data.get("error"))

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"code": self.code}
        if self.result is not None:
            payload["result"] = self.result
        if self.error is not None:
            payload["error"] = self.error
        return payload


RawResponse = Union[CommandResponse, Mapping[str, Any]]


class Transport(Protocol):
    async def send(self, target: str, channel: str, request: CommandRequest) -> RawResponse:
        ...


def coerce_response(raw: Any) -> CommandResponse:
    if isinstance(raw, CommandResponse):
        return raw
    parsed = CommandResponse.from_dict(raw)
    if parsed is None:
        return CommandResponse(code=BAD_RESPONSE_CODE, error=f"Malformed response: {raw!r}")
    return parsed


class CommandMediator:
    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    async def invoke(
        self, target: str, channel: str, request: CommandRequest
    ) -> CommandResponse:
        logger.debug("Invoking %s on %s/%s", request.action, target, channel)
        try:
            raw = await self._transport.send(target, channel, request)
        except TransportError as exc:
            logger.warning("Command %s failed in transport: %s", request.action, exc)
            return CommandResponse(code=TRANSPORT_FAILURE_CODE, error=exc.user_message)
        except Exception as exc:
            logger.exception("Command %s raised in transport", request.action)
            return CommandResponse(code=TRANSPORT_FAILURE_CODE, error=str(exc))

        response = coerce_response(raw)
        if response.ok:
            logger.debug("Command %s succeeded", request.action)
        else:
            logger.info(
                "Command %s returned code=%s error=%r",
                request.action,
                response.code,
                response.error,
            )
        return response
