"""Transports carrying command requests to the backend process."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Awaitable, Callable

from proxylink.core.errors import TransportError
from proxylink.core.mediator import (
    UNKNOWN_ACTION_CODE,
    CommandRequest,
    CommandResponse,
    RawResponse,
)

logger = logging.getLogger(__name__)

Handler = Callable[[dict[str, Any]], Awaitable[RawResponse]]

MAX_RESPONSE_BYTES = 4 * 1024 * 1024


class InProcessTransport:
    """Dispatches requests to coroutine handlers registered per channel/action."""

    def __init__(self) -> None:
        self._handlers: dict[tuple[str, str], Handler] = {}

    def register(self, channel: str, action: str, handler: Handler) -> None:
        self._handlers[(channel, action)] = handler

    async def send(self, target: str, channel: str, request: CommandRequest) -> RawResponse:
        handler = self._handlers.get((channel, request.action))
        if handler is None:
            return CommandResponse(
                code=UNKNOWN_ACTION_CODE,
                error=f"No handler for {channel}/{request.action}",
            )
        return await handler(dict(request.params))


class JsonLineTransport:
    """JSON-lines over TCP, one connection per request."""

    def __init__(
        self, host: str = "127.0.0.1", port: int = 0, *, limit: int = MAX_RESPONSE_BYTES
    ) -> None:
        if not 0 < int(port) <= 65535:
            raise TransportError(
                f"Invalid backend port: {port}",
                user_message="Backend service port is invalid.",
            )
        self.host = host
        self.port = int(port)
        self.limit = limit

    async def send(self, target: str, channel: str, request: CommandRequest) -> RawResponse:
        payload = {"target": target, "channel": channel, **request.to_dict()}
        line = json.dumps(payload, separators=(",", ":")) + "\n"
        try:
            reader, writer = await asyncio.open_connection(
                self.host, self.port, limit=self.limit
            )
        except OSError as exc:
            raise TransportError(
                f"Connect to {self.host}:{self.port} failed: {exc}",
                user_message="Backend service is not reachable.",
            ) from exc

        try:
            writer.write(line.encode("utf-8"))
            await writer.drain()
            raw = await reader.readline()
        # readline() reports an overrun limit as ValueError.
        except (OSError, ValueError, asyncio.IncompleteReadError) as exc:
            raise TransportError(
                f"Exchange with {self.host}:{self.port} failed: {exc}",
                user_message="Lost connection to the backend service.",
            ) from exc
        finally:
            writer.close()
            try:
                await writer.wait_closed()
            except OSError:
                logger.debug("Backend connection closed with error", exc_info=True)

        if not raw:
            raise TransportError(
                f"Backend closed connection without answering {request.action}",
                user_message="Backend service returned no response.",
            )
        try:
            return json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise TransportError(
                f"Undecodable response for {request.action}: {exc}",
                user_message="Backend service returned an invalid response.",
            ) from exc
