"""Explicit event channel shared by the settings surface and its observers."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
import logging
from typing import Any, Callable, Final, Literal

logger = logging.getLogger(__name__)

FIELD_COMMITTED: Final[str] = "field:committed"
THEME_UPDATE: Final[str] = "theme:update"
RECONNECT: Final[str] = "reconnect"
STATUS: Final[str] = "status"
NOTIFICATION: Final[str] = "notification"

Listener = Callable[[Any], None]
NotificationVariant = Literal["success", "error", "info", "warning"]


@dataclass(frozen=True, slots=True)
class FieldCommitted:
    field: str
    value: Any


@dataclass(frozen=True, slots=True)
class Notification:
    message: str
    variant: NotificationVariant


@dataclass(frozen=True, slots=True)
class StatusChange:
    key: str
    value: bool


class EventChannel:
    """Fire-and-forget publish/subscribe keyed by topic name."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = defaultdict(list)

    def subscribe(self, topic: str, listener: Listener) -> Callable[[], None]:
        self._listeners[topic].append(listener)

        def _unsubscribe() -> None:
            try:
                self._listeners[topic].remove(listener)
            except ValueError:
                pass

        return _unsubscribe

    def publish(self, topic: str, payload: Any = None) -> None:
        for listener in list(self._listeners.get(topic, ())):
            try:
                listener(payload)
            except Exception:
                logger.exception("Listener failed for topic=%s", topic)

    def notify(self, message: str, variant: NotificationVariant) -> None:
        self.publish(NOTIFICATION, Notification(message=message, variant=variant))


class StatusBoard:
    """Process-wide boolean status flags such as ``waiting``."""

    def __init__(self, events: EventChannel | None = None) -> None:
        self._events = events
        self._flags: dict[str, bool] = {}

    def get(self, key: str) -> bool:
        return self._flags.get(key, False)

    def set_status(self, key: str, value: bool) -> None:
        self._flags[key] = bool(value)
        logger.debug("Status %s=%s", key, value)
        if self._events is not None:
            self._events.publish(STATUS, StatusChange(key=key, value=bool(value)))
