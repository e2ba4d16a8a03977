"""Map touched settings fields to the backend subsystems that must restart."""

from __future__ import annotations

from enum import Enum
from typing import Final, Iterable


class ReconnectSignal(str, Enum):
    SERVER = "reconnect-server"
    HTTP = "reconnect-http"
    PAC = "reconnect-pac"


# Touched when the whole settings model was replaced (restore, reset).
SETTINGS_WILDCARD: Final[str] = "$settings"

_SERVER_FIELDS: Final = frozenset({"localPort", "pacPort", "verbose", "acl", "aclRules", "pac"})
_HTTP_FIELDS: Final = frozenset({"localPort", "httpProxyPort", "httpProxy"})
_PAC_FIELDS: Final = frozenset({"pacPort"})

RECONNECT_TABLE: Final[tuple[tuple[frozenset[str], ReconnectSignal], ...]] = (
    (_SERVER_FIELDS | {SETTINGS_WILDCARD}, ReconnectSignal.SERVER),
    (_HTTP_FIELDS | {SETTINGS_WILDCARD}, ReconnectSignal.HTTP),
    (_PAC_FIELDS | {SETTINGS_WILDCARD}, ReconnectSignal.PAC),
)

SIGNAL_ORDER: Final[tuple[ReconnectSignal, ...]] = tuple(signal for _, signal in RECONNECT_TABLE)


def reconnect_signals(fields: Iterable[str]) -> frozenset[ReconnectSignal]:
    touched = frozenset(fields)
    return frozenset(signal for conditions, signal in RECONNECT_TABLE if conditions & touched)


def ordered(signals: Iterable[ReconnectSignal]) -> list[ReconnectSignal]:
    present = set(signals)
    return [signal for signal in SIGNAL_ORDER if signal in present]
