"""Per-field validation run before a change is committed."""

from __future__ import annotations

import inspect
import logging
import re
from typing import Any, Awaitable, Callable, Mapping, Union

from proxylink.core.settings_model import ALGORITHMS, MAX_BALANCE_COUNT

logger = logging.getLogger(__name__)

Validator = Callable[[Any], Union[bool, Awaitable[bool]]]

_HTTP_URL_RE = re.compile(r"^https?://[^\s/$.?#][^\s]*$", re.IGNORECASE)


def is_port(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 0 < value <= 65535


def is_bool(value: Any) -> bool:
    return isinstance(value, bool)


def is_http_url(value: Any) -> bool:
    return isinstance(value, str) and bool(_HTTP_URL_RE.match(value.strip()))


def is_http_proxy(value: Any) -> bool:
    if not isinstance(value, Mapping):
        return False
    return is_bool(value.get("enable", False)) and is_port(value.get("port"))


def is_load_balance(value: Any) -> bool:
    if not isinstance(value, Mapping):
        return False
    count = value.get("count")
    if count is not None:
        if isinstance(count, bool) or not isinstance(count, int):
            return False
        if not 1 <= count <= MAX_BALANCE_COUNT:
            return False
    strategy = value.get("strategy")
    if strategy is not None and strategy not in ALGORITHMS:
        return False
    enable = value.get("enable")
    return enable is None or is_bool(enable)


def is_acl(value: Any) -> bool:
    if not isinstance(value, Mapping):
        return False
    return is_bool(value.get("enable", False)) and isinstance(value.get("url", ""), str)


FIELD_VALIDATORS: dict[str, Validator] = {
    "localPort": is_port,
    "pacPort": is_port,
    "gfwListUrl": is_http_url,
    "httpProxy": is_http_proxy,
    "loadBalance": is_load_balance,
    "acl": is_acl,
    "autoLaunch": is_bool,
    "fixedMenu": is_bool,
    "darkMode": is_bool,
    "autoTheme": is_bool,
    "verbose": is_bool,
    "autoHide": is_bool,
}


class ValidationGate:
    def __init__(self, validators: Mapping[str, Validator] | None = None) -> None:
        self._validators = dict(FIELD_VALIDATORS if validators is None else validators)

    async def validate(self, field: str, pending_value: Any) -> bool:
        validator = self._validators.get(field)
        if validator is None:
            return True
        try:
            outcome = validator(pending_value)
            if inspect.isawaitable(outcome):
                outcome = await outcome
        except Exception:
            logger.exception("Validator raised for field=%s", field)
            return False
        if not outcome:
            logger.info("Rejected value for field=%s", field)
        return bool(outcome)
