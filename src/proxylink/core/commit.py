"""Field commit dispatch.

``COMMIT_EFFECTS`` lists every field whose commit needs more than the generic
"set field to value"; any other field goes through ``commit_value``.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Awaitable, Callable, Mapping, Protocol

from proxylink.core.errors import StartupRegistrationError
from proxylink.core.events import THEME_UPDATE, EventChannel
from proxylink.core.logging_setup import set_verbose
from proxylink.core.settings_model import LoadBalance, SettingsModel, normalize_record
from proxylink.core.startup import StartupRegistrar

logger = logging.getLogger(__name__)


class SettingsSink(Protocol):
    def set_setting(self, key: str, value: Any) -> None:
        ...


@dataclass(slots=True)
class CommitContext:
    model: SettingsModel
    store: SettingsSink
    events: EventChannel
    startup: StartupRegistrar | None = None


CommitEffect = Callable[[CommitContext, str, Any], Awaitable[bool]]


async def commit_value(ctx: CommitContext, field: str, value: Any) -> bool:
    ctx.model.set(field, value)
    ctx.store.set_setting(field, ctx.model.get(field))
    return True


async def commit_record(ctx: CommitContext, field: str, value: Any) -> bool:
    return await commit_value(ctx, field, normalize_record(field, value))


async def commit_load_balance(ctx: CommitContext, field: str, value: Any) -> bool:
    return await commit_value(ctx, field, LoadBalance.from_value(value).to_dict())


async def register_startup(ctx: CommitContext, field: str, value: Any) -> bool:
    if ctx.startup is None:
        logger.warning("No startup registrar configured; %s not applied", field)
        return False
    try:
        await ctx.startup.set_startup_on_boot(bool(value))
    except StartupRegistrationError:
        return False
    return await commit_value(ctx, field, bool(value))


async def apply_log_level(ctx: CommitContext, field: str, value: Any) -> bool:
    set_verbose(bool(value))
    return await commit_value(ctx, field, value)


async def broadcast_theme(ctx: CommitContext, field: str, value: Any) -> bool:
    ctx.events.publish(THEME_UPDATE, {"shouldUseDarkColors": bool(value)})
    return await commit_value(ctx, field, value)


COMMIT_EFFECTS: dict[str, CommitEffect] = {
    "httpProxy": commit_record,
    "loadBalance": commit_load_balance,
    "acl": commit_record,
    "autoLaunch": register_startup,
    "darkMode": broadcast_theme,
    "verbose": apply_log_level,
}


class CommitDispatcher:
    def __init__(
        self,
        ctx: CommitContext,
        effects: Mapping[str, CommitEffect] | None = None,
        default: CommitEffect = commit_value,
    ) -> None:
        self._ctx = ctx
        self._effects = dict(COMMIT_EFFECTS if effects is None else effects)
        self._default = default

    def effect_for(self, field: str) -> CommitEffect:
        return self._effects.get(field, self._default)

    async def dispatch(self, field: str, value: Any) -> bool:
        return await self.effect_for(field)(self._ctx, field, value)
