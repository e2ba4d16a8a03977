"""Settings-surface coordinator.

One ``SettingsCoordinator`` lives from the moment the settings surface opens
until it closes:

- ``open()`` seeds the draft from the committed settings, reconciles the theme
  and reads the launch-on-boot registration.
- ``change_field()`` validates, commits and records one edit.
- ``close()`` flushes the touched fields and emits reconnect signals.

Backend calls still in flight when the surface closes are not cancelled. Their
responses resolve into no-ops: no notification, no model change. The PAC
``waiting`` status is still lowered so the app never stays busy.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from proxylink.core.acl import AclUrlWorkflow
from proxylink.core.commit import CommitContext, CommitDispatcher
from proxylink.core.dirty_tracker import DirtyFieldTracker
from proxylink.core.events import FIELD_COMMITTED, RECONNECT, EventChannel, FieldCommitted, StatusBoard
from proxylink.core.mediator import MAIN_TARGET, CommandMediator, CommandResponse
from proxylink.core.pac import WAITING_CLEAR_DELAY_S, PacRegenerationWorkflow
from proxylink.core.persist_store import KeyValueStore
from proxylink.core.reconnect import SETTINGS_WILDCARD, ReconnectSignal, ordered, reconnect_signals
from proxylink.core.settings_model import SettingsModel
from proxylink.core.settings_store import CommittedSettingsStore
from proxylink.core.startup import StartupRegistrar
from proxylink.core.theme_sync import ThemeSyncWorkflow
from proxylink.core.validation import ValidationGate

logger = logging.getLogger(__name__)


class SettingsCoordinator:
    def __init__(
        self,
        *,
        store: CommittedSettingsStore,
        mediator: CommandMediator,
        persist: KeyValueStore,
        events: EventChannel | None = None,
        status: StatusBoard | None = None,
        startup: StartupRegistrar | None = None,
        gate: ValidationGate | None = None,
        target: str = MAIN_TARGET,
        waiting_clear_delay_s: float = WAITING_CLEAR_DELAY_S,
    ) -> None:
        self.store = store
        self.events = events or EventChannel()
        self.status = status or StatusBoard(self.events)
        self.model = SettingsModel(store.settings)
        self.tracker = DirtyFieldTracker()
        self.gate = gate or ValidationGate()
        self._startup = startup
        self._closed = False
        self._opened = False
        self._unsubscribe: Callable[[], None] | None = None

        self.dispatcher = CommitDispatcher(
            CommitContext(model=self.model, store=store, events=self.events, startup=startup)
        )
        self.pac = PacRegenerationWorkflow(
            mediator,
            self.status,
            self.events,
            target=target,
            clear_delay_s=waiting_clear_delay_s,
            is_active=self.is_active,
        )
        self.theme = ThemeSyncWorkflow(
            mediator,
            persist,
            self.events,
            self._write_dark_mode,
            target=target,
            is_active=self.is_active,
        )
        self.acl = AclUrlWorkflow(
            mediator,
            self.events,
            self._write_acl_url,
            target=target,
            is_active=self.is_active,
        )

    def is_active(self) -> bool:
        return self._opened and not self._closed

    async def open(self) -> None:
        if self._opened:
            return
        self._opened = True
        self.model.reset(self.store.settings)
        self._unsubscribe = self.store.subscribe(self._on_external_settings)
        self.theme.reconcile_on_mount(bool(self.model.get("darkMode")))
        if self._startup is not None:
            await self._sync_startup_state()
        logger.info("Settings surface opened")

    async def _sync_startup_state(self) -> None:
        registered = await self._startup.get_startup_on_boot()
        if bool(self.store.settings.get("autoLaunch")) != registered:
            logger.info("Launch-on-boot registration is %s; updating settings", registered)
            self.store.set_setting("autoLaunch", registered)

    def _on_external_settings(self, settings: Mapping[str, Any]) -> None:
        # Committed settings always win over the local draft. Touched fields are
        # kept: committed edits come back through here and still need reconnects.
        self.model.reset(settings)

    async def change_field(self, name: str, value: Any) -> bool:
        """Validate and commit one edit; ``name`` may be nested (``acl.url``)."""
        if not self.is_active():
            logger.debug("Ignoring change to %s outside an open surface", name)
            return False
        field, pending = self.model.pending_value(name, value)
        if not await self.gate.validate(field, pending):
            return False
        if not await self.dispatcher.dispatch(field, pending):
            logger.info("Commit effect declined change to %s", field)
            return False
        self.tracker.touch(field, pending)
        self.events.publish(FIELD_COMMITTED, FieldCommitted(field=field, value=self.model.get(field)))
        return True

    def touch_field(self, field: str, status: bool = True) -> None:
        """Mark a field edited by a collaborator outside the form (ACL rules, PAC editors)."""
        self.tracker.touch(field, status)

    def is_field_touched(self, field: str) -> bool:
        return self.tracker.is_touched(field)

    def restore_settings(self, settings: Mapping[str, Any]) -> None:
        self.store.replace(settings)
        self.tracker.touch(SETTINGS_WILDCARD, True)

    async def regenerate_pac(self, *, url: str | None = None, text: str | None = None) -> CommandResponse:
        return await self.pac.regenerate(settings=self.store.settings, url=url, text=text)

    async def select_acl_url(self) -> CommandResponse:
        return await self.acl.select()

    async def set_auto_theme(self, enabled: bool) -> None:
        await self.theme.set_auto_theme(enabled)

    async def _write_dark_mode(self, value: bool) -> None:
        await self.change_field("darkMode", value)

    async def _write_acl_url(self, url: str) -> None:
        await self.change_field("acl.url", url)

    def close(self) -> frozenset[ReconnectSignal]:
        if self._closed:
            return frozenset()
        self._closed = True
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        fields = self.tracker.flush()
        signals = reconnect_signals(fields)
        for signal in ordered(signals):
            self.events.publish(RECONNECT, signal)
        logger.info(
            "Settings surface closed: touched=%s signals=%s",
            sorted(fields),
            [signal.value for signal in ordered(signals)],
        )
        return signals
