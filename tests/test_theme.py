from __future__ import annotations

import pytest

pytest.importorskip("PyQt6.QtWidgets")

from proxylink.core.events import THEME_UPDATE, EventChannel  # noqa: E402
from proxylink.core.persist_store import MemoryPersistStore  # noqa: E402
from proxylink.ui.theme import (  # noqa: E402
    ThemeController,
    build_qss,
    theme_display_name,
    theme_for_dark_colors,
    _DARK,
    _LIGHT,
)


def test_theme_for_dark_colors() -> None:
    assert theme_for_dark_colors(True) == "dark"
    assert theme_for_dark_colors(False) == "light"
    assert theme_display_name("dark") == "Dark"


def test_qss_uses_palette_colors() -> None:
    assert _DARK.bg in build_qss(_DARK)
    assert _LIGHT.subheader_bg in build_qss(_LIGHT)


def test_controller_applies_and_remembers_theme() -> None:
    events = EventChannel()
    persist = MemoryPersistStore()
    app = object()
    applied: list[tuple[object, str]] = []
    controller = ThemeController(
        events,
        persist,
        app_provider=lambda: app,
        apply=lambda target, name: applied.append((target, name)),
    )

    events.publish(THEME_UPDATE, {"shouldUseDarkColors": True})
    assert applied == [(app, "dark")]
    assert persist.get("darkMode") == "true"
    assert controller.current == "dark"

    events.publish(THEME_UPDATE, {"shouldUseDarkColors": False})
    assert applied[-1] == (app, "light")
    assert persist.get("darkMode") == "false"


def test_controller_without_app_only_records() -> None:
    events = EventChannel()
    persist = MemoryPersistStore()
    applied: list[str] = []
    controller = ThemeController(
        events, persist, app_provider=lambda: None, apply=lambda _app, name: applied.append(name)
    )

    events.publish(THEME_UPDATE, "garbage")
    events.publish(THEME_UPDATE, {"shouldUseDarkColors": True})
    controller.close()
    events.publish(THEME_UPDATE, {"shouldUseDarkColors": False})

    assert applied == []
    assert controller.current == "dark"
    assert persist.get("darkMode") == "true"
