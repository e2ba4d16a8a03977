from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from proxylink.core.errors import StartupRegistrationError
from proxylink.core.startup import XdgAutostartRegistrar


def test_enable_and_disable_autostart(tmp_path: Path) -> None:
    registrar = XdgAutostartRegistrar("/opt/proxylink/bin/proxylink-tray", autostart_dir=tmp_path / "autostart")
    assert asyncio.run(registrar.get_startup_on_boot()) is False

    asyncio.run(registrar.set_startup_on_boot(True))
    content = registrar.entry_path.read_text(encoding="utf-8")
    assert "Exec=/opt/proxylink/bin/proxylink-tray\n" in content
    assert asyncio.run(registrar.get_startup_on_boot()) is True

    asyncio.run(registrar.set_startup_on_boot(False))
    assert not registrar.entry_path.exists()
    assert asyncio.run(registrar.get_startup_on_boot()) is False


def test_hidden_entry_counts_as_disabled(tmp_path: Path) -> None:
    registrar = XdgAutostartRegistrar("proxylink-tray", autostart_dir=tmp_path)
    registrar.entry_path.write_text("[Desktop Entry]\nHidden=true\n", encoding="utf-8")
    assert asyncio.run(registrar.get_startup_on_boot()) is False


def test_write_failure_raises_typed_error(tmp_path: Path) -> None:
    blocker = tmp_path / "autostart"
    blocker.write_text("not a directory", encoding="utf-8")
    registrar = XdgAutostartRegistrar("proxylink-tray", autostart_dir=blocker)
    with pytest.raises(StartupRegistrationError):
        asyncio.run(registrar.set_startup_on_boot(True))


def test_registrar_requires_a_command(tmp_path: Path) -> None:
    with pytest.raises(StartupRegistrationError):
        XdgAutostartRegistrar("  ", autostart_dir=tmp_path)
