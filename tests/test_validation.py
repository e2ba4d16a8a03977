from __future__ import annotations

import asyncio

from proxylink.core.validation import ValidationGate


def _validate(field: str, value, gate: ValidationGate | None = None) -> bool:
    return asyncio.run((gate or ValidationGate()).validate(field, value))


def test_ports() -> None:
    assert _validate("localPort", 1080)
    assert not _validate("localPort", 0)
    assert not _validate("pacPort", 70000)
    assert not _validate("pacPort", "1090")
    assert not _validate("localPort", True)


def test_urls_and_records() -> None:
    assert _validate("gfwListUrl", "https://example.com/gfwlist.txt")
    assert not _validate("gfwListUrl", "ftp://example.com/list")
    assert not _validate("gfwListUrl", "not a url")
    assert _validate("httpProxy", {"enable": True, "port": 1095})
    assert not _validate("httpProxy", {"enable": True, "port": -1})
    assert _validate("acl", {"enable": True, "url": "/tmp/rules.acl"})
    assert not _validate("acl", {"enable": "yes", "url": ""})


def test_load_balance() -> None:
    assert _validate("loadBalance", {"enable": True})
    assert _validate("loadBalance", {"strategy": "RANDOM", "count": 10, "enable": False})
    assert not _validate("loadBalance", {"count": 0})
    assert not _validate("loadBalance", {"count": 11})
    assert not _validate("loadBalance", {"strategy": "WEIGHTED"})


def test_unknown_field_passes_and_booleans_checked() -> None:
    assert _validate("language", "en")
    assert _validate("darkMode", False)
    assert not _validate("darkMode", "false")


def test_async_validator_and_raising_validator() -> None:
    async def remote_check(value) -> bool:
        await asyncio.sleep(0)
        return value == "ok"

    def broken(_value) -> bool:
        raise RuntimeError("boom")

    gate = ValidationGate({"remote": remote_check, "broken": broken})
    assert _validate("remote", "ok", gate)
    assert not _validate("remote", "nope", gate)
    assert not _validate("broken", 1, gate)
