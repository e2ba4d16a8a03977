from __future__ import annotations

from pathlib import Path

from proxylink.core.persist_store import MemoryPersistStore, PersistStore


def test_file_store_round_trips_string_flags(tmp_path: Path) -> None:
    path = tmp_path / "persist.json"
    store = PersistStore(path=path)
    assert store.get("autoTheme") is None

    store.set("autoTheme", "true")
    store.set("darkMode", "false")

    reopened = PersistStore(path=path)
    assert reopened.get("autoTheme") == "true"
    assert reopened.get("darkMode") == "false"

    reopened.delete("darkMode")
    assert PersistStore(path=path).get("darkMode") is None


def test_file_store_ignores_invalid_content(tmp_path: Path) -> None:
    path = tmp_path / "persist.json"
    path.write_text('{"autoTheme": true, "darkMode": "true"}', encoding="utf-8")
    store = PersistStore(path=path)
    assert store.get("autoTheme") is None
    assert store.get("darkMode") == "true"


def test_memory_store() -> None:
    store = MemoryPersistStore({"darkMode": "true"})
    store.set("autoTheme", "false")
    assert store.get("autoTheme") == "false"
    store.delete("darkMode")
    assert store.get("darkMode") is None
