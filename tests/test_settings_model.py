from __future__ import annotations

from proxylink.core.settings_model import (
    DEFAULT_SETTINGS,
    LoadBalance,
    SettingsModel,
    build_draft,
    split_field_path,
)


def test_load_balance_backfills_missing_sub_fields() -> None:
    assert LoadBalance.from_value({"enable": True}).to_dict() == {
        "strategy": "POLLING",
        "count": 3,
        "enable": True,
    }
    assert LoadBalance.from_value(None) == LoadBalance()
    assert LoadBalance.from_value({"count": 5, "strategy": "RANDOM"}).count == 5


def test_draft_is_complete_even_from_partial_settings() -> None:
    draft = build_draft({"localPort": 2080, "loadBalance": {"count": 7}})

    assert set(draft) == set(DEFAULT_SETTINGS)
    assert draft["localPort"] == 2080
    assert draft["loadBalance"] == {"strategy": "POLLING", "count": 7, "enable": False}
    assert draft["acl"] == {"enable": False, "url": ""}


def test_draft_keeps_committed_fields_without_default() -> None:
    draft = build_draft({"language": "en-US"})

    assert draft["language"] == "en-US"
    assert set(draft) == set(DEFAULT_SETTINGS) | {"language"}


def test_model_set_load_balance_keeps_record_whole() -> None:
    model = SettingsModel()
    model.set("loadBalance", {"enable": True})
    assert model["loadBalance"] == {"strategy": "POLLING", "count": 3, "enable": True}


def test_model_reset_discards_draft_edits() -> None:
    model = SettingsModel({"pacPort": 1090})
    model.set("pacPort", 3000)
    model.reset({"pacPort": 4000})
    assert model.get("pacPort") == 4000


def test_pending_value_merges_nested_edit() -> None:
    model = SettingsModel({"httpProxy": {"enable": False, "port": 1095}})
    field, pending = model.pending_value("httpProxy.enable", True)

    assert field == "httpProxy"
    assert pending == {"enable": True, "port": 1095}
    assert model.get("httpProxy") == {"enable": False, "port": 1095}


def test_snapshot_is_a_copy() -> None:
    model = SettingsModel()
    snap = model.snapshot()
    snap["acl"]["url"] = "changed"
    assert model.get("acl")["url"] == ""


def test_split_field_path() -> None:
    assert split_field_path("loadBalance.count") == ("loadBalance", "count")
    assert split_field_path("localPort") == ("localPort", None)
