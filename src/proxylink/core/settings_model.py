"""Draft settings model seeded from committed settings."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any, Final, Literal, Mapping, get_args

Algorithm = Literal["POLLING", "RANDOM"]
ALGORITHMS: Final[tuple[str, ...]] = get_args(Algorithm)

DEFAULT_STRATEGY: Final[Algorithm] = "POLLING"
DEFAULT_BALANCE_COUNT: Final[int] = 3
MAX_BALANCE_COUNT: Final[int] = 10

DEFAULT_LOCAL_PORT: Final[int] = 1080
DEFAULT_PAC_PORT: Final[int] = 1090
DEFAULT_HTTP_PROXY_PORT: Final[int] = 1095
DEFAULT_GFWLIST_URL: Final[str] = (
    "https://raw.githubusercontent.com/gfwlist/gfwlist/master/gfwlist.txt"
)


@dataclass(frozen=True, slots=True)
class LoadBalance:
    strategy: str = DEFAULT_STRATEGY
    count: int = DEFAULT_BALANCE_COUNT
    enable: bool = False

    @classmethod
    def from_value(cls, value: Any) -> "LoadBalance":
        """Build a complete record, backfilling any missing sub-field."""
        if isinstance(value, LoadBalance):
            return value
        data = value if isinstance(value, Mapping) else {}
        strategy = data.get("strategy")
        count = data.get("count")
        enable = data.get("enable")
        return cls(
            strategy=DEFAULT_STRATEGY if strategy is None else strategy,
            count=DEFAULT_BALANCE_COUNT if count is None else count,
            enable=False if enable is None else enable,
        )

    def to_dict(self) -> dict[str, Any]:
        return {"strategy": self.strategy, "count": self.count, "enable": self.enable}


DEFAULT_SETTINGS: Final[dict[str, Any]] = {
    "localPort": DEFAULT_LOCAL_PORT,
    "pacPort": DEFAULT_PAC_PORT,
    "gfwListUrl": DEFAULT_GFWLIST_URL,
    "httpProxy": {"enable": False, "port": DEFAULT_HTTP_PROXY_PORT},
    "loadBalance": LoadBalance().to_dict(),
    "autoLaunch": False,
    "fixedMenu": False,
    "darkMode": False,
    "autoTheme": False,
    "verbose": False,
    "autoHide": False,
    "acl": {"enable": False, "url": ""},
}

SETTINGS_FIELDS: Final[tuple[str, ...]] = tuple(DEFAULT_SETTINGS)
RECORD_FIELDS: Final[frozenset[str]] = frozenset({"httpProxy", "acl"})


def normalize_record(field: str, value: Any) -> dict[str, Any]:
    merged = dict(DEFAULT_SETTINGS[field])
    if isinstance(value, Mapping):
        merged.update(value)
    return merged


def build_draft(committed: Mapping[str, Any] | None) -> dict[str, Any]:
    committed = committed or {}
    draft: dict[str, Any] = {}
    for field, default in DEFAULT_SETTINGS.items():
        value = committed.get(field)
        if field == "loadBalance":
            draft[field] = LoadBalance.from_value(value).to_dict()
        elif field in RECORD_FIELDS:
            draft[field] = normalize_record(field, value)
        elif value is None:
            draft[field] = copy.deepcopy(default)
        else:
            draft[field] = copy.deepcopy(value)
    # Fields without a default (e.g. ``language``) are carried as committed.
    for field, value in committed.items():
        if field not in draft:
            draft[field] = copy.deepcopy(value)
    return draft


def split_field_path(name: str) -> tuple[str, str | None]:
    """Split ``loadBalance.count`` into ``("loadBalance", "count")``."""
    head, _, rest = name.partition(".")
    return head, (rest or None)


class SettingsModel:
    """Mapping of field name to value for one settings-surface session."""

    def __init__(self, committed: Mapping[str, Any] | None = None) -> None:
        self._values = build_draft(committed)

    def reset(self, committed: Mapping[str, Any] | None) -> None:
        self._values = build_draft(committed)

    def get(self, field: str, default: Any = None) -> Any:
        return copy.deepcopy(self._values.get(field, default))

    def __getitem__(self, field: str) -> Any:
        return copy.deepcopy(self._values[field])

    def __contains__(self, field: object) -> bool:
        return field in self._values

    def set(self, field: str, value: Any) -> None:
        if field == "loadBalance":
            value = LoadBalance.from_value(value).to_dict()
        elif field in RECORD_FIELDS:
            value = normalize_record(field, value)
        self._values[field] = copy.deepcopy(value)

    def pending_value(self, name: str, value: Any) -> tuple[str, Any]:
        """Resolve a possibly nested edit into its top-level field and record."""
        field, sub_key = split_field_path(name)
        if sub_key is None:
            return field, value
        current = self._values.get(field)
        record = dict(current) if isinstance(current, Mapping) else {}
        record[sub_key] = value
        return field, record

    def snapshot(self) -> dict[str, Any]:
        return copy.deepcopy(self._values)
