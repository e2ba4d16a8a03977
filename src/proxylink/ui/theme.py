"""App theming (light/dark) driven by ``theme:update`` broadcasts."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Callable, Literal, Mapping

from PyQt6.QtGui import QColor, QPalette
from PyQt6.QtWidgets import QApplication

from proxylink.core.events import THEME_UPDATE, EventChannel
from proxylink.core.persist_store import KeyValueStore
from proxylink.core.theme_sync import DARK_MODE_KEY, flag_to_str

logger = logging.getLogger(__name__)

ThemeName = Literal["dark", "light"]
DEFAULT_THEME: ThemeName = "light"


@dataclass(frozen=True, slots=True)
class ThemeColors:
    bg: str
    surface: str
    surface_2: str
    border: str
    text: str
    muted: str
    accent: str
    highlight: str
    subheader_bg: str


@dataclass(frozen=True, slots=True)
class Theme:
    name: ThemeName
    display_name: str
    palette: QPalette
    qss: str


# Modern slate palette (no pure black/white).
_DARK = ThemeColors(
    bg="#0b1220",
    surface="#111827",
    surface_2="#0f172a",
    border="#243042",
    text="#e5e7eb",
    muted="#94a3b8",
    accent="#60a5fa",
    highlight="#1d4ed8",
    subheader_bg="#4e4e4e",
)

# Soft neutrals (no pure white background).
_LIGHT = ThemeColors(
    bg="#f6f8fc",
    surface="#ffffff",
    surface_2="#eef2f7",
    border="#cbd5e1",
    text="#111827",
    muted="#64748b",
    accent="#2563eb",
    highlight="#1d4ed8",
    subheader_bg="#f5f5f5",
)


def theme_for_dark_colors(should_use_dark_colors: bool) -> ThemeName:
    return "dark" if should_use_dark_colors else "light"


def theme_display_name(name: ThemeName) -> str:
    return "Dark" if name == "dark" else "Light"


def _colors(name: ThemeName) -> ThemeColors:
    return _DARK if name == "dark" else _LIGHT


def _build_palette(colors: ThemeColors) -> QPalette:
    palette = QPalette()
    roles = {
        QPalette.ColorRole.Window: colors.bg,
        QPalette.ColorRole.WindowText: colors.text,
        QPalette.ColorRole.Base: colors.surface,
        QPalette.ColorRole.AlternateBase: colors.surface_2,
        QPalette.ColorRole.Text: colors.text,
        QPalette.ColorRole.Button: colors.surface_2,
        QPalette.ColorRole.ButtonText: colors.text,
        QPalette.ColorRole.ToolTipBase: colors.surface,
        QPalette.ColorRole.ToolTipText: colors.text,
        QPalette.ColorRole.Highlight: colors.highlight,
        QPalette.ColorRole.HighlightedText: "#f8fafc",
        QPalette.ColorRole.Link: colors.accent,
    }
    for role, color in roles.items():
        palette.setColor(role, QColor(color))
    return palette


def build_qss(colors: ThemeColors) -> str:
    return f"""
    QWidget {{
      background: {colors.bg};
      color: {colors.text};
      font-size: 13px;
    }}

    QLabel[role="subheader"] {{
      background: {colors.subheader_bg};
      color: {colors.muted};
      padding: 2px 8px;
    }}

    QLineEdit, QSpinBox, QPlainTextEdit {{
      background: {colors.surface};
      border: 1px solid {colors.border};
      border-radius: 8px;
      min-height: 30px;
      padding: 4px 8px;
      selection-background-color: {colors.highlight};
    }}

    QLineEdit:focus, QSpinBox:focus, QPlainTextEdit:focus {{
      border: 1px solid {colors.accent};
    }}

    QLineEdit[invalid="true"], QSpinBox[invalid="true"] {{
      border: 1px solid #dc2626;
    }}

    QCheckBox::indicator:checked {{
      background: {colors.accent};
      border: 1px solid {colors.accent};
    }}

    QPushButton {{
      background: {colors.surface_2};
      border: 1px solid {colors.border};
      border-radius: 8px;
      padding: 6px 12px;
    }}

    QPushButton:disabled {{
      color: {colors.muted};
    }}
    """


def get_theme(name: ThemeName) -> Theme:
    colors = _colors(name)
    return Theme(
        name=name,
        display_name=theme_display_name(name),
        palette=_build_palette(colors),
        qss=build_qss(colors),
    )


def apply_theme(app: QApplication, name: ThemeName) -> None:
    theme = get_theme(name)
    app.setStyle("Fusion")
    app.setPalette(theme.palette)
    app.setStyleSheet(theme.qss)


class ThemeController:
    """Applies ``theme:update`` broadcasts and remembers the last applied mode.

    The remembered ``darkMode`` flag is what the settings surface compares
    against when it mounts.
    """

    def __init__(
        self,
        events: EventChannel,
        persist: KeyValueStore,
        *,
        app_provider: Callable[[], Any] = QApplication.instance,
        apply: Callable[[Any, ThemeName], None] = apply_theme,
    ) -> None:
        self._persist = persist
        self._app_provider = app_provider
        self._apply = apply
        self.current: ThemeName | None = None
        self._unsubscribe = events.subscribe(THEME_UPDATE, self._on_theme_update)

    def _on_theme_update(self, payload: Any) -> None:
        if not isinstance(payload, Mapping):
            logger.warning("Ignoring malformed theme update: %r", payload)
            return
        dark = bool(payload.get("shouldUseDarkColors"))
        name = theme_for_dark_colors(dark)
        self._persist.set(DARK_MODE_KEY, flag_to_str(dark))
        self.current = name
        app = self._app_provider()
        if app is None:
            logger.debug("No QApplication running; theme %s recorded only", name)
            return
        self._apply(app, name)
        logger.info("Applied %s theme", name)

    def close(self) -> None:
        self._unsubscribe()
