"""Two-valued theme registry shared by the editor and the terminal."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from typing_extensions import TypedDict


class ThemeName(str, Enum):
    DARK = "dark"
    LIGHT = "light"


DEFAULT_THEME = ThemeName.DARK


class EditorThemeDefinition(TypedDict):
    base: str
    inherit: bool
    rules: list[dict[str, str]]
    colors: dict[str, str]


@dataclass(frozen=True)
class ThemeProfile:
    name: ThemeName
    background: str
    foreground: str
    editor_theme: str
    editor_base: str
    # Qt shell chrome; not used by the core.
    chrome: dict[str, str] = field(default_factory=dict)

    def editor_definition(self) -> EditorThemeDefinition:
        return EditorThemeDefinition(
            base=self.editor_base,
            inherit=True,
            rules=[],
            colors={"editor.background": self.background},
        )


THEMES: dict[ThemeName, ThemeProfile] = {
    ThemeName.DARK: ThemeProfile(
        name=ThemeName.DARK,
        background="#1a1a1a",
        foreground="#ffffff",
        editor_theme="customDark",
        editor_base="vs-dark",
        chrome={
            "window_bg": "#111827",
            "window_fg": "#ffffff",
            "panel_bg": "#1f2937",
            "border": "#374151",
            "accent": "#2563eb",
            "hover": "#374151",
            "muted_fg": "#6b7280",
        },
    ),
    ThemeName.LIGHT: ThemeProfile(
        name=ThemeName.LIGHT,
        background="#ffffff",
        foreground="#000000",
        editor_theme="customLight",
        editor_base="vs",
        chrome={
            "window_bg": "#ffffff",
            "window_fg": "#111827",
            "panel_bg": "#f3f4f6",
            "border": "#e5e7eb",
            "accent": "#2563eb",
            "hover": "#e5e7eb",
            "muted_fg": "#6b7280",
        },
    ),
}


class ThemeRegistrar(Protocol):
    def define_theme(self, name: str, definition: EditorThemeDefinition) -> None: ...


def resolve_theme(value: ThemeName | str | None) -> ThemeName:
    if isinstance(value, ThemeName):
        return value
    normalized = str(value or "").strip().lower()
    for candidate in ThemeName:
        if candidate.value == normalized:
            return candidate
    return DEFAULT_THEME


def theme_profile(value: ThemeName | str | None) -> ThemeProfile:
    return THEMES[resolve_theme(value)]


def toggle_theme(value: ThemeName | str) -> ThemeName:
    current = resolve_theme(value)
    return ThemeName.LIGHT if current == ThemeName.DARK else ThemeName.DARK


def register_editor_themes(registrar: ThemeRegistrar) -> list[str]:
    """Define every editor theme on the editing surface; call before first use."""
    registered: list[str] = []
    for profile in THEMES.values():
        registrar.define_theme(profile.editor_theme, profile.editor_definition())
        registered.append(profile.editor_theme)
    return registered
