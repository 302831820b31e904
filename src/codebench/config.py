"""XDG config loading/saving."""

from __future__ import annotations

import sys
from contextlib import suppress
from pathlib import Path
from typing import Literal, cast

from pydantic import BaseModel, ConfigDict, Field, field_validator

if sys.version_info >= (3, 11):
    import tomllib
else:  # pragma: no cover
    import tomli as tomllib

DEFAULT_CONFIG_PATH = Path("~/.config/codebench/config.toml").expanduser()
DEFAULT_THEME: Literal["dark", "light"] = "dark"
DEFAULT_EDITOR_FONT_SIZE = 14
DEFAULT_PREVIEW_DEBOUNCE_MS = 300
DEFAULT_EXECUTION_TIMEOUT_MS = 2000
DEFAULT_EXECUTION_MAX_MEMORY_MB = 64

_VALID_THEMES = {"dark", "light"}
_BOUNDS: dict[str, tuple[int, int]] = {
    "editor_font_size": (8, 32),
    "preview_debounce_ms": (50, 5000),
    "execution_timeout_ms": (100, 60000),
    "execution_max_memory_mb": (16, 1024),
}
_BOOL_FIELDS = ("show_terminal", "show_preview", "auto_save", "word_wrap", "minimap")


class AppConfig(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    theme: Literal["dark", "light"] = DEFAULT_THEME
    show_terminal: bool = False
    show_preview: bool = False
    auto_save: bool = False
    word_wrap: bool = True
    minimap: bool = True
    editor_font_size: int = Field(default=DEFAULT_EDITOR_FONT_SIZE, ge=8, le=32)
    preview_debounce_ms: int = Field(default=DEFAULT_PREVIEW_DEBOUNCE_MS, ge=50, le=5000)
    execution_timeout_ms: int = Field(default=DEFAULT_EXECUTION_TIMEOUT_MS, ge=100, le=60000)
    execution_max_memory_mb: int = Field(default=DEFAULT_EXECUTION_MAX_MEMORY_MB, ge=16, le=1024)

    @field_validator("theme")
    @classmethod
    def _validate_theme(cls, value: str) -> str:
        if value not in _VALID_THEMES:
            raise ValueError(f"Invalid theme: {value}")
        return value

    @property
    def preview_debounce_seconds(self) -> float:
        return self.preview_debounce_ms / 1000.0

    @property
    def execution_max_memory_bytes(self) -> int:
        return self.execution_max_memory_mb * 1024 * 1024


def get_config_path(path: str | Path | None = None) -> Path:
    if path is None:
        return DEFAULT_CONFIG_PATH
    return Path(path).expanduser()


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def _toml_scalar(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return f'"{_escape(value)}"'
    raise TypeError(f"Unsupported TOML scalar type: {type(value)!r}")


def _sanitize(raw: dict[str, object]) -> AppConfig:
    cfg = AppConfig()

    theme = raw.get("theme", cfg.theme)
    if isinstance(theme, str) and theme.strip().lower() in _VALID_THEMES:
        cfg.theme = cast(Literal["dark", "light"], theme.strip().lower())

    for name in _BOOL_FIELDS:
        value = raw.get(name)
        if isinstance(value, bool):
            setattr(cfg, name, value)

    for name, (low, high) in _BOUNDS.items():
        value = raw.get(name)
        if isinstance(value, int) and not isinstance(value, bool) and low <= value <= high:
            setattr(cfg, name, value)

    return cfg


def load_config(path: str | Path | None = None) -> AppConfig:
    resolved = get_config_path(path)
    if not resolved.exists():
        return AppConfig()
    try:
        with resolved.open("rb") as handle:
            raw = tomllib.load(handle)
    except (tomllib.TOMLDecodeError, OSError):
        return AppConfig()
    if not isinstance(raw, dict):
        return AppConfig()
    return _sanitize(raw)


def save_config(config: AppConfig, path: str | Path | None = None) -> Path:
    resolved = get_config_path(path)
    resolved.parent.mkdir(parents=True, exist_ok=True)
    lines = [f"theme = {_toml_scalar(config.theme)}"]
    lines.extend(f"{name} = {_toml_scalar(getattr(config, name))}" for name in _BOOL_FIELDS)
    lines.extend(f"{name} = {_toml_scalar(getattr(config, name))}" for name in _BOUNDS)
    resolved.write_text("\n".join(lines) + "\n", encoding="utf-8")
    with suppress(OSError):
        resolved.chmod(0o600)
    return resolved
