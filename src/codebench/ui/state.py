"""Application state aggregate."""

from __future__ import annotations

from dataclasses import dataclass, field

from codebench.config import AppConfig
from codebench.themes import DEFAULT_THEME, ThemeName, resolve_theme
from codebench.workspace import WorkspaceStore


@dataclass
class AppState:
    workspace: WorkspaceStore = field(default_factory=WorkspaceStore)
    theme: ThemeName = DEFAULT_THEME
    show_terminal: bool = False
    show_preview: bool = False
    show_settings: bool = False
    auto_save: bool = False


def build_state_from_config(config: AppConfig) -> AppState:
    return AppState(
        theme=resolve_theme(config.theme),
        show_terminal=config.show_terminal,
        show_preview=config.show_preview,
        auto_save=config.auto_save,
    )


def apply_state_to_config(state: AppState, config: AppConfig) -> AppConfig:
    config.theme = state.theme.value
    config.show_terminal = state.show_terminal
    config.show_preview = state.show_preview
    config.auto_save = state.auto_save
    return config
