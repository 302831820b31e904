"""GUI shell launch and headless workbench assembly."""

from __future__ import annotations

import logging as py_logging
from collections.abc import Sequence
from pathlib import Path
from typing import TextIO

from codebench.config import AppConfig, load_config, save_config
from codebench.errors import CodebenchError, ExitCode
from codebench.execution import ExecutionOutcome
from codebench.scheduling import ManualScheduler
from codebench.terminal import TerminalOptions
from codebench.terminal.stream import NullSizeObserver, StreamTerminalSurface
from codebench.themes import ThemeName, resolve_theme
from codebench.ui.state import AppState, apply_state_to_config, build_state_from_config
from codebench.ui.workbench import Workbench, WorkbenchServices, engine_from_config

logger = py_logging.getLogger(__name__)

HEADLESS_HOST = "headless"


def apply_overrides(
    state: AppState,
    *,
    theme: ThemeName | str | None = None,
    show_terminal: bool | None = None,
    show_preview: bool | None = None,
    seed_files: Sequence[str] = (),
) -> AppState:
    if theme is not None:
        state.theme = resolve_theme(theme)
    if show_terminal is not None:
        state.show_terminal = show_terminal
    if show_preview is not None:
        state.show_preview = show_preview
    for name in seed_files:
        if name.strip() in state.workspace:
            logger.warning("Skipping duplicate seed file: %s", name)
            continue
        state.workspace.create_file(name)
    return state


def build_headless_workbench(
    config: AppConfig,
    state: AppState | None = None,
    *,
    stream: TextIO | None = None,
) -> tuple[Workbench, ManualScheduler]:
    """Assemble a workbench whose terminal writes to ``stream`` and whose clock is manual."""
    scheduler = ManualScheduler()

    def terminal_factory(options: TerminalOptions) -> StreamTerminalSurface:
        return StreamTerminalSurface(options, stream)

    services = WorkbenchServices(
        scheduler=scheduler,
        terminal_factory=terminal_factory,
        observer_factory=NullSizeObserver,
        engine=engine_from_config(config),
    )
    workbench = Workbench(
        state or build_state_from_config(config),
        services,
        preview_debounce_seconds=config.preview_debounce_seconds,
    )
    return workbench, scheduler


def run_file_headless(
    path: str | Path,
    *,
    config: AppConfig,
    stream: TextIO | None = None,
) -> ExecutionOutcome | None:
    source = Path(path).expanduser()
    try:
        content = source.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise CodebenchError(
            f"Cannot read {source}.",
            code=ExitCode.INVALID_ARGS,
            hint=str(exc) or "Check the file path.",
        ) from exc

    workbench, scheduler = build_headless_workbench(config, stream=stream)
    try:
        workbench.create_file(source.name)
        workbench.edit(content)
        workbench.attach_terminal_host(HEADLESS_HOST)
        outcome = workbench.run_active()
        scheduler.run_frame()
    finally:
        workbench.shutdown()
    return outcome


def launch_app(
    *,
    config_path: str | Path | None = None,
    theme: ThemeName | str | None = None,
    show_terminal: bool | None = None,
    show_preview: bool | None = None,
    seed_files: Sequence[str] = (),
) -> int:
    """Launch the workbench window from persisted config."""
    config = load_config(config_path)
    state = apply_overrides(
        build_state_from_config(config),
        theme=theme,
        show_terminal=show_terminal,
        show_preview=show_preview,
        seed_files=seed_files,
    )
    from codebench.ui.window import launch_main_window

    return launch_main_window(config=config, state=state, config_path=config_path)


def persist_preferences(state: AppState, config: AppConfig, config_path: str | Path | None) -> Path:
    return save_config(apply_state_to_config(state, config), config_path)
