"""Toolkit-independent workbench controller.

The controller owns the subsystems and routes user intents to them. Each
subsystem reads only its slice of ``AppState``: the preview pipeline follows
the active file and the preview flag, the terminal manager follows the
terminal flag and the host surface, and the dispatcher reads the active file
on demand.
"""

from __future__ import annotations

import logging as py_logging
from dataclasses import dataclass

from codebench.config import AppConfig
from codebench.execution import ExecutionDispatcher, ExecutionOutcome, MiniRacerEngine, ScriptEngine
from codebench.preview import PreviewPipeline, PreviewSurface
from codebench.scheduling import Scheduler
from codebench.terminal import SessionState, TerminalSessionManager
from codebench.terminal.surface import SizeObserverFactory, TerminalFactory
from codebench.themes import ThemeName, ThemeProfile, resolve_theme, theme_profile, toggle_theme
from codebench.ui.state import AppState
from codebench.workspace import File, WorkspaceEvent, WorkspaceEventKind, WorkspaceStore

logger = py_logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkbenchServices:
    scheduler: Scheduler
    terminal_factory: TerminalFactory
    observer_factory: SizeObserverFactory
    engine: ScriptEngine | None = None
    preview_surface: PreviewSurface | None = None


def engine_from_config(config: AppConfig) -> MiniRacerEngine:
    return MiniRacerEngine(
        timeout_ms=config.execution_timeout_ms,
        max_memory_bytes=config.execution_max_memory_bytes,
    )


class Workbench:
    def __init__(
        self,
        state: AppState,
        services: WorkbenchServices,
        *,
        preview_debounce_seconds: float = 0.3,
    ) -> None:
        self.state = state
        self.terminal = TerminalSessionManager(
            terminal_factory=services.terminal_factory,
            observer_factory=services.observer_factory,
            scheduler=services.scheduler,
            theme=state.theme,
        )
        self.preview = PreviewPipeline(
            services.scheduler,
            services.preview_surface,
            debounce_seconds=preview_debounce_seconds,
        )
        self.dispatcher = ExecutionDispatcher(services.engine)
        self._terminal_host: object | None = None
        self._unsubscribe = state.workspace.subscribe(self._on_workspace_event)
        self.preview.set_file(state.workspace.active_file)
        self._sync_preview_enabled()

    @property
    def workspace(self) -> WorkspaceStore:
        return self.state.workspace

    @property
    def active_file(self) -> File | None:
        return self.state.workspace.active_file

    @property
    def theme_profile(self) -> ThemeProfile:
        return theme_profile(self.state.theme)

    def create_file(self, name: str) -> File:
        return self.state.workspace.create_file(name)

    def select_file(self, name: str) -> None:
        self.state.workspace.set_active(name)

    def edit(self, content: str) -> None:
        self.state.workspace.update_active_content(content)

    def set_theme(self, theme: ThemeName | str) -> ThemeName:
        resolved = resolve_theme(theme)
        self.state.theme = resolved
        # Applies to the next terminal session only.
        self.terminal.theme = resolved
        logger.info("workbench-event step=theme message=Theme set to %s.", resolved.value)
        return resolved

    def toggle_theme(self) -> ThemeName:
        return self.set_theme(toggle_theme(self.state.theme))

    def toggle_settings(self) -> bool:
        self.state.show_settings = not self.state.show_settings
        return self.state.show_settings

    def set_auto_save(self, enabled: bool) -> None:
        self.state.auto_save = enabled

    def set_preview_visible(self, visible: bool) -> None:
        self.state.show_preview = visible
        self._sync_preview_enabled()

    def toggle_preview(self) -> bool:
        self.set_preview_visible(not self.state.show_preview)
        return self.state.show_preview

    def attach_preview_surface(self, surface: PreviewSurface) -> None:
        self.preview.attach_surface(surface)
        self._sync_preview_enabled()
        self.preview.set_file(self.active_file)

    def detach_preview_surface(self) -> None:
        self.preview.detach_surface()

    def set_terminal_visible(self, visible: bool) -> None:
        self.state.show_terminal = visible
        self._sync_terminal()

    def toggle_terminal(self) -> bool:
        self.set_terminal_visible(not self.state.show_terminal)
        return self.state.show_terminal

    def attach_terminal_host(self, host: object | None) -> None:
        """Bind (or with ``None``, unmount) the surface hosting the terminal."""
        self._terminal_host = host
        self._sync_terminal()

    def run_active(self) -> ExecutionOutcome | None:
        file = self.active_file
        if file is None:
            return None
        if self.terminal.state == SessionState.ABSENT and self._terminal_host is not None:
            self.set_terminal_visible(True)
        session = self.terminal.session
        if session is None:
            logger.warning(
                "workbench-event step=run file=%s message=No terminal session; run skipped.",
                file.name,
            )
            return None
        return self.dispatcher.run(file, session)

    def shutdown(self) -> None:
        self._unsubscribe()
        self.preview.cancel()
        self.preview.detach_surface()
        self.terminal.release()
        self._terminal_host = None

    def _sync_terminal(self) -> None:
        if self.state.show_terminal and self._terminal_host is not None:
            self.terminal.acquire(self._terminal_host)
        else:
            self.terminal.release()

    def _sync_preview_enabled(self) -> None:
        self.preview.set_enabled(self.state.show_preview and self.active_file is not None)

    def _on_workspace_event(self, event: WorkspaceEvent) -> None:
        if event.kind == WorkspaceEventKind.CONTENT_CHANGED and event.file is not None:
            self.preview.notify_content_changed(event.file)
        elif event.kind == WorkspaceEventKind.ACTIVE_CHANGED:
            self.preview.set_file(event.file)
            self._sync_preview_enabled()
