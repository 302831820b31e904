"""Single-instance terminal session lifecycle."""

from __future__ import annotations

import logging as py_logging
from collections.abc import Callable
from contextlib import suppress
from dataclasses import dataclass, field

from codebench.errors import CodebenchError, ErrorKind, ExitCode
from codebench.scheduling import Scheduler, TaskSlot
from codebench.terminal.models import (
    BANNER_LINES,
    FIT_ADDON,
    PROMPT,
    WEB_LINKS_ADDON,
    KeyEvent,
    SessionState,
    TerminalEvent,
    TerminalOptions,
)
from codebench.terminal.surface import (
    FitCapability,
    SizeObserver,
    SizeObserverFactory,
    TerminalAddon,
    TerminalFactory,
    TerminalSurface,
)
from codebench.themes import DEFAULT_THEME, ThemeName, resolve_theme

logger = py_logging.getLogger(__name__)


@dataclass
class TerminalSession:
    surface: TerminalSurface
    options: TerminalOptions
    host: object
    fit_addon: FitCapability | None = None
    addons: list[TerminalAddon] = field(default_factory=list)
    observer: SizeObserver | None = None
    key_unsubscribe: Callable[[], None] | None = None

    def write(self, text: str) -> None:
        self.surface.write(text)

    def write_line(self, text: str) -> None:
        self.surface.write_line(text)


class TerminalSessionManager:
    """Owns at most one live terminal instance.

    ``acquire`` moves ABSENT -> ACTIVE, ``release`` moves back. Nothing created
    by ``acquire`` (instance, size observer, scheduled fit) outlives ``release``.
    The theme is read at construction only; a live session keeps its colors.
    """

    def __init__(
        self,
        *,
        terminal_factory: TerminalFactory,
        observer_factory: SizeObserverFactory,
        scheduler: Scheduler,
        theme: ThemeName | str = DEFAULT_THEME,
    ) -> None:
        self._terminal_factory = terminal_factory
        self._observer_factory = observer_factory
        self._fit_slot = TaskSlot(scheduler, name="terminal-fit")
        self._session: TerminalSession | None = None
        self._events: list[TerminalEvent] = []
        self.theme = resolve_theme(theme)

    @property
    def state(self) -> SessionState:
        return SessionState.ACTIVE if self._session is not None else SessionState.ABSENT

    @property
    def session(self) -> TerminalSession | None:
        return self._session

    @property
    def pending_fit(self) -> bool:
        return self._fit_slot.pending

    @property
    def live_observers(self) -> int:
        if self._session is None or self._session.observer is None:
            return 0
        return 1

    def list_events(self) -> list[TerminalEvent]:
        return list(self._events)

    def acquire(self, host: object) -> TerminalSession:
        if self._session is not None:
            return self._session
        if host is None:
            raise CodebenchError(
                "Terminal host surface is not available.",
                code=ExitCode.RUNTIME_ERROR,
                hint="Show the terminal panel before opening a session.",
                kind=ErrorKind.TERMINAL_UNAVAILABLE,
            )

        options = TerminalOptions.for_theme(self.theme)
        surface: TerminalSurface | None = None
        try:
            surface = self._terminal_factory(options)
            session = TerminalSession(surface=surface, options=options, host=host)
            fit_addon = surface.load_addon(FIT_ADDON)
            session.fit_addon = fit_addon  # type: ignore[assignment]
            session.addons.append(fit_addon)
            session.addons.append(surface.load_addon(WEB_LINKS_ADDON))
            surface.open(host)
        except Exception as exc:
            if surface is not None:
                with suppress(Exception):
                    surface.dispose()
            raise CodebenchError(
                "Failed to open terminal session.",
                code=ExitCode.RUNTIME_ERROR,
                hint=str(exc) or "Check the terminal widget installation.",
                kind=ErrorKind.TERMINAL_UNAVAILABLE,
            ) from exc

        self._session = session
        observer = self._observer_factory(self.handle_resize)
        observer.observe(host)
        session.observer = observer
        self.handle_resize()

        for line in BANNER_LINES:
            surface.write_line(line)
        surface.write(PROMPT)
        session.key_unsubscribe = surface.on_key(self.handle_key)

        self._record("acquire", f"Terminal opened (theme={self.theme.value}).")
        return session

    def release(self) -> None:
        session = self._session
        self._fit_slot.cancel()
        if session is None:
            return
        self._session = None
        if session.observer is not None:
            with suppress(Exception):
                session.observer.disconnect()
            session.observer = None
        if session.key_unsubscribe is not None:
            with suppress(Exception):
                session.key_unsubscribe()
            session.key_unsubscribe = None
        try:
            session.surface.dispose()
        except Exception as exc:
            logger.warning("workbench-event step=release message=Terminal dispose failed: %s", exc)
        session.fit_addon = None
        session.addons.clear()
        self._record("release", "Terminal closed.")

    def handle_resize(self) -> None:
        if self._session is None:
            return
        self._fit_slot.schedule_next_frame(self._fit)

    def handle_key(self, event: KeyEvent) -> None:
        session = self._session
        if session is None:
            return
        if event.is_enter:
            session.surface.write(PROMPT)
        elif event.printable:
            session.surface.write(event.key)

    def write(self, text: str) -> None:
        self._require_session().surface.write(text)

    def write_line(self, text: str) -> None:
        self._require_session().surface.write_line(text)

    def _fit(self) -> None:
        session = self._session
        if session is None or session.fit_addon is None:
            return
        try:
            session.fit_addon.fit()
        except Exception as exc:
            logger.warning(
                "workbench-event step=%s message=Terminal resize failed: %s",
                ErrorKind.RESIZE_FIT_FAILURE.value,
                exc,
            )

    def _require_session(self) -> TerminalSession:
        if self._session is None:
            raise CodebenchError(
                "No terminal session is open.",
                code=ExitCode.RUNTIME_ERROR,
                hint="Open the terminal panel first.",
                kind=ErrorKind.TERMINAL_UNAVAILABLE,
            )
        return self._session

    def _record(self, step: str, message: str) -> None:
        self._events.append(TerminalEvent(step=step, message=message))
        logger.info("workbench-event terminal step=%s message=%s", step, message)
