"""Capability contracts of the terminal-emulation widget and its host."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from codebench.terminal.models import KeyEvent, TerminalOptions

KeyHandler = Callable[[KeyEvent], None]


class TerminalAddon(Protocol):
    def dispose(self) -> None: ...


class FitCapability(TerminalAddon, Protocol):
    def fit(self) -> None: ...


class TerminalSurface(Protocol):
    def load_addon(self, name: str) -> TerminalAddon: ...

    def open(self, host: object) -> None: ...

    def write(self, text: str) -> None: ...

    def write_line(self, text: str) -> None: ...

    def on_key(self, handler: KeyHandler) -> Callable[[], None]: ...

    def dispose(self) -> None: ...


class SizeObserver(Protocol):
    def observe(self, host: object) -> None: ...

    def disconnect(self) -> None: ...


TerminalFactory = Callable[[TerminalOptions], TerminalSurface]
SizeObserverFactory = Callable[[Callable[[], None]], SizeObserver]
