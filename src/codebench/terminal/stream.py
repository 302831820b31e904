"""Text-stream terminal surface for headless runs."""

from __future__ import annotations

import shutil
import sys
from collections.abc import Callable
from typing import TextIO

from codebench.terminal.models import FIT_ADDON, KeyEvent, TerminalOptions
from codebench.terminal.surface import KeyHandler, TerminalAddon


class _NoopAddon:
    def dispose(self) -> None:
        return None


class StreamFitAddon:
    def __init__(self) -> None:
        self.columns = 0
        self.rows = 0

    def fit(self) -> None:
        size = shutil.get_terminal_size()
        if size.columns <= 0 or size.lines <= 0:
            raise ValueError(f"Invalid terminal size: {size.columns}x{size.lines}")
        self.columns = size.columns
        self.rows = size.lines

    def dispose(self) -> None:
        self.columns = 0
        self.rows = 0


class StreamTerminalSurface:
    def __init__(self, options: TerminalOptions, stream: TextIO | None = None) -> None:
        self.options = options
        self._stream = stream or sys.stdout
        self._handlers: list[KeyHandler] = []
        self.opened = False
        self.disposed = False

    def load_addon(self, name: str) -> TerminalAddon:
        if name == FIT_ADDON:
            return StreamFitAddon()
        return _NoopAddon()

    def open(self, host: object) -> None:
        del host
        self.opened = True

    def write(self, text: str) -> None:
        if self.disposed:
            return
        if self.options.convert_eol:
            text = text.replace("\r\n", "\n").replace("\r", "\n")
        self._stream.write(text)
        self._stream.flush()

    def write_line(self, text: str) -> None:
        self.write(text + "\r\n")

    def on_key(self, handler: KeyHandler) -> Callable[[], None]:
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    def feed_key(self, event: KeyEvent) -> None:
        for handler in list(self._handlers):
            handler(event)

    def dispose(self) -> None:
        self._handlers.clear()
        self.disposed = True


class NullSizeObserver:
    """Observer for hosts that never resize."""

    def __init__(self, callback: Callable[[], None]) -> None:
        self._callback = callback
        self.observing = False

    def observe(self, host: object) -> None:
        del host
        self.observing = True

    def disconnect(self) -> None:
        self.observing = False
