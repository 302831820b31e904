"""Instrumented doubles for the terminal and preview surfaces."""

from __future__ import annotations

from collections.abc import Callable

from codebench.execution import EngineResult
from codebench.terminal import KeyEvent, TerminalOptions
from codebench.terminal.models import FIT_ADDON


class RecordingFitAddon:
    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.fit_calls = 0
        self.disposed = False

    def fit(self) -> None:
        self.fit_calls += 1
        if self.fail:
            raise ValueError("host has zero size")

    def dispose(self) -> None:
        self.disposed = True


class RecordingAddon:
    def __init__(self, name: str) -> None:
        self.name = name
        self.disposed = False

    def dispose(self) -> None:
        self.disposed = True


class RecordingTerminal:
    def __init__(self, options: TerminalOptions, *, fail_fit: bool = False, fail_open: bool = False) -> None:
        self.options = options
        self.fail_open = fail_open
        self.output: list[str] = []
        self.addons: dict[str, object] = {}
        self.fit_addon = RecordingFitAddon(fail=fail_fit)
        self.handlers: list[Callable[[KeyEvent], None]] = []
        self.host: object | None = None
        self.disposed = False

    @property
    def text(self) -> str:
        return "".join(self.output)

    def load_addon(self, name: str) -> object:
        addon: object = self.fit_addon if name == FIT_ADDON else RecordingAddon(name)
        self.addons[name] = addon
        return addon

    def open(self, host: object) -> None:
        if self.fail_open:
            raise RuntimeError("host detached")
        self.host = host

    def write(self, text: str) -> None:
        self.output.append(text)

    def write_line(self, text: str) -> None:
        self.output.append(text + "\r\n")

    def on_key(self, handler: Callable[[KeyEvent], None]) -> Callable[[], None]:
        self.handlers.append(handler)

        def unsubscribe() -> None:
            self.handlers.remove(handler)

        return unsubscribe

    def press(self, event: KeyEvent) -> None:
        for handler in list(self.handlers):
            handler(event)

    def dispose(self) -> None:
        self.disposed = True


class TerminalFactorySpy:
    def __init__(self, **terminal_kwargs: bool) -> None:
        self.terminal_kwargs = terminal_kwargs
        self.created: list[RecordingTerminal] = []

    def __call__(self, options: TerminalOptions) -> RecordingTerminal:
        terminal = RecordingTerminal(options, **self.terminal_kwargs)
        self.created.append(terminal)
        return terminal

    @property
    def last(self) -> RecordingTerminal:
        return self.created[-1]


class RecordingObserver:
    def __init__(self, callback: Callable[[], None]) -> None:
        self.callback = callback
        self.host: object | None = None
        self.connected = False

    def observe(self, host: object) -> None:
        self.host = host
        self.connected = True

    def disconnect(self) -> None:
        self.connected = False

    def trigger(self) -> None:
        self.callback()


class ObserverFactorySpy:
    def __init__(self) -> None:
        self.created: list[RecordingObserver] = []

    def __call__(self, callback: Callable[[], None]) -> RecordingObserver:
        observer = RecordingObserver(callback)
        self.created.append(observer)
        return observer

    @property
    def live(self) -> int:
        return sum(1 for observer in self.created if observer.connected)


class RecordingPreviewSurface:
    def __init__(self, *, attached: bool = True, fail: bool = False) -> None:
        self.attached = attached
        self.fail = fail
        self.documents: list[str] = []

    def is_attached(self) -> bool:
        return self.attached

    def write_document(self, html: str) -> None:
        if self.fail:
            raise RuntimeError("frame document unavailable")
        self.documents.append(html)


class StaticEngine:
    def __init__(self, result: EngineResult | None = None, *, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.sources: list[str] = []

    def run_function_body(self, source: str) -> EngineResult:
        self.sources.append(source)
        if self.error is not None:
            raise self.error
        assert self.result is not None
        return self.result
