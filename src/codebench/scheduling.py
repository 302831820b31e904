"""Cancellable deferred-execution helpers.

Two deferral kinds exist and are kept apart: wall-clock delays (preview
debounce) and next-frame callbacks (terminal fit). Both return a
``CancelHandle``. ``TaskSlot`` holds at most one pending task and always
cancels the previous handle before scheduling the next one.
"""

from __future__ import annotations

import heapq
import itertools
import logging as py_logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

logger = py_logging.getLogger(__name__)

Callback = Callable[[], None]


class CancelHandle(Protocol):
    def cancel(self) -> None: ...

    @property
    def active(self) -> bool: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callback) -> CancelHandle: ...

    def call_next_frame(self, callback: Callback) -> CancelHandle: ...


@dataclass
class ManualHandle:
    callback: Callback
    due: float
    cancelled: bool = False
    fired: bool = False

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def active(self) -> bool:
        return not self.cancelled and not self.fired


@dataclass(order=True)
class _TimerEntry:
    due: float
    sequence: int
    handle: ManualHandle = field(compare=False)


class ManualScheduler:
    """Deterministic scheduler driven by a virtual clock.

    Timers fire from ``advance``; frame callbacks fire from ``run_frame``.
    Used for headless workbenches and lifecycle instrumentation.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self._timers: list[_TimerEntry] = []
        self._frames: list[ManualHandle] = []
        self._sequence = itertools.count()

    def call_later(self, delay: float, callback: Callback) -> ManualHandle:
        handle = ManualHandle(callback=callback, due=self.now + max(0.0, delay))
        heapq.heappush(self._timers, _TimerEntry(handle.due, next(self._sequence), handle))
        return handle

    def call_next_frame(self, callback: Callback) -> ManualHandle:
        handle = ManualHandle(callback=callback, due=self.now)
        self._frames.append(handle)
        return handle

    @property
    def pending_timers(self) -> int:
        return sum(1 for entry in self._timers if entry.handle.active)

    @property
    def pending_frames(self) -> int:
        return sum(1 for handle in self._frames if handle.active)

    @property
    def pending(self) -> int:
        return self.pending_timers + self.pending_frames

    def advance(self, seconds: float) -> int:
        """Move the clock forward, firing due timers in order. Returns fired count."""
        target = self.now + max(0.0, seconds)
        fired = 0
        while self._timers and self._timers[0].due <= target:
            entry = heapq.heappop(self._timers)
            self.now = entry.due
            if not entry.handle.active:
                continue
            entry.handle.fired = True
            entry.handle.callback()
            fired += 1
        self.now = target
        return fired

    def run_frame(self) -> int:
        """Fire every frame callback scheduled before this call."""
        frames, self._frames = self._frames, []
        fired = 0
        for handle in frames:
            if not handle.active:
                continue
            handle.fired = True
            handle.callback()
            fired += 1
        return fired


class TaskSlot:
    """A single logical deferred operation; rescheduling supersedes the old one."""

    def __init__(self, scheduler: Scheduler, *, name: str = "task") -> None:
        self._scheduler = scheduler
        self._name = name
        self._handle: CancelHandle | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None and self._handle.active

    def schedule_after(self, delay: float, callback: Callback) -> CancelHandle:
        self.cancel()
        self._handle = self._scheduler.call_later(delay, self._wrap(callback))
        return self._handle

    def schedule_next_frame(self, callback: Callback) -> CancelHandle:
        self.cancel()
        self._handle = self._scheduler.call_next_frame(self._wrap(callback))
        return self._handle

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _wrap(self, callback: Callback) -> Callback:
        def run() -> None:
            self._handle = None
            callback()

        return run
