from __future__ import annotations

import time

import pytest
from fakes import ObserverFactorySpy, RecordingPreviewSurface, TerminalFactorySpy

from codebench.languages import Language
from codebench.preview import PreviewPipeline
from codebench.scheduling import ManualScheduler
from codebench.terminal import TerminalSessionManager
from codebench.workspace import File


@pytest.mark.performance
def test_keystroke_burst_debounce_stays_within_budget() -> None:
    scheduler = ManualScheduler()
    surface = RecordingPreviewSurface()
    pipeline = PreviewPipeline(scheduler, surface)
    file = File("index.html", "", Language.HTML)
    pipeline.set_enabled(True)
    pipeline.set_file(file)

    started = time.perf_counter()
    for index in range(5000):
        file.content = f"<p>{index}</p>"
        pipeline.notify_content_changed(file)
        scheduler.advance(0.01)
    scheduler.advance(0.3)
    elapsed = time.perf_counter() - started

    assert surface.documents == ["<p>4999</p>"]
    assert elapsed < 2.0, f"debounce burst exceeded budget: {elapsed:.3f}s"


@pytest.mark.performance
def test_resize_storm_stays_within_budget() -> None:
    scheduler = ManualScheduler()
    factory = TerminalFactorySpy()
    observers = ObserverFactorySpy()
    manager = TerminalSessionManager(terminal_factory=factory, observer_factory=observers, scheduler=scheduler)
    manager.acquire("host")

    started = time.perf_counter()
    for _ in range(200):
        for _ in range(50):
            observers.created[0].trigger()
        scheduler.run_frame()
    elapsed = time.perf_counter() - started

    assert factory.last.fit_addon.fit_calls == 200
    assert elapsed < 2.0, f"resize storm exceeded budget: {elapsed:.3f}s"
