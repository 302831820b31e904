from __future__ import annotations

import logging

import pytest
from fakes import ObserverFactorySpy, RecordingPreviewSurface, StaticEngine, TerminalFactorySpy

from codebench.errors import CodebenchError, ErrorKind
from codebench.execution import EngineResult, OutcomeStatus
from codebench.scheduling import ManualScheduler
from codebench.terminal import PROMPT, SessionState
from codebench.themes import ThemeName
from codebench.ui.state import AppState
from codebench.ui.workbench import Workbench, WorkbenchServices


class _Rig:
    def __init__(self, state: AppState | None = None, *, engine: StaticEngine | None = None) -> None:
        self.scheduler = ManualScheduler()
        self.terminals = TerminalFactorySpy()
        self.observers = ObserverFactorySpy()
        self.surface = RecordingPreviewSurface()
        self.engine = engine or StaticEngine(EngineResult(ok=True, text="4"))
        self.workbench = Workbench(
            state or AppState(),
            WorkbenchServices(
                scheduler=self.scheduler,
                terminal_factory=self.terminals,
                observer_factory=self.observers,
                engine=self.engine,
                preview_surface=self.surface,
            ),
        )


def test_create_file_activates_and_classifies() -> None:
    rig = _Rig()

    file = rig.workbench.create_file("index.html")

    assert rig.workbench.active_file is file
    assert file.language.value == "html"


def test_duplicate_create_is_rejected_without_touching_content() -> None:
    rig = _Rig()
    rig.workbench.create_file("a.js")
    rig.workbench.edit("return 1")

    with pytest.raises(CodebenchError) as exc:
        rig.workbench.create_file("a.js")

    assert exc.value.kind == ErrorKind.DUPLICATE_FILE_NAME
    assert rig.workbench.workspace.get("a.js").content == "return 1"


def test_preview_follows_edits_when_visible() -> None:
    rig = _Rig()
    rig.workbench.create_file("index.html")
    rig.workbench.set_preview_visible(True)

    for index in range(5):
        rig.workbench.edit(f"<p>{index}</p>")
        rig.scheduler.advance(0.1)
    rig.scheduler.advance(0.3)

    assert rig.surface.documents == ["<p>4</p>"]


def test_hiding_preview_cancels_pending_render() -> None:
    rig = _Rig()
    rig.workbench.create_file("index.html")
    rig.workbench.set_preview_visible(True)
    rig.workbench.edit("<p>a</p>")

    rig.workbench.toggle_preview()
    rig.scheduler.advance(1.0)

    assert rig.surface.documents == []
    assert rig.scheduler.pending == 0


def test_preview_toggle_round_trip_renders_current_html() -> None:
    rig = _Rig()
    rig.workbench.create_file("index.html")
    rig.workbench.edit("<p>hi</p>")

    rig.workbench.toggle_preview()
    rig.workbench.toggle_preview()
    rig.workbench.toggle_preview()
    rig.scheduler.advance(0.3)

    assert rig.surface.documents == ["<p>hi</p>"]


def test_switching_active_file_previews_new_file() -> None:
    rig = _Rig()
    rig.workbench.create_file("a.html")
    rig.workbench.edit("<p>a</p>")
    rig.workbench.create_file("b.html")
    rig.workbench.edit("<p>b</p>")
    rig.workbench.set_preview_visible(True)
    rig.scheduler.advance(0.3)

    rig.workbench.select_file("a.html")
    rig.scheduler.advance(0.3)

    assert rig.surface.documents == ["<p>b</p>", "<p>a</p>"]


def test_terminal_opens_only_with_flag_and_host() -> None:
    rig = _Rig()

    rig.workbench.set_terminal_visible(True)
    assert rig.workbench.terminal.state == SessionState.ABSENT

    rig.workbench.attach_terminal_host("panel")
    assert rig.workbench.terminal.state == SessionState.ACTIVE

    rig.workbench.toggle_terminal()
    assert rig.workbench.terminal.state == SessionState.ABSENT
    assert rig.terminals.last.disposed
    assert rig.observers.live == 0


def test_unmounting_host_releases_session() -> None:
    rig = _Rig(AppState(show_terminal=True))
    rig.workbench.attach_terminal_host("panel")

    rig.workbench.attach_terminal_host(None)

    assert rig.workbench.terminal.state == SessionState.ABSENT
    assert rig.scheduler.pending == 0


def test_run_active_writes_result_to_terminal() -> None:
    rig = _Rig(AppState(show_terminal=True))
    rig.workbench.attach_terminal_host("panel")
    rig.workbench.create_file("main.js")
    rig.workbench.edit("return 2+2")

    outcome = rig.workbench.run_active()

    assert outcome is not None and outcome.status == OutcomeStatus.RESULT
    assert rig.terminals.last.text.endswith("\r\nExecuting main.js...\r\nResult: 4\r\n" + PROMPT)
    assert rig.engine.sources == ["return 2+2"]


def test_run_active_opens_hidden_terminal_when_host_exists() -> None:
    rig = _Rig()
    rig.workbench.attach_terminal_host("panel")
    rig.workbench.create_file("main.py")
    rig.workbench.edit("print(1)")

    outcome = rig.workbench.run_active()

    assert rig.workbench.state.show_terminal is True
    assert outcome is not None and outcome.status == OutcomeStatus.ECHO


def test_run_active_without_host_is_skipped(caplog) -> None:
    rig = _Rig()
    rig.workbench.create_file("main.js")

    with caplog.at_level(logging.WARNING, logger="codebench"):
        outcome = rig.workbench.run_active()

    assert outcome is None
    assert rig.engine.sources == []
    assert "run skipped" in caplog.text


def test_run_active_without_file_does_nothing() -> None:
    rig = _Rig()
    rig.workbench.attach_terminal_host("panel")

    assert rig.workbench.run_active() is None
    assert rig.terminals.created == []


def test_theme_change_applies_to_next_terminal_session() -> None:
    rig = _Rig(AppState(show_terminal=True))
    rig.workbench.attach_terminal_host("panel")

    assert rig.workbench.toggle_theme() == ThemeName.LIGHT
    assert rig.terminals.last.options.background == "#1a1a1a"
    assert rig.workbench.theme_profile.editor_theme == "customLight"

    rig.workbench.toggle_terminal()
    rig.workbench.toggle_terminal()
    assert rig.terminals.last.options.background == "#ffffff"


def test_settings_and_auto_save_flags() -> None:
    rig = _Rig()

    assert rig.workbench.toggle_settings() is True
    rig.workbench.set_auto_save(True)

    assert rig.workbench.state.show_settings is True
    assert rig.workbench.state.auto_save is True


def test_shutdown_cancels_everything() -> None:
    rig = _Rig(AppState(show_terminal=True, show_preview=True))
    rig.workbench.attach_terminal_host("panel")
    rig.workbench.create_file("index.html")
    rig.workbench.edit("<p>late</p>")

    rig.workbench.shutdown()
    rig.scheduler.advance(1.0)
    rig.scheduler.run_frame()

    assert rig.surface.documents == []
    assert rig.workbench.terminal.state == SessionState.ABSENT
    assert rig.observers.live == 0
