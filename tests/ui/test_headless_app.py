from __future__ import annotations

import io
from pathlib import Path

import pytest

from codebench.config import AppConfig
from codebench.errors import CodebenchError, ExitCode
from codebench.execution import OutcomeStatus
from codebench.terminal import SessionState
from codebench.ui.app import build_headless_workbench, run_file_headless


def test_run_file_headless_prints_terminal_transcript(tmp_path: Path) -> None:
    pytest.importorskip("py_mini_racer")
    source = tmp_path / "main.js"
    source.write_text("return 2+2", encoding="utf-8")
    stream = io.StringIO()

    outcome = run_file_headless(source, config=AppConfig(), stream=stream)

    assert outcome is not None and outcome.status == OutcomeStatus.RESULT
    assert stream.getvalue() == (
        "Web Terminal v1.0.0\n"
        'Type "help" for available commands\n'
        "\n$ "
        "\nExecuting main.js...\n"
        "Result: 4\n"
        "\n$ "
    )


def test_run_file_headless_echoes_python(tmp_path: Path) -> None:
    source = tmp_path / "hello.py"
    source.write_text("print('hi')", encoding="utf-8")
    stream = io.StringIO()

    outcome = run_file_headless(source, config=AppConfig(), stream=stream)

    assert outcome is not None and outcome.status == OutcomeStatus.ECHO
    assert "Python code:\nprint('hi')\n" in stream.getvalue()


def test_run_file_headless_rejects_unreadable_path(tmp_path: Path) -> None:
    with pytest.raises(CodebenchError) as exc:
        run_file_headless(tmp_path / "missing.js", config=AppConfig(), stream=io.StringIO())

    assert exc.value.code == ExitCode.INVALID_ARGS


def test_headless_workbench_uses_config_debounce() -> None:
    workbench, scheduler = build_headless_workbench(AppConfig(preview_debounce_ms=500), stream=io.StringIO())

    assert workbench.preview.debounce_seconds == pytest.approx(0.5)
    workbench.attach_terminal_host("headless")
    workbench.set_terminal_visible(True)
    assert workbench.terminal.state == SessionState.ACTIVE

    workbench.shutdown()

    assert workbench.terminal.state == SessionState.ABSENT
    assert scheduler.pending == 0
