from __future__ import annotations

from codebench.errors import CodebenchError, ErrorKind, ExitCode, user_facing_error


def test_exit_codes_are_deterministic() -> None:
    assert int(ExitCode.SUCCESS) == 0
    assert int(ExitCode.INVALID_ARGS) == 2
    assert int(ExitCode.RUNTIME_ERROR) == 4
    assert int(ExitCode.VALIDATION_ERROR) == 7
    assert int(ExitCode.UI_UNAVAILABLE) == 8


def test_error_string_contains_hint() -> None:
    err = CodebenchError("File exists", code=ExitCode.VALIDATION_ERROR, hint="Pick another name")

    assert str(err) == "File exists Hint: Pick another name"


def test_error_defaults() -> None:
    err = CodebenchError("boom")

    assert err.code == ExitCode.RUNTIME_ERROR
    assert err.kind == ErrorKind.GENERIC
    assert str(err) == "boom"


def test_user_facing_error_template() -> None:
    assert user_facing_error("Cannot read a.js", hint="Check the path") == (
        "Error: Cannot read a.js. Next step: Check the path"
    )
    assert user_facing_error("Failed") == "Error: Failed."


def test_error_kinds_have_stable_values() -> None:
    assert ErrorKind.DUPLICATE_FILE_NAME.value == "duplicate-file-name"
    assert ErrorKind.PREVIEW_RENDER_FAILURE.value == "preview-render-failure"
    assert ErrorKind.EMBEDDED_EXECUTION_ERROR.value == "embedded-execution-error"
    assert ErrorKind.RESIZE_FIT_FAILURE.value == "resize-fit-failure"
