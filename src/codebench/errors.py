"""Deterministic error model and exit code contract."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum


class ExitCode(IntEnum):
    SUCCESS = 0
    INVALID_ARGS = 2
    CONFIG_ERROR = 3
    RUNTIME_ERROR = 4
    VALIDATION_ERROR = 7
    UI_UNAVAILABLE = 8


class ErrorKind(str, Enum):
    GENERIC = "generic"
    DUPLICATE_FILE_NAME = "duplicate-file-name"
    INVALID_FILE_NAME = "invalid-file-name"
    PREVIEW_RENDER_FAILURE = "preview-render-failure"
    EMBEDDED_EXECUTION_ERROR = "embedded-execution-error"
    RESIZE_FIT_FAILURE = "resize-fit-failure"
    TERMINAL_UNAVAILABLE = "terminal-unavailable"


@dataclass
class CodebenchError(Exception):
    message: str
    code: ExitCode = ExitCode.RUNTIME_ERROR
    hint: str = ""
    kind: ErrorKind = ErrorKind.GENERIC

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message} Hint: {self.hint}"
        return self.message


def user_facing_error(message: str, *, hint: str = "") -> str:
    if hint:
        return f"Error: {message}. Next step: {hint}"
    return f"Error: {message}."
