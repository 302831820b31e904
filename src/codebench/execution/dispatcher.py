"""Per-language dispatch of the "run" command into the terminal."""

from __future__ import annotations

import logging as py_logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from codebench.errors import ErrorKind
from codebench.execution.engine import MiniRacerEngine, ScriptEngine
from codebench.languages import Language, is_script
from codebench.terminal.models import PROMPT
from codebench.workspace import File

logger = py_logging.getLogger(__name__)


class TerminalWriter(Protocol):
    def write(self, text: str) -> None: ...

    def write_line(self, text: str) -> None: ...


class OutcomeStatus(str, Enum):
    RESULT = "result"
    ERROR = "error"
    ECHO = "echo"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class ExecutionOutcome:
    status: OutcomeStatus
    text: str = ""


class ExecutionDispatcher:
    """Runs the active file and reports into a terminal.

    Python files are echoed, not interpreted; no interpreter is bundled.
    JavaScript and TypeScript run synchronously as a function body in the
    embedded engine; a returned promise is reported as-is, never awaited.
    Other languages produce only the "Executing" line.
    """

    def __init__(self, engine: ScriptEngine | None = None) -> None:
        self.engine = engine or MiniRacerEngine()

    def run(self, file: File, terminal: TerminalWriter) -> ExecutionOutcome:
        terminal.write_line(f"\r\nExecuting {file.name}...")
        outcome = self._dispatch(file)
        if outcome.status == OutcomeStatus.ECHO:
            terminal.write_line("Python code:")
            terminal.write_line(outcome.text)
        elif outcome.status == OutcomeStatus.RESULT:
            terminal.write_line(f"Result: {outcome.text}")
        elif outcome.status == OutcomeStatus.ERROR:
            terminal.write_line(f"Error: {outcome.text}")
        terminal.write(PROMPT)
        logger.info(
            "workbench-event step=run file=%s language=%s status=%s",
            file.name,
            file.language.value,
            outcome.status.value,
        )
        return outcome

    def _dispatch(self, file: File) -> ExecutionOutcome:
        if file.language == Language.PYTHON:
            return ExecutionOutcome(OutcomeStatus.ECHO, file.content)
        if not is_script(file.language):
            return ExecutionOutcome(OutcomeStatus.SKIPPED)
        try:
            result = self.engine.run_function_body(file.content)
        except Exception as exc:
            logger.warning(
                "workbench-event step=%s file=%s message=%s",
                ErrorKind.EMBEDDED_EXECUTION_ERROR.value,
                file.name,
                exc,
            )
            return ExecutionOutcome(OutcomeStatus.ERROR, str(exc) or type(exc).__name__)
        if result.ok:
            return ExecutionOutcome(OutcomeStatus.RESULT, result.text)
        return ExecutionOutcome(OutcomeStatus.ERROR, result.text)
