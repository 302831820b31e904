"""Code execution domain package."""

from .dispatcher import ExecutionDispatcher, ExecutionOutcome, OutcomeStatus, TerminalWriter
from .engine import EngineResult, MiniRacerEngine, ScriptEngine, build_invocation

__all__ = [
    "build_invocation",
    "EngineResult",
    "ExecutionDispatcher",
    "ExecutionOutcome",
    "MiniRacerEngine",
    "OutcomeStatus",
    "ScriptEngine",
    "TerminalWriter",
]
