"""Embedded JavaScript engine boundary.

Snippets run inside a fresh V8 isolate (mini-racer) with a wall-clock
timeout and a heap ceiling. The snippet is compiled with ``new Function``
inside the isolate, so it sees no bindings from the host or from earlier runs.
"""

from __future__ import annotations

import json
import logging as py_logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

logger = py_logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 2000
DEFAULT_MAX_MEMORY_BYTES = 64 * 1024 * 1024

_WRAPPER = """(function () {
  try {
    var value = new Function(%s)();
    return JSON.stringify({ ok: true, text: String(value) });
  } catch (error) {
    return JSON.stringify({ ok: false, text: String(error) });
  }
})()"""


@dataclass(frozen=True)
class EngineResult:
    ok: bool
    text: str


class ScriptEngine(Protocol):
    def run_function_body(self, source: str) -> EngineResult: ...


def _default_context_factory() -> Any:
    from py_mini_racer import MiniRacer

    return MiniRacer()


def build_invocation(source: str) -> str:
    return _WRAPPER % json.dumps(source)


class MiniRacerEngine:
    def __init__(
        self,
        *,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        max_memory_bytes: int = DEFAULT_MAX_MEMORY_BYTES,
        context_factory: Callable[[], Any] | None = None,
    ) -> None:
        self.timeout_ms = timeout_ms
        self.max_memory_bytes = max_memory_bytes
        self._context_factory = context_factory or _default_context_factory

    def run_function_body(self, source: str) -> EngineResult:
        context = self._context_factory()
        raw = context.eval(
            build_invocation(source),
            timeout=self.timeout_ms,
            max_memory=self.max_memory_bytes,
        )
        return _decode(raw)


def _decode(raw: object) -> EngineResult:
    if not isinstance(raw, str):
        return EngineResult(ok=False, text=f"unexpected engine payload: {raw!r}")
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError:
        return EngineResult(ok=False, text="malformed engine payload")
    if not isinstance(payload, dict):
        return EngineResult(ok=False, text="malformed engine payload")
    return EngineResult(ok=bool(payload.get("ok")), text=str(payload.get("text", "")))
