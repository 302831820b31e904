"""Terminal session domain package."""

from .models import (
    BANNER_LINES,
    PROMPT,
    KeyEvent,
    SessionState,
    TerminalEvent,
    TerminalOptions,
)
from .session import TerminalSession, TerminalSessionManager
from .surface import FitCapability, SizeObserver, TerminalAddon, TerminalSurface

__all__ = [
    "BANNER_LINES",
    "FitCapability",
    "KeyEvent",
    "PROMPT",
    "SessionState",
    "SizeObserver",
    "TerminalAddon",
    "TerminalEvent",
    "TerminalOptions",
    "TerminalSession",
    "TerminalSessionManager",
    "TerminalSurface",
]
