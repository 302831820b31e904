"""Terminal session domain models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from codebench.themes import ThemeName, theme_profile

BANNER_LINES: tuple[str, ...] = (
    "Web Terminal v1.0.0",
    'Type "help" for available commands',
)
PROMPT = "\r\n$ "
ENTER_KEY_CODE = 13
FIT_ADDON = "fit"
WEB_LINKS_ADDON = "web-links"


class SessionState(str, Enum):
    ABSENT = "absent"
    ACTIVE = "active"


@dataclass(frozen=True)
class KeyEvent:
    key: str
    key_code: int = 0
    alt: bool = False
    ctrl: bool = False
    meta: bool = False

    @property
    def is_enter(self) -> bool:
        return self.key_code == ENTER_KEY_CODE or self.key == "\r"

    @property
    def printable(self) -> bool:
        return not (self.alt or self.ctrl or self.meta)


@dataclass(frozen=True)
class TerminalOptions:
    background: str
    foreground: str
    cursor_blink: bool = True
    convert_eol: bool = True
    allow_proposed_api: bool = True

    @classmethod
    def for_theme(cls, theme: ThemeName | str) -> TerminalOptions:
        profile = theme_profile(theme)
        return cls(background=profile.background, foreground=profile.foreground)


@dataclass(frozen=True)
class TerminalEvent:
    step: str
    message: str
