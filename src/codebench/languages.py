"""File-name extension to language classification."""

from __future__ import annotations

from enum import Enum


class Language(str, Enum):
    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    HTML = "html"
    CSS = "css"
    JSON = "json"
    PYTHON = "python"
    PLAINTEXT = "plaintext"


EXTENSION_LANGUAGES: dict[str, Language] = {
    "js": Language.JAVASCRIPT,
    "ts": Language.TYPESCRIPT,
    "jsx": Language.JAVASCRIPT,
    "tsx": Language.TYPESCRIPT,
    "html": Language.HTML,
    "css": Language.CSS,
    "json": Language.JSON,
    "py": Language.PYTHON,
}

PREVIEWABLE_LANGUAGES = frozenset(
    {Language.HTML, Language.CSS, Language.JAVASCRIPT, Language.TYPESCRIPT}
)
SCRIPT_LANGUAGES = frozenset({Language.JAVASCRIPT, Language.TYPESCRIPT})


def extension_of(file_name: str) -> str:
    if "." not in file_name:
        return ""
    return file_name.rsplit(".", 1)[1]


def classify(file_name: str) -> Language:
    """Map a file name to its language; unknown or missing extensions are plaintext."""
    return EXTENSION_LANGUAGES.get(extension_of(file_name), Language.PLAINTEXT)


def is_previewable(language: Language) -> bool:
    return language in PREVIEWABLE_LANGUAGES


def is_script(language: Language) -> bool:
    return language in SCRIPT_LANGUAGES
