"""In-memory workspace: ordered files plus the active-file reference."""

from __future__ import annotations

import logging as py_logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from enum import Enum

from codebench.errors import CodebenchError, ErrorKind, ExitCode
from codebench.languages import Language, classify

logger = py_logging.getLogger(__name__)


@dataclass
class File:
    name: str
    content: str = ""
    language: Language = Language.PLAINTEXT


class WorkspaceEventKind(str, Enum):
    CREATED = "created"
    CONTENT_CHANGED = "content-changed"
    ACTIVE_CHANGED = "active-changed"


@dataclass(frozen=True)
class WorkspaceEvent:
    kind: WorkspaceEventKind
    file: File | None


WorkspaceListener = Callable[[WorkspaceEvent], None]


class WorkspaceStore:
    """Owns the file collection and the single active reference.

    Files are keyed by name. The active reference is a name, never a copy, so
    selecting a file moves no data. Duplicate names are rejected on creation.
    """

    def __init__(self) -> None:
        self._files: dict[str, File] = {}
        self._active_name: str | None = None
        self._listeners: list[WorkspaceListener] = []

    def __len__(self) -> int:
        return len(self._files)

    def __contains__(self, name: object) -> bool:
        return name in self._files

    def __iter__(self) -> Iterator[File]:
        return iter(list(self._files.values()))

    def files(self) -> list[File]:
        return list(self._files.values())

    def get(self, name: str) -> File | None:
        return self._files.get(name)

    @property
    def active_name(self) -> str | None:
        return self._active_name

    @property
    def active_file(self) -> File | None:
        if self._active_name is None:
            return None
        return self._files.get(self._active_name)

    def subscribe(self, listener: WorkspaceListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def create_file(self, name: str) -> File:
        candidate = name.strip()
        if not candidate:
            raise CodebenchError(
                "File name cannot be empty.",
                code=ExitCode.VALIDATION_ERROR,
                hint="Enter a file name such as main.js.",
                kind=ErrorKind.INVALID_FILE_NAME,
            )
        if candidate in self._files:
            raise CodebenchError(
                f"A file named '{candidate}' already exists.",
                code=ExitCode.VALIDATION_ERROR,
                hint="Choose a different name or select the existing file.",
                kind=ErrorKind.DUPLICATE_FILE_NAME,
            )
        created = File(name=candidate, content="", language=classify(candidate))
        self._files[candidate] = created
        self._active_name = candidate
        logger.debug("workspace created file=%s language=%s", candidate, created.language.value)
        self._emit(WorkspaceEventKind.CREATED, created)
        self._emit(WorkspaceEventKind.ACTIVE_CHANGED, created)
        return created

    def update_active_content(self, content: str) -> None:
        active = self.active_file
        if active is None:
            return
        active.content = content
        self._emit(WorkspaceEventKind.CONTENT_CHANGED, active)

    def set_active(self, name: str) -> None:
        target = self._files.get(name)
        if target is None or name == self._active_name:
            return
        self._active_name = name
        self._emit(WorkspaceEventKind.ACTIVE_CHANGED, target)

    def _emit(self, kind: WorkspaceEventKind, file: File | None) -> None:
        event = WorkspaceEvent(kind=kind, file=file)
        for listener in list(self._listeners):
            listener(event)
