"""Debounced live preview of the active file."""

from __future__ import annotations

import logging as py_logging
from typing import Protocol

from codebench.errors import ErrorKind
from codebench.languages import is_previewable
from codebench.preview.documents import build_preview_document
from codebench.scheduling import Scheduler, TaskSlot
from codebench.workspace import File

logger = py_logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.3


class PreviewSurface(Protocol):
    def is_attached(self) -> bool: ...

    def write_document(self, html: str) -> None: ...


class PreviewPipeline:
    def __init__(
        self,
        scheduler: Scheduler,
        surface: PreviewSurface | None = None,
        *,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
    ) -> None:
        self.debounce_seconds = debounce_seconds
        self._slot = TaskSlot(scheduler, name="preview")
        self._surface = surface
        self._file: File | None = None
        self._enabled = False
        self.render_count = 0
        self.failure_count = 0
        self.last_document: str | None = None

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def pending(self) -> bool:
        return self._slot.pending

    @property
    def file(self) -> File | None:
        return self._file

    def attach_surface(self, surface: PreviewSurface) -> None:
        self._surface = surface

    def detach_surface(self) -> None:
        self._slot.cancel()
        self._surface = None

    def set_enabled(self, enabled: bool) -> None:
        if enabled == self._enabled:
            return
        self._enabled = enabled
        if enabled:
            self._schedule()
        else:
            self._slot.cancel()

    def set_file(self, file: File | None) -> None:
        self._file = file
        if file is None:
            self._slot.cancel()
            return
        self._schedule()

    def notify_content_changed(self, file: File) -> None:
        if self._file is None or file.name != self._file.name:
            self._file = file
        self._schedule()

    def flush(self) -> bool:
        """Render immediately if a render is pending."""
        if not self._slot.pending:
            return False
        self._slot.cancel()
        return self._render()

    def cancel(self) -> None:
        self._slot.cancel()

    def _schedule(self) -> None:
        if not self._enabled or self._file is None:
            return
        if not is_previewable(self._file.language):
            self._slot.cancel()
            return
        self._slot.schedule_after(self.debounce_seconds, self._render)

    def _render(self) -> bool:
        file = self._file
        if file is None or not self._enabled:
            return False
        document = build_preview_document(file)
        if document is None:
            return False
        surface = self._surface
        try:
            if surface is None or not surface.is_attached():
                raise RuntimeError("preview surface is not attached")
            surface.write_document(document)
        except Exception as exc:
            self.failure_count += 1
            logger.warning(
                "workbench-event step=%s file=%s message=Preview update failed: %s",
                ErrorKind.PREVIEW_RENDER_FAILURE.value,
                file.name,
                exc,
            )
            return False
        self.render_count += 1
        self.last_document = document
        logger.debug("workbench-event step=preview-render file=%s", file.name)
        return True
