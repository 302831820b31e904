"""Live preview domain package."""

from .documents import SANDBOX_PERMISSIONS, build_preview_document
from .pipeline import DEFAULT_DEBOUNCE_SECONDS, PreviewPipeline, PreviewSurface

__all__ = [
    "build_preview_document",
    "DEFAULT_DEBOUNCE_SECONDS",
    "PreviewPipeline",
    "PreviewSurface",
    "SANDBOX_PERMISSIONS",
]
