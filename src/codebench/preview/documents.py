"""Preview document construction per language."""

from __future__ import annotations

from codebench.languages import Language
from codebench.workspace import File

SANDBOX_PERMISSIONS: tuple[str, ...] = ("allow-scripts", "allow-same-origin")

CSS_PLACEHOLDER = '<div id="preview">Add elements to style</div>'
SCRIPT_PLACEHOLDER = '<div id="preview">JavaScript Preview</div>'


def _css_document(content: str) -> str:
    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        "  <head>\n"
        f"    <style>{content}</style>\n"
        "  </head>\n"
        "  <body>\n"
        f"    {CSS_PLACEHOLDER}\n"
        "  </body>\n"
        "</html>\n"
    )


def _script_document(content: str) -> str:
    # Errors stay inside the frame's own console.
    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        "  <head>\n"
        '    <script type="module">\n'
        "      try {\n"
        f"{content}\n"
        "      } catch (error) {\n"
        "        console.error('Preview error:', error);\n"
        "      }\n"
        "    </script>\n"
        "  </head>\n"
        "  <body>\n"
        f"    {SCRIPT_PLACEHOLDER}\n"
        "  </body>\n"
        "</html>\n"
    )


def build_preview_document(file: File) -> str | None:
    """Return the HTML document for ``file``, or ``None`` for non-web languages."""
    if file.language == Language.HTML:
        return file.content
    if file.language == Language.CSS:
        return _css_document(file.content)
    if file.language in (Language.JAVASCRIPT, Language.TYPESCRIPT):
        return _script_document(file.content)
    return None
