"""User-facing text rendering."""

from __future__ import annotations

from pathlib import Path

from .constants import ERROR_PREFIX, WARNING_PREFIX
from .models import NormalizedDocument


def render_error(message: str) -> str:
    return f"{ERROR_PREFIX} {message}"


def render_warning(message: str) -> str:
    return f"{WARNING_PREFIX} {message}"


def render_document_summary(
    *, document: NormalizedDocument, markdown_path: Path, model_path: Path
) -> list[str]:
    lines = [
        f"Normalized: {document.name}",
        f"Arguments: {len(document.arguments)}",
        f"Attributes: {len(document.attributes)}",
        f"Markdown: {markdown_path}",
        f"Model: {model_path}",
    ]
    lines.extend(render_warning(diagnostic) for diagnostic in document.diagnostics)
    return lines
