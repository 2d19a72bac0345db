"""Documentation source reading and normalized output writing."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from charset_normalizer import from_bytes

from .constants import MARKDOWN_SUFFIX, MODEL_SUFFIX
from .errors import DocumentReadError, DocumentWriteError
from .logging import log_event
from .models import NormalizedDocument


def read_document(source_path_abs: Path) -> str:
    """Read a markdown source as text with ``\\n`` line endings.

    UTF-8 (with or without BOM) is tried first; anything else goes through
    charset detection, since hand-maintained docs are not always UTF-8.
    """
    try:
        raw_bytes = source_path_abs.read_bytes()
    except OSError as exc:
        raise DocumentReadError(f"Failed to read document: {source_path_abs}") from exc
    text = _decode_document(raw_bytes, source_path_abs)
    return text.replace("\r\n", "\n")


def _decode_document(raw_bytes: bytes, source_path_abs: Path) -> str:
    try:
        return raw_bytes.decode("utf-8-sig")
    except UnicodeDecodeError:
        detected = from_bytes(raw_bytes).best()

    if detected is None:
        raise DocumentReadError(f"Cannot detect text encoding of document: {source_path_abs}")
    log_event(
        "document_decoded",
        level=logging.WARNING,
        source_file=source_path_abs,
        encoding=detected.encoding,
    )
    return str(detected)


def write_normalized_outputs(
    *, document: NormalizedDocument, out_dir_abs: Path
) -> tuple[Path, Path]:
    markdown_path = out_dir_abs / f"{document.name}{MARKDOWN_SUFFIX}"
    model_path = out_dir_abs / f"{document.name}{MODEL_SUFFIX}"
    try:
        out_dir_abs.mkdir(parents=True, exist_ok=True)
        markdown_path.write_text(document.markdown, encoding="utf-8")
        model_path.write_text(
            f"{json.dumps(document.to_dict(), ensure_ascii=False, indent=2)}\n",
            encoding="utf-8",
        )
    except OSError as exc:
        raise DocumentWriteError(f"Failed to write outputs to: {out_dir_abs}") from exc
    return markdown_path, model_path
