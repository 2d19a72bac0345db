"""Structured event emission and logging helpers."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from .formatter import StructuredTextFormatter
from .schema import LOG_PATH_FIELDS

_LOGGER_NAME = "provdocs"


def _to_log_safe(value: Any) -> Any:
    """Convert values to JSON-serializable, log-safe representations."""
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, dict):
        return {str(k): _to_log_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_to_log_safe(v) for v in value]
    return str(value)


def _resolve_log_path(path_value: str) -> str:
    value = path_value.strip()
    if not value:
        return path_value
    try:
        return str(Path(value).expanduser().resolve(strict=False))
    except (OSError, RuntimeError):
        return path_value


def summarize_text(text: Any, limit: int = 200) -> str:
    """Return whitespace-collapsed text, truncated for log readability."""
    if text is None:
        return ""
    summary = " ".join(str(text).split())
    if len(summary) > limit:
        return summary[: limit - 3] + "..."
    return summary


def log_event(event: str, level: int = logging.INFO, **fields: Any) -> None:
    """Emit a structured log event."""
    payload: dict[str, Any] = {
        "ts": datetime.now().astimezone().isoformat(),
        "event": event,
    }
    for key, value in fields.items():
        if key in LOG_PATH_FIELDS and isinstance(value, (str, Path)):
            value = _resolve_log_path(str(value))
        payload[key] = _to_log_safe(value)
    logging.getLogger(_LOGGER_NAME).log(
        level, json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
    )


def before_sleep_log_event(
    *,
    converter: str,
    operation: str,
    level: int = logging.WARNING,
):
    """Build a tenacity before_sleep callback that emits structured retry logs."""

    def _callback(retry_state: Any) -> None:
        outcome = getattr(retry_state, "outcome", None)
        next_action = getattr(retry_state, "next_action", None)
        if outcome is None or next_action is None:
            return

        payload: dict[str, Any] = {
            "converter": converter,
            "operation": operation,
            "attempt": getattr(retry_state, "attempt_number", None),
            "sleep_sec": getattr(next_action, "sleep", None),
        }

        if getattr(outcome, "failed", False):
            error = outcome.exception()
            payload["result"] = "raised"
            if error is not None:
                payload["error_type"] = type(error).__name__
                payload["error"] = summarize_text(error)
        else:
            payload["result"] = "returned"

        log_event("conversion_retry", level=level, **payload)

    return _callback


def setup_logging(log_file: Optional[Path] = None) -> None:
    """Route provdocs events to ``log_file``, or silence them when absent."""
    logger = logging.getLogger(_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if log_file is None:
        logger.addHandler(logging.NullHandler())
        logger.propagate = False
        return

    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(str(log_file), encoding="utf-8")
    handler.setFormatter(StructuredTextFormatter())
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False
