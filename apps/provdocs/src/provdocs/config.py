"""Profile loading and validation."""

from __future__ import annotations

import json
import re
import unicodedata
from pathlib import Path
from typing import Any

from .constants import (
    DEFAULT_CONVERSION_ATTEMPTS,
    DEFAULT_CONVERSION_TIMEOUT_SEC,
    DEFAULT_TARGET_LANGUAGE,
    LANGUAGE_PRIORITY,
)
from .errors import ConfigError
from .models import PipelineConfig

_WINDOWS_DRIVE_RELATIVE_RE = re.compile(r"^[A-Za-z]:[^/\\]")
_KNOWN_FIELDS = frozenset(
    {
        "provider_name",
        "provider_version",
        "languages",
        "converter_command",
        "converter_url",
        "conversion_timeout_sec",
        "conversion_attempts",
        "conversion_concurrency",
        "resource_tokens",
        "target_language",
        "log_file",
        "coverage_file",
    }
)


def map_path(path: str, profile_dir: Path | None = None) -> Path:
    """Resolve a profile path.

    ~ or ~/...  -> user home directory
    Absolute    -> used as-is
    Relative    -> resolved against profile_dir; error when it is not given
    """
    normalized = unicodedata.normalize("NFC", path)
    if "\0" in normalized:
        raise ConfigError("Path cannot contain NUL bytes")
    if _WINDOWS_DRIVE_RELATIVE_RE.match(normalized) or (
        normalized.startswith("\\") and not normalized.startswith("\\\\")
    ):
        raise ConfigError(f"Invalid path: {path}. Windows rooted path must be fully qualified.")

    candidate = Path(normalized).expanduser()
    if candidate.is_absolute():
        return candidate.resolve(strict=False)
    if profile_dir is not None:
        return (profile_dir / candidate).resolve(strict=False)
    raise ConfigError(f"Relative path is not supported here: {path}")


def _require_string_field(
    profile: dict[str, Any],
    field_name: str,
    *,
    non_empty: bool = False,
) -> str:
    value = profile.get(field_name)
    if not isinstance(value, str):
        suffix = " non-empty" if non_empty else ""
        raise ConfigError(f"{field_name} must be a{suffix} string")
    if non_empty and not value:
        raise ConfigError(f"{field_name} must be a non-empty string")
    return value


def _optional_string_list(profile: dict[str, Any], field_name: str) -> tuple[str, ...] | None:
    value = profile.get(field_name)
    if value is None:
        return None
    if (
        not isinstance(value, list)
        or not value
        or not all(isinstance(item, str) and item for item in value)
    ):
        raise ConfigError(f"{field_name} must be a non-empty list of non-empty strings")
    return tuple(value)


def _optional_int(profile: dict[str, Any], field_name: str, default: int | None) -> int | None:
    value = profile.get(field_name, default)
    if value is None:
        return None
    # bool is an int subclass; reject it explicitly.
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(f"{field_name} must be an integer >= 1")
    return value


def validate_profile(profile: Any) -> None:
    if not isinstance(profile, dict):
        raise ConfigError("Profile must be a JSON object")

    unknown = sorted(set(profile) - _KNOWN_FIELDS)
    if unknown:
        raise ConfigError(f"Profile has unknown fields: {', '.join(unknown)}")

    _require_string_field(profile, "provider_name", non_empty=True)
    if "provider_version" in profile:
        _require_string_field(profile, "provider_version")
    if "target_language" in profile:
        _require_string_field(profile, "target_language", non_empty=True)
    _optional_string_list(profile, "languages")
    _optional_string_list(profile, "converter_command")

    converter_url = profile.get("converter_url")
    if converter_url is not None and not isinstance(converter_url, str):
        raise ConfigError("converter_url must be a string")
    if converter_url is not None and profile.get("converter_command") is not None:
        raise ConfigError("converter_command and converter_url are mutually exclusive")

    timeout = profile.get("conversion_timeout_sec", DEFAULT_CONVERSION_TIMEOUT_SEC)
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ConfigError("conversion_timeout_sec must be a positive number")

    _optional_int(profile, "conversion_attempts", DEFAULT_CONVERSION_ATTEMPTS)
    _optional_int(profile, "conversion_concurrency", None)

    tokens = profile.get("resource_tokens", {})
    if not isinstance(tokens, dict) or not all(
        isinstance(key, str) and isinstance(value, str) for key, value in tokens.items()
    ):
        raise ConfigError("resource_tokens must be an object mapping strings to strings")

    for field_name in ("log_file", "coverage_file"):
        value = profile.get(field_name)
        if value is not None and (not isinstance(value, str) or not value):
            raise ConfigError(f"{field_name} must be a non-empty string or null")


def config_from_dict(raw: dict[str, Any], profile_dir: Path | None = None) -> PipelineConfig:
    validate_profile(raw)

    log_file = raw.get("log_file")
    coverage_file = raw.get("coverage_file")
    return PipelineConfig(
        provider_name=raw["provider_name"],
        provider_version=raw.get("provider_version", ""),
        languages=_optional_string_list(raw, "languages") or LANGUAGE_PRIORITY,
        converter_command=_optional_string_list(raw, "converter_command"),
        converter_url=raw.get("converter_url"),
        conversion_timeout_sec=float(
            raw.get("conversion_timeout_sec", DEFAULT_CONVERSION_TIMEOUT_SEC)
        ),
        conversion_attempts=_optional_int(
            raw, "conversion_attempts", DEFAULT_CONVERSION_ATTEMPTS
        )
        or DEFAULT_CONVERSION_ATTEMPTS,
        conversion_concurrency=_optional_int(raw, "conversion_concurrency", None),
        resource_tokens=dict(raw.get("resource_tokens", {})),
        target_language=raw.get("target_language", DEFAULT_TARGET_LANGUAGE),
        log_file=map_path(log_file, profile_dir) if log_file else None,
        coverage_file=map_path(coverage_file, profile_dir) if coverage_file else None,
    )


def load_config(path: str | Path) -> PipelineConfig:
    """Load and validate a JSON profile.

    Raises:
        ConfigError: If the file is missing, unreadable, malformed or invalid
    """
    profile_path = map_path(str(path), Path.cwd())
    if not profile_path.is_file():
        raise ConfigError(f"Profile not found: {profile_path}")

    try:
        raw = json.loads(profile_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Failed to read profile: {profile_path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid profile JSON: {profile_path}: {exc}") from exc

    return config_from_dict(raw, profile_path.parent)
