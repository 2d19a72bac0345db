"""Argument and attribute reference parsing.

The reference sections are bullet lists written by hand, so every convention
is recognized by its own tolerant pattern:

* ``* `name` - (Optional) description`` opens an entry (the dash is optional);
* a non-blank, non-heading line continues the current entry;
* "The `name` object supports the following:" (or a bullet/heading variant)
  opens a nested scope owned by ``name``.

Lines that match nothing are skipped. Nothing here raises on malformed input.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from .models import ArgumentEntry
from .sections import heading_level

_ARGUMENT_BULLET_RE = re.compile(
    r"^\s*[*+-]\s*`([a-zA-Z0-9_]*)`\s*(\([a-zA-Z]*\)\s*)?[–-]?\s+(\([^)]*\)[-\s]*)?(.*)"
)
_NESTED_OBJECT_RES = (
    # "The `website` object supports the following:"
    # "When `virtualization_type` is "hvm" the following additional arguments apply:"
    re.compile(r"`([a-zA-Z0-9_]+)`.*\bfollowing\b.*:\s*$"),
    # "#### result_configuration Argument Reference"
    re.compile(r"(?i)^\s*#+\s*([a-z0-9_]+).*\bargument reference"),
)
_LOOSE_BULLET_RE = re.compile(r"^\s*[*+-]\s+\S")
_HORIZONTAL_RULE_RE = re.compile(r"^\s*(?:-{3,}|\*{3,}|_{3,})\s*$")
_NESTED_BULLET_SUFFIX = "supports the following:"


def parse_argument_reference(lines: Iterable[str]) -> dict[str, ArgumentEntry]:
    arguments: dict[str, ArgumentEntry] = {}
    last_match = ""
    nested = ""

    for line in lines:
        bullet = _ARGUMENT_BULLET_RE.match(line)
        if bullet is not None:
            name, description = bullet.group(1), bullet.group(4)
            if line.rstrip().endswith(_NESTED_BULLET_SUFFIX):
                # "* `retention_policy` supports the following:" is a scope marker.
                nested = name.lower()
                last_match = ""
                continue

            if nested:
                parent = arguments.setdefault(nested, ArgumentEntry())
                if parent.arguments is None:
                    parent.arguments = {}
                parent.arguments[name] = description

                # Also record the nested argument at top level. Later definitions
                # win, so a shared child name collapses into a single entry.
                existing = arguments.get(name)
                arguments[name] = ArgumentEntry(
                    description=description,
                    is_nested=True,
                    arguments=existing.arguments if existing is not None else None,
                )
            else:
                existing = arguments.get(name)
                arguments[name] = ArgumentEntry(
                    description=description,
                    arguments=existing.arguments if existing is not None else None,
                )
            last_match = name
            continue

        marker = _match_nested_marker(line)
        if marker:
            nested = marker
            last_match = ""
            continue

        if _is_structural(line):
            last_match = ""
            continue

        if _LOOSE_BULLET_RE.match(line):
            # A bullet we cannot parse is dropped and ends the previous entry.
            last_match = ""
            continue

        if last_match:
            _append_continuation(arguments, nested, last_match, line.strip())

    return arguments


def parse_attributes_reference(lines: Iterable[str]) -> dict[str, str]:
    attributes: dict[str, str] = {}
    last_match = ""

    for line in lines:
        bullet = _ARGUMENT_BULLET_RE.match(line)
        if bullet is not None:
            last_match = bullet.group(1)
            attributes[last_match] = bullet.group(4)
            continue
        if _is_structural(line):
            last_match = ""
            continue
        if _LOOSE_BULLET_RE.match(line):
            last_match = ""
            continue
        if last_match:
            attributes[last_match] += "\n" + line.strip()

    return attributes


def _append_continuation(
    arguments: dict[str, ArgumentEntry],
    nested: str,
    last_match: str,
    text: str,
) -> None:
    entry = arguments[last_match]
    if nested:
        parent_arguments = arguments[nested].arguments
        if parent_arguments is not None and last_match in parent_arguments:
            parent_arguments[last_match] += "\n" + text
        if entry.is_nested:
            entry.description += "\n" + text
        return
    entry.description += "\n" + text


def _match_nested_marker(line: str) -> str:
    for pattern in _NESTED_OBJECT_RES:
        match = pattern.search(line)
        if match is not None:
            return match.group(1).lower()
    return ""


def _is_structural(line: str) -> bool:
    if line.strip() == "":
        return True
    if _HORIZONTAL_RULE_RE.match(line):
        return True
    return heading_level(line) > 0
