"""Heading-based line grouping."""

from __future__ import annotations

from collections.abc import Iterable


def group_lines(lines: Iterable[str], marker: str) -> list[list[str]]:
    """Split lines into groups, starting a new group at each ``marker`` line.

    The first group is the preamble before the first marker and may be empty.
    Every input line lands in exactly one group, blank lines included.
    """
    groups: list[list[str]] = []
    buffer: list[str] = []
    for line in lines:
        if line.startswith(marker):
            groups.append(buffer)
            buffer = []
        buffer.append(line)
    groups.append(buffer)
    return groups


def split_group_lines(text: str, marker: str) -> list[list[str]]:
    return group_lines(text.split("\n"), marker)


def join_groups(groups: Iterable[list[str]]) -> str:
    return "\n".join(line for group in groups for line in group)


def heading_level(line: str) -> int:
    """Return the ATX heading depth of ``line``, or 0 when it is not a heading."""
    stripped = line.lstrip()
    level = len(stripped) - len(stripped.lstrip("#"))
    if level == 0 or level > 6:
        return 0
    rest = stripped[level:]
    if rest and not rest[0].isspace():
        return 0
    return level
