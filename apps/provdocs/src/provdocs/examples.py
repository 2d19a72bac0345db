"""Example Usage section normalization."""

from __future__ import annotations

import re
from collections.abc import Sequence

from .constants import (
    CODE_FENCE,
    EXAMPLE_TITLE_MARKER,
    EXAMPLE_USAGE_HEADING,
    SUBSECTION_MARKER,
)
from .sections import heading_level

_EXAMPLE_HEADING_RE = re.compile(r"^## Example Usage\s*(?:[-–—:]\s*(.*?))?\s*$")
_CANONICAL_EXAMPLE_LINE_RE = re.compile(r"^[ \t]*(## Example Usage)[ \t]*$", re.MULTILINE)
_LEVEL_TWO_LINE_RE = re.compile(r"^[ \t]*## ", re.MULTILINE)


def example_title(heading: str) -> str | None:
    """Return the suffix title of an Example Usage heading.

    ``""`` means the canonical heading; ``None`` means not an example heading.
    """
    match = _EXAMPLE_HEADING_RE.match(heading)
    if match is None:
        return None
    return (match.group(1) or "").strip()


def reformat_examples(groups: Sequence[list[str]]) -> list[list[str]]:
    """Collapse every Example Usage group into one canonical group.

    Titled groups (``## Example Usage - Title``) become ``### Title``
    subsections of the canonical group, which is synthesized when the document
    has none. Documents without titled groups are returned unchanged.
    """
    canonical_index: int | None = None
    merged_indices: list[int] = []
    titles: dict[int, str] = {}

    for index, group in enumerate(groups):
        if not group:
            continue
        title = example_title(group[0])
        if title is None:
            continue
        if title:
            titles[index] = title
            merged_indices.append(index)
        elif canonical_index is None:
            canonical_index = index
        else:
            merged_indices.append(index)

    if not titles:
        return [list(group) for group in groups]

    if canonical_index is not None:
        merged = list(groups[canonical_index])
    else:
        merged = [EXAMPLE_USAGE_HEADING]

    for index in merged_indices:
        body = groups[index][1:]
        title = titles.get(index)
        if title is not None:
            if merged and merged[-1].strip() and heading_level(merged[-1]) == 0:
                merged.append("")
            merged.append(f"{SUBSECTION_MARKER}{title}")
        merged.extend(body)

    consumed = set(merged_indices)
    if canonical_index is not None:
        consumed.add(canonical_index)
    anchor = min(consumed)

    result: list[list[str]] = []
    for index, group in enumerate(groups):
        if index == anchor:
            result.append(merged)
        elif index not in consumed:
            result.append(list(group))
    return result


def fix_example_titles(lines: Sequence[str]) -> list[str]:
    """Promote ``####`` example titles that introduce a code fence to ``###``.

    A title stays untouched when no fence follows it before the next heading
    of the same or a shallower level. Lines inside fenced code are never titles.
    """
    result = list(lines)
    title_level = EXAMPLE_TITLE_MARKER.count("#")
    in_fence = False
    for index, line in enumerate(result):
        if line.lstrip().startswith(CODE_FENCE):
            in_fence = not in_fence
            continue
        if in_fence or not line.startswith(EXAMPLE_TITLE_MARKER):
            continue
        for following in result[index + 1 :]:
            if following.lstrip().startswith(CODE_FENCE):
                result[index] = SUBSECTION_MARKER + line[len(EXAMPLE_TITLE_MARKER) :]
                break
            level = heading_level(following)
            if 0 < level <= title_level:
                break
    return result


def extract_examples(text: str) -> str:
    """Return the canonical Example Usage section verbatim.

    Returns ``""`` unless the document has exactly one such heading.
    """
    matches = list(_CANONICAL_EXAMPLE_LINE_RE.finditer(text))
    if len(matches) != 1:
        return ""

    match = matches[0]
    start = match.start(1)
    following = _LEVEL_TWO_LINE_RE.search(text, match.end())
    if following is None:
        return text[start:]
    return text[start : following.start() - 1]
