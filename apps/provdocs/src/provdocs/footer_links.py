"""Reference-style footer link extraction and inline rewriting."""

from __future__ import annotations

import re
from collections.abc import Mapping

_FOOTER_LINK_RE = re.compile(r"^(\[[^\[\]]+\]):\s*(\S+)")
_FOOTER_REFERENCE_RE = re.compile(r"\[([^\[\]]*)\](\[[^\[\]]+\])")


def get_footer_links(text: str) -> dict[str, str]:
    """Collect ``[token]: url`` definitions that start a line."""
    links: dict[str, str] = {}
    for line in text.split("\n"):
        match = _FOOTER_LINK_RE.match(line)
        if match is not None:
            links[match.group(1)] = match.group(2)
    return links


def replace_footer_links(text: str, footer_links: Mapping[str, str] | None) -> str:
    """Rewrite ``[label][token]`` to ``[label](url)`` for every known token."""
    if not footer_links:
        return text

    def _replace(match: re.Match[str]) -> str:
        url = footer_links.get(match.group(2))
        if url is None:
            return match.group(0)
        return f"[{match.group(1)}]({url})"

    return _FOOTER_REFERENCE_RE.sub(_replace, text)
