"""Link and name rewriting for argument descriptions."""

from __future__ import annotations

import re
from collections.abc import Mapping

from .constants import DEFAULT_TARGET_LANGUAGE, LEGACY_ALIAS_SUFFIX, TERRAFORM_DOCS_BASE_URL

_INLINE_LINK_RE = re.compile(r"\[([^\[\]]*)\]\(([^()\s]*)\)")
_CODE_SPAN_RE = re.compile(r"`([^`\n]+)`")
_SNAKE_CASE_RE = re.compile(r"\b[a-z][a-z0-9]*(?:_[a-z0-9]+)+\b")
# Code spans and inline link targets are never touched by name substitution.
_PROTECTED_RE = re.compile(r"`[^`\n]*`|\]\([^()\s]*\)")
_ABSOLUTE_URL_PREFIXES = ("http://", "https://", "mailto:", "#")
_SNAKE_CASE_LANGUAGES = frozenset({"python"})


def format_entity_name(raw_name: str) -> str:
    """Quote an entity name, flagging names that carry the legacy alias suffix."""
    if raw_name.endswith(LEGACY_ALIAS_SUFFIX):
        canonical = raw_name[: -len(LEGACY_ALIAS_SUFFIX)]
        return f"'{canonical}' (aliased or renamed)"
    return f"'{raw_name}'"


def to_camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def token_display_name(token: str) -> str:
    """``google:container/nodePool:NodePool`` -> ``google.container.NodePool``."""
    package, sep, rest = token.partition(":")
    if not sep or ":" not in rest:
        return token
    module_path, type_name = rest.rsplit(":", 1)
    module = module_path.split("/", 1)[0]
    if module in ("", "index"):
        return f"{package}.{type_name}"
    return f"{package}.{module}.{type_name}"


def reformat_text(
    text: str,
    *,
    resource_tokens: Mapping[str, str] | None = None,
    language: str = DEFAULT_TARGET_LANGUAGE,
) -> str:
    text = _INLINE_LINK_RE.sub(_rewrite_link, text)
    if language not in _SNAKE_CASE_LANGUAGES:
        text = _CODE_SPAN_RE.sub(_camel_case_code_span, text)
    if resource_tokens:
        text = _replace_resource_names(text, resource_tokens)
    return text


def _rewrite_link(match: re.Match[str]) -> str:
    label, target = match.group(1), match.group(2)
    if target.startswith(_ABSOLUTE_URL_PREFIXES):
        return match.group(0)
    if target.startswith("/"):
        return f"[{label}]({TERRAFORM_DOCS_BASE_URL}{target})"
    # Page-relative links point into the upstream site layout and cannot be
    # resolved here, so only the label survives.
    return label


def _camel_case_code_span(match: re.Match[str]) -> str:
    converted = _SNAKE_CASE_RE.sub(lambda m: to_camel_case(m.group(0)), match.group(1))
    return f"`{converted}`"


def _replace_resource_names(text: str, resource_tokens: Mapping[str, str]) -> str:
    names = sorted(resource_tokens, key=len, reverse=True)
    pattern = re.compile(r"\b(" + "|".join(re.escape(name) for name in names) + r")\b")

    def _replace_plain(chunk: str) -> str:
        return pattern.sub(lambda m: token_display_name(resource_tokens[m.group(1)]), chunk)

    parts: list[str] = []
    position = 0
    for protected in _PROTECTED_RE.finditer(text):
        parts.append(_replace_plain(text[position : protected.start()]))
        parts.append(protected.group(0))
        position = protected.end()
    parts.append(_replace_plain(text[position:]))
    return "".join(parts)
