"""Multi-language fenced code block assembly."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from .constants import CODE_FENCE, LANGUAGE_PRIORITY
from .models import LanguageSnippet


def order_languages(languages: Iterable[str]) -> list[str]:
    """Order languages by the fixed priority list, then the rest sorted."""
    present = set(languages)
    ordered = [language for language in LANGUAGE_PRIORITY if language in present]
    ordered.extend(sorted(present.difference(LANGUAGE_PRIORITY)))
    return ordered


def snippets_from_mapping(code_by_language: Mapping[str, str | None]) -> list[LanguageSnippet]:
    """Build ordered snippets, dropping languages without usable code."""
    usable = {
        language: code
        for language, code in code_by_language.items()
        if code is not None and code.strip() != ""
    }
    return [
        LanguageSnippet(language=language, code=usable[language])
        for language in order_languages(usable)
    ]


def render_snippet(snippet: LanguageSnippet) -> str:
    code = snippet.code[:-1] if snippet.code.endswith("\n") else snippet.code
    return f"{CODE_FENCE}{snippet.language}\n{code}\n{CODE_FENCE}"


def conversions_to_string(code_by_language: Mapping[str, str | None]) -> str:
    return "\n".join(
        render_snippet(snippet) for snippet in snippets_from_mapping(code_by_language)
    )
