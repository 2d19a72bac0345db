"""Per-document normalization pipeline.

Every stage is a pure transformation of the document text, so documents can
be processed independently and in parallel. Only an unusable configuration
raises; content the stages do not understand passes through untouched.
"""

from __future__ import annotations

import re
import time
from collections.abc import Sequence
from typing import Optional

from .arguments import parse_argument_reference, parse_attributes_reference
from .constants import CODE_FENCE, SECTION_MARKER, SOURCE_EXAMPLE_TAGS
from .conversion import ExampleConverter, convert_hcl
from .coverage import CoverageTracker
from .errors import ConfigError
from .examples import example_title, extract_examples, fix_example_titles, reformat_examples
from .footer_links import get_footer_links, replace_footer_links
from .logging import log_event
from .models import ArgumentEntry, NormalizedDocument, PipelineConfig
from .rewrite import format_entity_name, reformat_text
from .sections import join_groups, split_group_lines
from .time_utils import elapsed_ms

_ARGUMENT_HEADING_RE = re.compile(r"(?i)^## arguments? reference\b")
_ATTRIBUTE_HEADING_RE = re.compile(r"(?i)^## attributes? reference\b")
_FRONT_MATTER_DELIMITER = "---"


def normalize_document(
    text: str,
    *,
    name: str,
    config: PipelineConfig,
    converter: Optional[ExampleConverter] = None,
    coverage: Optional[CoverageTracker] = None,
) -> NormalizedDocument:
    """Normalize one reference document.

    Synchronous: example conversion runs its own event loop, so call this from
    plain threads rather than from inside a running loop.
    """
    if not name:
        raise ConfigError("Document name must be a non-empty string")
    if converter is not None and not config.languages:
        raise ConfigError("At least one target language is required for conversion")

    started = time.perf_counter()
    diagnostics: list[str] = []

    body = "\n".join(strip_front_matter(text.split("\n")))
    body = replace_footer_links(body, get_footer_links(body))

    groups = [fix_example_titles(group) for group in split_group_lines(body, SECTION_MARKER)]
    groups = reformat_examples(groups)

    arguments: dict[str, ArgumentEntry] = {}
    attributes: dict[str, str] = {}
    for group in groups:
        if not group:
            continue
        if _ARGUMENT_HEADING_RE.match(group[0]):
            arguments.update(parse_argument_reference(group))
        elif _ATTRIBUTE_HEADING_RE.match(group[0]):
            attributes.update(parse_attributes_reference(group))

    _rewrite_descriptions(arguments, attributes, config)

    example_count = 0
    if converter is not None:
        converted_groups: list[list[str]] = []
        for group in groups:
            if group and example_title(group[0]) == "":
                group, found = _convert_example_fences(
                    group,
                    document_name=name,
                    config=config,
                    converter=converter,
                    coverage=coverage,
                    diagnostics=diagnostics,
                )
                example_count += found
            converted_groups.append(group)
        groups = converted_groups

    markdown = join_groups(groups)
    title, description = _split_preamble(groups[0] if groups else [])

    log_event(
        "document_normalized",
        document=name,
        argument_count=len(arguments),
        attribute_count=len(attributes),
        example_count=example_count,
        diagnostic_count=len(diagnostics),
        elapsed_ms=elapsed_ms(started),
    )
    return NormalizedDocument(
        name=name,
        title=title,
        description=description,
        arguments=arguments,
        attributes=attributes,
        examples=extract_examples(markdown),
        markdown=markdown,
        diagnostics=diagnostics,
    )


def strip_front_matter(lines: Sequence[str]) -> list[str]:
    """Drop a leading ``---`` delimited metadata block, if present."""
    if not lines or lines[0].strip() != _FRONT_MATTER_DELIMITER:
        return list(lines)
    for index in range(1, len(lines)):
        if lines[index].strip() == _FRONT_MATTER_DELIMITER:
            return list(lines[index + 1 :])
    return list(lines)


def _rewrite_descriptions(
    arguments: dict[str, ArgumentEntry],
    attributes: dict[str, str],
    config: PipelineConfig,
) -> None:
    def rewrite(text: str) -> str:
        return reformat_text(
            text,
            resource_tokens=config.resource_tokens,
            language=config.target_language,
        )

    for entry in arguments.values():
        entry.description = rewrite(entry.description)
        if entry.arguments is not None:
            entry.arguments = {key: rewrite(value) for key, value in entry.arguments.items()}
    for key, value in attributes.items():
        attributes[key] = rewrite(value)


def _convert_example_fences(
    group: list[str],
    *,
    document_name: str,
    config: PipelineConfig,
    converter: ExampleConverter,
    coverage: Optional[CoverageTracker],
    diagnostics: list[str],
) -> tuple[list[str], int]:
    result: list[str] = []
    found = 0
    index = 0
    while index < len(group):
        line = group[index]
        stripped = line.strip()
        tag = stripped[len(CODE_FENCE) :].strip().lower() if stripped.startswith(CODE_FENCE) else ""
        if tag not in SOURCE_EXAMPLE_TAGS:
            result.append(line)
            index += 1
            continue

        closing = _find_closing_fence(group, index + 1)
        if closing is None:
            # Unterminated fence: keep the rest verbatim.
            result.extend(group[index:])
            break

        source = "\n".join(group[index + 1 : closing])
        example_name = f"{document_name}#{found}"
        found += 1
        code_blocks, diagnostic_text, error = convert_hcl(
            source,
            example_name,
            converter=converter,
            languages=config.languages,
            timeout_sec=config.conversion_timeout_sec,
            attempts=config.conversion_attempts,
            concurrency=config.effective_concurrency,
            coverage=coverage,
        )
        entity = format_entity_name(document_name)
        for diagnostic in diagnostic_text.splitlines():
            diagnostics.append(f"{entity} example {found - 1}: {diagnostic}")
        if error is not None:
            diagnostics.append(f"{entity} example {found - 1}: {error}")
        if code_blocks:
            result.extend(code_blocks.split("\n"))
        index = closing + 1

    return result, found


def _find_closing_fence(lines: Sequence[str], start: int) -> Optional[int]:
    for index in range(start, len(lines)):
        if lines[index].strip() == CODE_FENCE:
            return index
    return None


def _split_preamble(preamble: Sequence[str]) -> tuple[str, str]:
    title = ""
    body: list[str] = []
    for line in preamble:
        if not title and line.startswith("# "):
            title = line[2:].strip()
            continue
        body.append(line)
    return title, "\n".join(body).strip()
