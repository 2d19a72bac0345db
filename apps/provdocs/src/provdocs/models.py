"""Dataclasses shared across provdocs layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class ArgumentEntry:
    """One documented argument.

    ``arguments`` is only populated on the parent entry that introduces a
    nested "supports the following" block.
    """

    description: str = ""
    is_nested: bool = False
    arguments: dict[str, str] | None = None

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "description": self.description,
            "is_nested": self.is_nested,
        }
        if self.arguments is not None:
            payload["arguments"] = dict(self.arguments)
        return payload


@dataclass(frozen=True)
class LanguageSnippet:
    language: str
    code: str


@dataclass
class ConversionResult:
    example_name: str
    code_by_language: dict[str, str] = field(default_factory=dict)
    diagnostics: list[str] = field(default_factory=list)
    failed_languages: list[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return any(code.strip() for code in self.code_by_language.values())


@dataclass(frozen=True)
class LanguageOutcome:
    language: str
    success: bool
    failure_kind: str | None = None
    message: str | None = None


@dataclass
class ExampleCoverage:
    name: str
    source: str
    outcomes: dict[str, LanguageOutcome] = field(default_factory=dict)


@dataclass(frozen=True)
class PipelineConfig:
    provider_name: str
    provider_version: str = ""
    languages: tuple[str, ...] = ()
    converter_command: tuple[str, ...] | None = None
    converter_url: str | None = None
    conversion_timeout_sec: float = 30.0
    conversion_attempts: int = 3
    conversion_concurrency: int | None = None
    resource_tokens: dict[str, str] = field(default_factory=dict)
    target_language: str = "nodejs"
    log_file: Path | None = None
    coverage_file: Path | None = None

    @property
    def effective_concurrency(self) -> int:
        if self.conversion_concurrency is not None:
            return self.conversion_concurrency
        return max(1, len(self.languages))


@dataclass
class NormalizedDocument:
    name: str
    title: str
    description: str
    arguments: dict[str, ArgumentEntry]
    attributes: dict[str, str]
    examples: str
    markdown: str
    diagnostics: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "title": self.title,
            "description": self.description,
            "arguments": {
                key: entry.to_dict() for key, entry in sorted(self.arguments.items())
            },
            "attributes": dict(sorted(self.attributes.items())),
            "examples": self.examples,
            "diagnostics": list(self.diagnostics),
        }
