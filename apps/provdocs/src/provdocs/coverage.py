"""Example conversion coverage tracking and reporting."""

from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Any

from .errors import DocumentWriteError
from .logging import log_event
from .models import ExampleCoverage, LanguageOutcome


class CoverageTracker:
    """Records every example found and how each language conversion went.

    Per-language results arrive from concurrent conversions, so all mutation
    goes through one lock.
    """

    def __init__(self, provider_name: str, provider_version: str = "") -> None:
        self.provider_name = provider_name
        self.provider_version = provider_version
        self._examples: dict[str, ExampleCoverage] = {}
        self._lock = threading.Lock()

    @property
    def examples(self) -> dict[str, ExampleCoverage]:
        with self._lock:
            return dict(self._examples)

    def found_example(self, name: str, source: str) -> None:
        with self._lock:
            if name not in self._examples:
                self._examples[name] = ExampleCoverage(name=name, source=source)

    def record_success(self, name: str, language: str) -> None:
        self._record(name, LanguageOutcome(language=language, success=True))

    def record_failure(
        self, name: str, language: str, failure_kind: str, message: str
    ) -> None:
        self._record(
            name,
            LanguageOutcome(
                language=language,
                success=False,
                failure_kind=failure_kind,
                message=message,
            ),
        )

    def _record(self, name: str, outcome: LanguageOutcome) -> None:
        with self._lock:
            example = self._examples.get(name)
            if example is None:
                example = ExampleCoverage(name=name, source="")
                self._examples[name] = example
            example.outcomes[outcome.language] = outcome

    def summary(self) -> dict[str, Any]:
        languages: dict[str, dict[str, int]] = {}
        failure_kinds: dict[str, int] = {}
        with self._lock:
            examples = list(self._examples.values())

        for example in examples:
            for outcome in example.outcomes.values():
                counts = languages.setdefault(
                    outcome.language, {"succeeded": 0, "failed": 0}
                )
                if outcome.success:
                    counts["succeeded"] += 1
                else:
                    counts["failed"] += 1
                    kind = outcome.failure_kind or "unknown"
                    failure_kinds[kind] = failure_kinds.get(kind, 0) + 1

        fully_converted = sum(
            1
            for example in examples
            if example.outcomes
            and all(outcome.success for outcome in example.outcomes.values())
        )
        return {
            "provider": self.provider_name,
            "version": self.provider_version,
            "example_count": len(examples),
            "fully_converted_count": fully_converted,
            "languages": dict(sorted(languages.items())),
            "failure_kinds": dict(sorted(failure_kinds.items())),
        }

    def export_json(self, path: Path) -> None:
        with self._lock:
            examples = sorted(self._examples.values(), key=lambda e: e.name)

        payload = {
            "summary": self.summary(),
            "examples": [
                {
                    "name": example.name,
                    "source": example.source,
                    "outcomes": {
                        language: {
                            "success": outcome.success,
                            "failure_kind": outcome.failure_kind,
                            "message": outcome.message,
                        }
                        for language, outcome in sorted(example.outcomes.items())
                    },
                }
                for example in examples
            ],
        }
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(
                f"{json.dumps(payload, ensure_ascii=False, indent=2)}\n",
                encoding="utf-8",
            )
        except OSError as exc:
            raise DocumentWriteError(f"Failed to write coverage report: {path}") from exc

        log_event("coverage_exported", coverage_file=path, example_count=len(examples))
