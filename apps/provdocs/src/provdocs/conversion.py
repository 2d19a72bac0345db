"""Concurrent per-language example conversion.

Each target language is converted independently: one language failing,
timing out, or returning nothing never affects the others. Transient
converter failures are retried with tenacity.
"""

from __future__ import annotations

import asyncio
import functools
import logging
import time
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Protocol

from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from .constants import (
    DEFAULT_CONVERSION_ATTEMPTS,
    DEFAULT_CONVERSION_TIMEOUT_SEC,
    RETRY_BACKOFF_INITIAL_SEC,
    RETRY_BACKOFF_MAX_SEC,
)
from .coverage import CoverageTracker
from .errors import ConversionError, ConversionTimeoutError, TransientConversionError
from .logging import before_sleep_log_event, log_event, summarize_text
from .models import ConversionResult
from .snippets import conversions_to_string, order_languages
from .time_utils import elapsed_ms


class ExampleConverter(Protocol):
    """Converts one source example into one target language."""

    name: str

    def convert(self, source: str, example_name: str, language: str) -> str:
        """Return rendered code, or raise ConversionError."""
        ...


async def convert_example_async(
    source: str,
    example_name: str,
    *,
    converter: ExampleConverter,
    languages: Sequence[str],
    timeout_sec: float = DEFAULT_CONVERSION_TIMEOUT_SEC,
    attempts: int = DEFAULT_CONVERSION_ATTEMPTS,
    concurrency: Optional[int] = None,
    coverage: Optional[CoverageTracker] = None,
) -> ConversionResult:
    result = ConversionResult(example_name=example_name)
    ordered = order_languages(languages)
    if not ordered:
        return result

    if coverage is not None:
        coverage.found_example(example_name, source)

    fan_out = max(1, concurrency if concurrency is not None else len(ordered))
    semaphore = asyncio.Semaphore(fan_out)
    # One worker per language: a timed-out call keeps its thread, and the next
    # language must not queue behind it with its own timeout already running.
    executor = ThreadPoolExecutor(
        max_workers=len(ordered), thread_name_prefix="provdocs-convert"
    )
    log_event(
        "conversion_started",
        example=example_name,
        languages=ordered,
        concurrency=fan_out,
        timeout_sec=timeout_sec,
    )

    async def convert_one(language: str) -> tuple[str, Optional[str], Optional[str]]:
        started = time.perf_counter()
        failure_kind: Optional[str] = None
        try:
            async with semaphore:
                code = await _convert_with_retry(
                    executor,
                    converter=converter,
                    source=source,
                    example_name=example_name,
                    language=language,
                    timeout_sec=timeout_sec,
                    attempts=attempts,
                )
        except ConversionTimeoutError as exc:
            failure_kind, error = "timeout", exc
        except ConversionError as exc:
            failure_kind, error = "conversion_error", exc
        except Exception as exc:
            # A misbehaving converter must not take the other languages down.
            failure_kind, error = "unexpected_error", exc

        if failure_kind is not None:
            message = summarize_text(error) or type(error).__name__
            log_event(
                "conversion_failed",
                level=logging.WARNING,
                example=example_name,
                language=language,
                failure_kind=failure_kind,
                error_type=type(error).__name__,
                error=message,
                latency_ms=elapsed_ms(started),
            )
            if coverage is not None:
                coverage.record_failure(example_name, language, failure_kind, message)
            return language, None, f"{language}: {failure_kind}: {message}"

        if code.strip() == "":
            if coverage is not None:
                coverage.record_failure(
                    example_name, language, "empty_output", "converter returned no code"
                )
            return language, None, f"{language}: empty_output: converter returned no code"

        log_event(
            "conversion_succeeded",
            example=example_name,
            language=language,
            output_chars=len(code),
            latency_ms=elapsed_ms(started),
        )
        if coverage is not None:
            coverage.record_success(example_name, language)
        return language, code, None

    try:
        outcomes = await asyncio.gather(*(convert_one(language) for language in ordered))
    finally:
        executor.shutdown(wait=False, cancel_futures=True)

    for language, code, diagnostic in outcomes:
        if code is not None:
            result.code_by_language[language] = code
        else:
            result.failed_languages.append(language)
        if diagnostic is not None:
            result.diagnostics.append(diagnostic)
    return result


def convert_example(
    source: str,
    example_name: str,
    *,
    converter: ExampleConverter,
    languages: Sequence[str],
    timeout_sec: float = DEFAULT_CONVERSION_TIMEOUT_SEC,
    attempts: int = DEFAULT_CONVERSION_ATTEMPTS,
    concurrency: Optional[int] = None,
    coverage: Optional[CoverageTracker] = None,
) -> ConversionResult:
    """Synchronous wrapper around convert_example_async()."""
    return asyncio.run(
        convert_example_async(
            source,
            example_name,
            converter=converter,
            languages=languages,
            timeout_sec=timeout_sec,
            attempts=attempts,
            concurrency=concurrency,
            coverage=coverage,
        )
    )


def convert_hcl(
    source: str,
    example_name: str,
    *,
    converter: ExampleConverter,
    languages: Sequence[str],
    timeout_sec: float = DEFAULT_CONVERSION_TIMEOUT_SEC,
    attempts: int = DEFAULT_CONVERSION_ATTEMPTS,
    concurrency: Optional[int] = None,
    coverage: Optional[CoverageTracker] = None,
) -> tuple[str, str, Optional[ConversionError]]:
    """Convert one example and assemble its fenced code blocks.

    Returns ``(code_blocks, diagnostics, error)``. ``error`` is set only when
    no language produced usable code; partial failures show up in
    ``diagnostics`` alone.
    """
    result = convert_example(
        source,
        example_name,
        converter=converter,
        languages=languages,
        timeout_sec=timeout_sec,
        attempts=attempts,
        concurrency=concurrency,
        coverage=coverage,
    )
    code_blocks = conversions_to_string(result.code_by_language)
    diagnostics = "\n".join(result.diagnostics)
    error: Optional[ConversionError] = None
    if not result.succeeded:
        error = ConversionError(
            f"Example {example_name} could not be converted to any target language."
        )
    return code_blocks, diagnostics, error


async def _convert_with_retry(
    executor: ThreadPoolExecutor,
    *,
    converter: ExampleConverter,
    source: str,
    example_name: str,
    language: str,
    timeout_sec: float,
    attempts: int,
) -> str:
    loop = asyncio.get_running_loop()
    call = functools.partial(converter.convert, source, example_name, language)
    code = ""
    async for attempt in AsyncRetrying(
        retry=retry_if_exception_type(TransientConversionError),
        wait=wait_exponential_jitter(
            initial=RETRY_BACKOFF_INITIAL_SEC,
            max=RETRY_BACKOFF_MAX_SEC,
        ),
        stop=stop_after_attempt(max(1, attempts)),
        before_sleep=before_sleep_log_event(
            converter=getattr(converter, "name", type(converter).__name__),
            operation=f"convert:{language}",
        ),
        reraise=True,
    ):
        with attempt:
            try:
                code = await asyncio.wait_for(
                    loop.run_in_executor(executor, call), timeout=timeout_sec
                )
            except asyncio.TimeoutError as exc:
                raise ConversionTimeoutError(
                    f"Conversion to {language} timed out after {timeout_sec:g}s."
                ) from exc
    return code if code is not None else ""
