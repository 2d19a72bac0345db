"""Concrete example converters backed by an external command or service."""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from typing import Optional

import httpx

from .constants import DEFAULT_CONVERSION_TIMEOUT_SEC
from .errors import (
    ConfigError,
    ConversionError,
    ConversionTimeoutError,
    TransientConversionError,
)
from .logging import summarize_text
from .models import PipelineConfig

_TRANSIENT_STATUS_CODES = frozenset({408, 425, 429, 500, 502, 503, 504})


class CommandConverter:
    """Runs an external converter once per language.

    The example source is written to stdin and the rendered code is read from
    stdout. ``{language}`` and ``{example}`` in the argv are substituted.
    """

    name = "command"

    def __init__(
        self,
        argv: Sequence[str],
        timeout: float = DEFAULT_CONVERSION_TIMEOUT_SEC,
    ) -> None:
        if not argv:
            raise ConfigError("converter_command must contain at least one argument")
        self.argv = tuple(argv)
        self.timeout = timeout

    def build_argv(self, example_name: str, language: str) -> list[str]:
        return [
            part.replace("{language}", language).replace("{example}", example_name)
            for part in self.argv
        ]

    def convert(self, source: str, example_name: str, language: str) -> str:
        argv = self.build_argv(example_name, language)
        try:
            completed = subprocess.run(
                argv,
                input=source,
                capture_output=True,
                text=True,
                encoding="utf-8",
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise ConversionTimeoutError(
                f"Converter command timed out after {self.timeout:g}s: {argv[0]}"
            ) from exc
        except OSError as exc:
            raise ConversionError(f"Failed to run converter command: {argv[0]}") from exc

        if completed.returncode != 0:
            detail = summarize_text(completed.stderr) or f"exit code {completed.returncode}"
            raise ConversionError(f"Converter failed for {language}: {detail}")
        return completed.stdout


class HttpConverter:
    """Posts examples to a conversion service.

    Request body: ``{"source", "example", "language"}``. The response is a
    JSON object with a ``code`` string. Rate limits, server errors and
    transport failures are reported as transient so the caller may retry.
    """

    name = "http"

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_CONVERSION_TIMEOUT_SEC,
        client: Optional[httpx.Client] = None,
    ) -> None:
        if not url.startswith(("http://", "https://")):
            raise ConfigError(f"converter_url must be an http(s) URL: {url}")
        self.url = url
        self.timeout = timeout
        self._client = client

    def convert(self, source: str, example_name: str, language: str) -> str:
        payload = {"source": source, "example": example_name, "language": language}
        try:
            if self._client is not None:
                response = self._client.post(self.url, json=payload, timeout=self.timeout)
            else:
                with httpx.Client(timeout=httpx.Timeout(self.timeout)) as client:
                    response = client.post(self.url, json=payload)
        except httpx.TransportError as exc:
            raise TransientConversionError(
                f"Conversion service unreachable: {summarize_text(exc)}"
            ) from exc

        if response.status_code in _TRANSIENT_STATUS_CODES:
            raise TransientConversionError(
                f"Conversion service returned HTTP {response.status_code} for {language}"
            )
        if response.status_code >= 400:
            raise ConversionError(
                f"Conversion service rejected {language} "
                f"(HTTP {response.status_code}): {summarize_text(response.text)}"
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise ConversionError("Conversion service returned invalid JSON") from exc

        code = body.get("code") if isinstance(body, dict) else None
        if code is None:
            return ""
        if not isinstance(code, str):
            raise ConversionError("Conversion service returned a non-string 'code'")
        return code


def build_converter(config: PipelineConfig) -> CommandConverter | HttpConverter | None:
    """Instantiate the converter the profile asks for, if any."""
    if config.converter_command is not None:
        return CommandConverter(config.converter_command, timeout=config.conversion_timeout_sec)
    if config.converter_url is not None:
        return HttpConverter(config.converter_url, timeout=config.conversion_timeout_sec)
    return None
