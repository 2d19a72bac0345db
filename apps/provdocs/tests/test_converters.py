from __future__ import annotations

import json
import sys
from pathlib import Path

import httpx
import pytest

from provdocs.converters import CommandConverter, HttpConverter, build_converter
from provdocs.errors import (
    ConfigError,
    ConversionError,
    ConversionTimeoutError,
    TransientConversionError,
)
from provdocs.models import PipelineConfig

_URL = "https://converter.example.com/convert"


def _python_command(code: str) -> list[str]:
    return [sys.executable, "-c", code]


def test_command_converter_pipes_source_through_stdin() -> None:
    converter = CommandConverter(
        _python_command("import sys; sys.stdout.write(sys.argv[1] + ':' + sys.stdin.read())")
        + ["{language}"]
    )

    assert converter.convert("resource {}", "widget#0", "python") == "python:resource {}"


def test_command_converter_substitutes_placeholders() -> None:
    converter = CommandConverter(["convert", "--lang={language}", "--name", "{example}"])
    assert converter.build_argv("widget#1", "go") == ["convert", "--lang=go", "--name", "widget#1"]


def test_command_converter_reports_nonzero_exit() -> None:
    converter = CommandConverter(
        _python_command("import sys; sys.stderr.write('unsupported block'); sys.exit(3)")
    )

    with pytest.raises(ConversionError, match="unsupported block"):
        converter.convert("src", "widget#0", "go")


def test_command_converter_reports_missing_executable(tmp_path: Path) -> None:
    converter = CommandConverter([str(tmp_path / "missing-converter")])

    with pytest.raises(ConversionError, match="Failed to run converter command"):
        converter.convert("src", "widget#0", "go")


def test_command_converter_times_out() -> None:
    converter = CommandConverter(_python_command("import time; time.sleep(5)"), timeout=0.2)

    with pytest.raises(ConversionTimeoutError):
        converter.convert("src", "widget#0", "go")


def test_command_converter_requires_argv() -> None:
    with pytest.raises(ConfigError):
        CommandConverter([])


def _http_converter(handler) -> HttpConverter:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return HttpConverter(_URL, timeout=5, client=client)


def test_http_converter_posts_example_and_returns_code() -> None:
    seen: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"code": "x = 1"})

    assert _http_converter(handler).convert("src", "widget#0", "python") == "x = 1"
    assert seen == {
        "url": _URL,
        "body": {"source": "src", "example": "widget#0", "language": "python"},
    }


def test_http_converter_missing_code_is_empty() -> None:
    converter = _http_converter(lambda request: httpx.Response(200, json={}))
    assert converter.convert("src", "widget#0", "python") == ""


@pytest.mark.parametrize("status_code", [429, 503])
def test_http_converter_marks_retryable_statuses_transient(status_code: int) -> None:
    converter = _http_converter(lambda request: httpx.Response(status_code))

    with pytest.raises(TransientConversionError):
        converter.convert("src", "widget#0", "python")


def test_http_converter_rejection_is_permanent() -> None:
    converter = _http_converter(lambda request: httpx.Response(422, text="bad hcl"))

    with pytest.raises(ConversionError, match="HTTP 422") as exc_info:
        converter.convert("src", "widget#0", "python")
    assert not isinstance(exc_info.value, TransientConversionError)


def test_http_converter_transport_failure_is_transient() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransientConversionError, match="unreachable"):
        _http_converter(handler).convert("src", "widget#0", "python")


def test_http_converter_rejects_invalid_json() -> None:
    converter = _http_converter(lambda request: httpx.Response(200, text="not json"))

    with pytest.raises(ConversionError, match="invalid JSON"):
        converter.convert("src", "widget#0", "python")


def test_http_converter_rejects_non_string_code() -> None:
    converter = _http_converter(lambda request: httpx.Response(200, json={"code": 1}))

    with pytest.raises(ConversionError, match="non-string"):
        converter.convert("src", "widget#0", "python")


def test_http_converter_requires_http_url() -> None:
    with pytest.raises(ConfigError):
        HttpConverter("ftp://converter.example.com")


def test_build_converter_follows_config() -> None:
    assert build_converter(PipelineConfig(provider_name="aws")) is None

    command = build_converter(
        PipelineConfig(provider_name="aws", converter_command=("convert", "{language}"))
    )
    assert isinstance(command, CommandConverter)
    assert command.argv == ("convert", "{language}")

    http = build_converter(
        PipelineConfig(provider_name="aws", converter_url=_URL, conversion_timeout_sec=2.0)
    )
    assert isinstance(http, HttpConverter)
    assert http.timeout == 2.0
