"""Preferred key order for structured log events."""

DEFAULT_EVENT_KEY_ORDER: list[str] = ["ts", "level", "logger"]

EVENT_KEY_ORDER: dict[str, list[str]] = {
    "document_normalized": [
        "ts",
        "level",
        "document",
        "source_file",
        "argument_count",
        "attribute_count",
        "example_count",
        "diagnostic_count",
        "elapsed_ms",
    ],
    "document_decoded": [
        "ts",
        "level",
        "source_file",
        "encoding",
    ],
    "conversion_started": [
        "ts",
        "level",
        "example",
        "languages",
        "concurrency",
        "timeout_sec",
    ],
    "conversion_succeeded": [
        "ts",
        "level",
        "example",
        "language",
        "output_chars",
        "latency_ms",
    ],
    "conversion_failed": [
        "ts",
        "level",
        "example",
        "language",
        "failure_kind",
        "error_type",
        "error",
        "latency_ms",
    ],
    "conversion_retry": [
        "ts",
        "level",
        "converter",
        "operation",
        "attempt",
        "sleep_sec",
        "result",
        "error_type",
        "error",
    ],
    "coverage_exported": [
        "ts",
        "level",
        "coverage_file",
        "example_count",
    ],
    "output_written": [
        "ts",
        "level",
        "document",
        "markdown_file",
        "model_file",
    ],
    "cli_error": [
        "ts",
        "level",
        "error_type",
        "error",
    ],
}

LOG_PATH_FIELDS = frozenset(
    {
        "source_file",
        "markdown_file",
        "model_file",
        "coverage_file",
        "log_file",
        "config_file",
    }
)
