"""Shared fixtures for provdocs tests."""

from __future__ import annotations

import pytest

from provdocs.models import PipelineConfig

WIDGET_DOC = "\n".join(
    (
        "---",
        'layout: "aws"',
        'page_title: "AWS: aws_widget"',
        "---",
        "",
        "# Resource: aws_widget",
        "",
        "Provides a widget. See the [widget guide][1].",
        "",
        "## Example Usage - Basic",
        "",
        "```hcl",
        'resource "aws_widget" "example" {',
        '  name = "example"',
        "}",
        "```",
        "",
        "## Argument Reference",
        "",
        "* `name` - (Required) The widget name.",
        "* `settings` - (Optional) A `settings` block.",
        "",
        "The `settings` object supports the following:",
        "",
        "* `max_size` - (Optional) Maximum size, see `size_limit`.",
        "",
        "## Attributes Reference",
        "",
        "* `arn` - The ARN, see [`aws_widget`](/docs/providers/aws/r/widget.html).",
        "",
        "[1]: https://example.com/widgets",
        "",
    )
)


@pytest.fixture
def widget_doc() -> str:
    return WIDGET_DOC


@pytest.fixture
def pipeline_config() -> PipelineConfig:
    return PipelineConfig(
        provider_name="aws",
        provider_version="5.0.0",
        languages=("python", "typescript"),
        conversion_attempts=1,
    )
