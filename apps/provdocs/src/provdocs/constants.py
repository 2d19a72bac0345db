"""Literal constants used by provdocs."""

MARKDOWN_SUFFIX = ".md"
MODEL_SUFFIX = ".json"

CODE_FENCE = "```"

SECTION_MARKER = "## "
SUBSECTION_MARKER = "### "
EXAMPLE_TITLE_MARKER = "#### "

EXAMPLE_USAGE_HEADING = "## Example Usage"

# Fenced block tags that carry convertible source examples.
SOURCE_EXAMPLE_TAGS = frozenset({"hcl", "terraform", "tf"})

# Fixed precedence of rendered example languages. Anything else follows in
# sorted order.
LANGUAGE_PRIORITY = (
    "typescript",
    "python",
    "csharp",
    "go",
    "java",
    "pcl",
    "yaml",
)

DEFAULT_TARGET_LANGUAGE = "nodejs"
DEFAULT_CONVERSION_TIMEOUT_SEC = 30.0
DEFAULT_CONVERSION_ATTEMPTS = 3
RETRY_BACKOFF_INITIAL_SEC = 0.5
RETRY_BACKOFF_MAX_SEC = 8.0

TERRAFORM_DOCS_BASE_URL = "https://www.terraform.io"
LEGACY_ALIAS_SUFFIX = "_legacy"

ERROR_PREFIX = "ERROR:"
WARNING_PREFIX = "WARNING:"
