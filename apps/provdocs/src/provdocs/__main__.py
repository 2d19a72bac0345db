"""provdocs executable module.

Error handling lives in cli.main(); this module only delegates to it for
`python -m provdocs`.
"""

from __future__ import annotations

import sys

from .cli import main


if __name__ == "__main__":
    sys.exit(main())
