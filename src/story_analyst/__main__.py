"""Package entry point.

Preferred invocation is via the installed console script:

    story-analyst ...

For convenience we also support:

    python -m story_analyst ...
"""

from __future__ import annotations

from .cli import app


def main() -> None:
    """Entry point used by `python -m story_analyst`."""

    app()


if __name__ == "__main__":
    main()
