"""Root logger setup for the CLI.

Levels (inclusive):
- ERROR: failed cycles (fetch, load, save)
- WARNING: skipped PR lookups and failed notifications, plus the above
- INFO: approvals and one line per completed poll, plus the above
- DEBUG: subprocess calls, store writes and everything above
"""

from __future__ import annotations

import logging

from rich.logging import RichHandler

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


def resolve_level(level: str | None) -> int:
    """Map a level name to its logging constant. Unknown names fall back to INFO."""
    return LEVELS.get((level or "").upper().strip(), logging.INFO)


def configure_logging(level: str | None) -> None:
    logging.basicConfig(
        level=resolve_level(level),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False, rich_tracebacks=True)],
        force=True,
    )
    # urllib3 logs every connection at DEBUG; keep it out of -l debug output.
    logging.getLogger("urllib3").setLevel(logging.WARNING)
