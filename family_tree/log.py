"""Logging setup shared by the CLI and the web app."""

import logging

from rich.logging import RichHandler


def configure_logging(level: str = "INFO") -> None:
    """Route stdlib logging through rich.

    Args:
        level: Root log level name (DEBUG, INFO, WARNING, ...)
    """
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )
