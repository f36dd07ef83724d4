"""Logging setup for the CLI (Rich handler on stderr)."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

from updvcspins.config import LogLevel

_VERBOSITY_LEVELS = {1: "INFO", 2: "DEBUG"}


def level_for_verbosity(verbose: int, configured: LogLevel = "WARNING") -> str:
    """Map a ``-v`` count to a log level name; 0 keeps the configured level."""
    if verbose <= 0:
        return configured
    return _VERBOSITY_LEVELS.get(verbose, "DEBUG")


def configure_logging(verbose: int = 0, configured: LogLevel = "WARNING") -> None:
    """Attach a single RichHandler to the ``updvcspins`` logger."""
    logger = logging.getLogger("updvcspins")
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(handler)
    logger.setLevel(level_for_verbosity(verbose, configured))
