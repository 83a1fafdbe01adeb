"""Logging configuration."""

import logging
import os

from rich.logging import RichHandler

LOG_LEVEL_ENV = "SERIALCONSOLE_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"


def setup_logging(level: int | str = DEFAULT_LOG_LEVEL) -> None:
    """Route log records through rich."""
    logging.basicConfig(
        level=level,
        format="%(name)s: %(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


def setup_logging_from_env(verbose: bool = False) -> None:
    """Configure logging from SERIALCONSOLE_LOG_LEVEL.

    Args:
        verbose: Use INFO when the environment does not say otherwise.
    """
    default = "INFO" if verbose else DEFAULT_LOG_LEVEL
    level = os.environ.get(LOG_LEVEL_ENV, default).upper()
    if level not in logging.getLevelNamesMapping():
        level = default
    setup_logging(level)
