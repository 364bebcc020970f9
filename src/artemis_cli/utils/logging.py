"""Logging utilities for the Artemis CLI."""

import logging
import sys
from pathlib import Path

# Used for verbosity 0: nothing is ever logged at this level.
SILENT = logging.CRITICAL + 10

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def verbosity_to_level(verbosity: int) -> int:
    """Map the number of ``-v`` flags to a logging level.

    Args:
        verbosity: How often ``-v`` was given on the command line

    Returns:
        Logging level (0 silences logging, 4 or more enables debug output)
    """
    if verbosity <= 0:
        return SILENT
    levels = [logging.ERROR, logging.WARNING, logging.INFO]
    if verbosity <= len(levels):
        return levels[verbosity - 1]
    return logging.DEBUG


def setup_logging(level: int = logging.INFO, log_file: Path | None = None) -> None:
    """Configure logging for the application.

    Args:
        level: Logging level (e.g., logging.INFO, logging.DEBUG)
        log_file: Optional file that receives the same records as stdout
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)
