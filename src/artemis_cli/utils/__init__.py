"""
Utility module.

Common helpers for logging and local file handling.
"""

from .logging import setup_logging, get_logger, verbosity_to_level
from .files import ensure_dir, task_directory, is_empty_dir

__all__ = [
    "setup_logging",
    "get_logger",
    "verbosity_to_level",
    "ensure_dir",
    "task_directory",
    "is_empty_dir",
]
