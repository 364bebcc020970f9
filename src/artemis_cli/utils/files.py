"""File system helpers."""

from pathlib import Path

TASK_DIR_PREFIX = "artemis-task"


def ensure_dir(path: Path) -> Path:
    """Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path to ensure exists

    Returns:
        The path (for chaining)
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def task_directory(task_id: int, base_dir: Path | None = None) -> Path:
    """Local working tree location for an exercise.

    The directory is named after the task id so that several exercises can
    be checked out side by side.
    """
    return (base_dir or Path.cwd()) / f"{TASK_DIR_PREFIX}-{task_id}"


def is_empty_dir(path: Path) -> bool:
    """True if ``path`` does not exist or is a directory without entries."""
    if not path.exists():
        return True
    return path.is_dir() and not any(path.iterdir())
