"""
Repository module.

Clone, commit and push of the per-student exercise repositories.
"""

from .git import TaskRepository, COMMIT_MESSAGE

__all__ = ["TaskRepository", "COMMIT_MESSAGE"]
