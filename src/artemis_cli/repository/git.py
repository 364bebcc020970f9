"""Local git working trees of Artemis exercises."""

import os
from pathlib import Path

from git import Actor, PushInfo, Repo
from git.exc import GitCommandError, GitError

from ..errors import RepositoryError
from ..utils.files import is_empty_dir
from ..utils.logging import get_logger

logger = get_logger(__name__)

COMMIT_MESSAGE = "automated commit..."
REMOTE_NAME = "origin"

# Authenticate through the SSH agent and fail instead of prompting
DEFAULT_SSH_COMMAND = "ssh -o BatchMode=yes"


def _git_env() -> dict[str, str]:
    return {"GIT_SSH_COMMAND": os.environ.get("GIT_SSH_COMMAND", DEFAULT_SSH_COMMAND)}


class TaskRepository:
    """A cloned student repository."""

    def __init__(self, repo: Repo):
        self.repo = repo
        self.repo.git.update_environment(**_git_env())

    @property
    def path(self) -> Path:
        return Path(self.repo.working_tree_dir)

    @classmethod
    def clone(cls, uri: str, path: Path) -> "TaskRepository":
        """Clone a remote repository.

        Args:
            uri: Clone URI (usually ssh://git@...)
            path: Target directory; must not exist or be empty

        Raises:
            RepositoryError: If the target is in use or cloning fails
        """
        if not is_empty_dir(path):
            raise RepositoryError(
                f"{path} already exists, remove it or submit from there instead"
            )

        logger.info(f"Start cloning {uri} into {path}...")
        try:
            repo = Repo.clone_from(uri, path, env=_git_env())
        except GitCommandError as e:
            stderr = (e.stderr or "").strip()
            logger.error(f"Failed to clone repository: {stderr}")
            if "Permission denied" in stderr:
                logger.error("SSH error - check your SSH key and that ssh-agent is running")
            raise RepositoryError(f"Failed to clone {uri}: {stderr}") from e
        except GitError as e:
            raise RepositoryError(f"Failed to clone {uri}: {e}") from e
        return cls(repo)

    @classmethod
    def open(cls, path: Path) -> "TaskRepository":
        """Open an existing working tree.

        Raises:
            RepositoryError: If ``path`` is not a git repository
        """
        try:
            return cls(Repo(path))
        except GitError as e:
            raise RepositoryError(f"{path} is not a git repository: {e}") from e

    def _identity(self) -> Actor:
        reader = self.repo.config_reader()
        name = reader.get_value("user", "name", default="")
        email = reader.get_value("user", "email", default="")
        if not name:
            raise RepositoryError(
                "No username for git configured. "
                "Run git config --global user.name 'YourName'"
            )
        if not email:
            raise RepositoryError(
                "No email for git configured. "
                "Run git config --global user.email 'YourEmail'"
            )
        return Actor(str(name), str(email))

    def commit(self, message: str = COMMIT_MESSAGE) -> str:
        """Stage every change in the working tree and commit it.

        A commit is created even if nothing changed.

        Returns:
            Hex SHA of the new commit
        """
        actor = self._identity()
        try:
            logger.debug("Indexing files...")
            self.repo.git.add(all=True)
            commit = self.repo.index.commit(message, author=actor, committer=actor)
        except GitError as e:
            raise RepositoryError(f"Commit failed: {e}") from e
        logger.info(f"Successfully committed {commit.hexsha}")
        return commit.hexsha

    def push(self) -> None:
        """Push the current branch to origin.

        Raises:
            RepositoryError: If there is no current branch or the push is
                rejected
        """
        try:
            branch = self.repo.active_branch.name
        except TypeError as e:
            raise RepositoryError("HEAD is detached, check out a branch first") from e

        try:
            remote = self.repo.remote(REMOTE_NAME)
        except ValueError as e:
            raise RepositoryError(f"Repository has no remote '{REMOTE_NAME}'") from e

        logger.debug(f"Pushing {branch} to {REMOTE_NAME}...")
        try:
            infos = remote.push(refspec=f"refs/heads/{branch}:refs/heads/{branch}")
        except GitError as e:
            raise RepositoryError(f"Push failed: {e}") from e

        for info in infos:
            if info.flags & (PushInfo.ERROR | PushInfo.REJECTED | PushInfo.REMOTE_REJECTED):
                raise RepositoryError(f"Push of {branch} rejected: {info.summary.strip()}")
        logger.info("Successfully pushed to remote")

    def commit_and_push(self, message: str = COMMIT_MESSAGE) -> str:
        sha = self.commit(message)
        self.push()
        return sha
