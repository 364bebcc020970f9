"""
Command runner.

Sequences the session, the API wrapper and the local repositories for each
CLI subcommand. One runner handles exactly one command per invocation.
"""

import time
from enum import Enum
from pathlib import Path
from typing import Callable

import httpx

from .artemis.api import ArtemisAPI
from .artemis.models import Course, Feedback, Task
from .artemis.session import ArtemisSession
from .config.loader import ConfigLoader
from .config.models import ArtemisConfig
from .credentials import CredentialStore, PASSWORD_KEY, SESSION_TOKEN_KEY, USERNAME_KEY
from .errors import RepositoryError
from .repository.git import TaskRepository
from .utils.files import is_empty_dir, task_directory
from .utils.logging import get_logger

logger = get_logger(__name__)


class RunnerState(Enum):
    IDLE = "idle"
    AUTHENTICATING = "authenticating"
    RUNNING = "running"


class CommandRunner:
    """Runs the CLI subcommands."""

    def __init__(
        self,
        config: ArtemisConfig,
        credentials: CredentialStore,
        config_loader: ConfigLoader | None = None,
        work_dir: Path | None = None,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the runner.

        Args:
            config: Loaded configuration
            credentials: Store for login data and the session token
            config_loader: Loader used to persist configuration changes
            work_dir: Directory exercises are cloned into (default: cwd)
            transport: Custom httpx transport (used by tests)
            sleep: Function used to wait for build results
        """
        self.config = config
        self.credentials = credentials
        self.config_loader = config_loader or ConfigLoader()
        self.work_dir = work_dir
        self.state = RunnerState.IDLE
        self._transport = transport
        self._sleep = sleep
        self._session: ArtemisSession | None = None
        self._api: ArtemisAPI | None = None

    @property
    def api(self) -> ArtemisAPI:
        """Get the API client, logging in on first use."""
        if self._api is None:
            self.state = RunnerState.AUTHENTICATING
            logger.debug(f"Connecting to {self.config.base_url}")
            self._session = ArtemisSession(
                self.config.base_url,
                self.credentials,
                timeout=self.config.timeout,
                transport=self._transport,
            )
            self._api = ArtemisAPI(self._session, sleep=self._sleep)
        self.state = RunnerState.RUNNING
        return self._api

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None
            self._api = None
        self.state = RunnerState.IDLE

    def __enter__(self) -> "CommandRunner":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def list_courses(self) -> list[Course]:
        return self.api.get_courses()

    def list_tasks(self, course_id: int) -> list[Task]:
        return self.api.get_course(course_id).tasks

    def start_task(self, task_id: int) -> Path:
        """Start an exercise and clone its repository.

        Returns:
            Path of the local working tree
        """
        path = task_directory(task_id, self.work_dir)
        if not is_empty_dir(path):
            raise RepositoryError(
                f"{path} already exists, remove it or submit from there instead"
            )
        repo_uri = self.api.start_exercise(task_id)
        repo = TaskRepository.clone(repo_uri, path)
        repo.commit_and_push()
        logger.info(f"Task {task_id} is ready in {path}")
        return path

    def submit(self, task_id: int, path: Path | None = None) -> Feedback:
        """Commit and push the working tree, then wait for its result.

        Args:
            task_id: The exercise ID
            path: Working tree to submit (default: the one start-task created)
        """
        repo = TaskRepository.open(path or task_directory(task_id, self.work_dir))

        latest = self.api.get_exercise_details(task_id).latest_result
        previous_result_id = latest.id if latest is not None else None

        repo.commit_and_push()
        logger.info(f"Submitted task {task_id}, waiting for results...")
        return self.api.wait_for_new_result(task_id, previous_result_id, self.config.poll)

    def fetch(self, task_id: int) -> Feedback:
        """Get the feedback of the latest result without submitting."""
        return self.api.get_latest_feedback(task_id)

    def configure(
        self,
        base_url: str | None = None,
        username: str | None = None,
        password: str | None = None,
    ) -> None:
        """Store configuration and login data.

        Any change drops the stored session so the next command logs in
        again against the configured server with the configured credentials.
        """
        if base_url is not None:
            self.config.base_url = base_url.rstrip("/")
            path = self.config_loader.save(self.config)
            logger.info(f"Base URL set to {self.config.base_url} in {path}")
        if username is not None:
            self.credentials.set(USERNAME_KEY, username)
            logger.info("Username stored")
        if password is not None:
            self.credentials.set(PASSWORD_KEY, password)
            logger.info("Password stored")
        if base_url is not None or username is not None or password is not None:
            self.credentials.delete(SESSION_TOKEN_KEY)
