"""Shared fixtures: in-memory credentials, a fake Artemis server and a recording repository."""

from __future__ import annotations

import logging

import pytest

from artemis_cli.credentials import PASSWORD_KEY, SESSION_TOKEN_KEY, USERNAME_KEY
from artemis_cli.errors import RepositoryError
from fakes import FakeArtemis, MemoryCredentialStore


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep tests away from the user's config, .env files and overrides."""
    monkeypatch.chdir(tmp_path)
    for var in ("ARTEMIS_BASE_URL", "ARTEMIS_USERNAME", "ARTEMIS_PASSWORD"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def server() -> FakeArtemis:
    return FakeArtemis()


@pytest.fixture
def store() -> MemoryCredentialStore:
    return MemoryCredentialStore(**{USERNAME_KEY: "student", PASSWORD_KEY: "secret"})


@pytest.fixture
def logged_in_store(server: FakeArtemis) -> MemoryCredentialStore:
    """Store with a session token the server still accepts."""
    server.valid_tokens.add("cached-token")
    return MemoryCredentialStore(
        **{
            USERNAME_KEY: "student",
            PASSWORD_KEY: "secret",
            SESSION_TOKEN_KEY: "cached-token",
        }
    )


@pytest.fixture
def events(monkeypatch) -> list[tuple]:
    """Record what the runner does with local repositories."""
    recorded: list[tuple] = []

    class RecordingRepository:
        def __init__(self, path):
            self.path = path

        @classmethod
        def clone(cls, uri, path):
            recorded.append(("clone", uri, path))
            return cls(path)

        @classmethod
        def open(cls, path):
            if not path.exists():
                raise RepositoryError(f"{path} is not a git repository")
            recorded.append(("open", path))
            return cls(path)

        def commit_and_push(self):
            recorded.append(("push", self.path))
            return "0" * 40

    monkeypatch.setattr("artemis_cli.main.TaskRepository", RecordingRepository)
    return recorded


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop the handlers setup_logging installed on the root logger."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if type(handler) in (logging.StreamHandler, logging.FileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
