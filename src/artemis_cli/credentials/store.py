"""Secret storage for the login data and the session token."""

import os
from typing import Protocol

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

from ..errors import CredentialError
from ..utils.logging import get_logger

logger = get_logger(__name__)

SERVICE_NAME = "artemiscli"

USERNAME_KEY = "username"
PASSWORD_KEY = "password"
SESSION_TOKEN_KEY = "jwt-token"


class CredentialStore(Protocol):
    """Key/value secret storage."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class KeyringCredentialStore:
    """Stores secrets in the operating system keyring."""

    def __init__(self, service: str = SERVICE_NAME):
        self.service = service

    def get(self, key: str) -> str | None:
        try:
            return keyring.get_password(self.service, key)
        except KeyringError as e:
            raise CredentialError(f"Can't read '{key}' from the keyring: {e}") from e

    def set(self, key: str, value: str) -> None:
        try:
            keyring.set_password(self.service, key, value)
        except KeyringError as e:
            raise CredentialError(f"Can't write '{key}' to the keyring: {e}") from e
        logger.debug(f"Stored {key} in keyring service {self.service}")

    def delete(self, key: str) -> None:
        try:
            keyring.delete_password(self.service, key)
        except PasswordDeleteError:
            logger.debug(f"No {key} stored, nothing to delete")
        except KeyringError as e:
            raise CredentialError(f"Can't delete '{key}' from the keyring: {e}") from e


class EnvironmentCredentialStore:
    """Lets environment variables override the login data of another store.

    ``ARTEMIS_USERNAME`` and ``ARTEMIS_PASSWORD`` take precedence over the
    wrapped store on reads. Writes and deletes always go to the wrapped store.
    """

    ENV_VARS = {
        USERNAME_KEY: "ARTEMIS_USERNAME",
        PASSWORD_KEY: "ARTEMIS_PASSWORD",
    }

    def __init__(self, inner: CredentialStore):
        self.inner = inner

    def get(self, key: str) -> str | None:
        env_var = self.ENV_VARS.get(key)
        if env_var and os.environ.get(env_var):
            return os.environ[env_var]
        return self.inner.get(key)

    def set(self, key: str, value: str) -> None:
        self.inner.set(key, value)

    def delete(self, key: str) -> None:
        self.inner.delete(key)


def create_credential_store() -> CredentialStore:
    """Default store: the OS keyring with environment overrides."""
    return EnvironmentCredentialStore(KeyringCredentialStore())
