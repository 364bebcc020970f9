"""Tests for the keyring-backed credential store."""

from __future__ import annotations

import keyring
import pytest
from keyring.backend import KeyringBackend
from keyring.errors import KeyringError, PasswordDeleteError

from artemis_cli.credentials import (
    EnvironmentCredentialStore,
    KeyringCredentialStore,
    PASSWORD_KEY,
    SESSION_TOKEN_KEY,
    USERNAME_KEY,
)
from artemis_cli.errors import CredentialError
from fakes import MemoryCredentialStore


class DictKeyring(KeyringBackend):
    """Keyring backend holding passwords in memory."""

    priority = 1

    def __init__(self):
        super().__init__()
        self.passwords: dict[tuple[str, str], str] = {}

    def get_password(self, service, username):
        return self.passwords.get((service, username))

    def set_password(self, service, username, password):
        self.passwords[(service, username)] = password

    def delete_password(self, service, username):
        if (service, username) not in self.passwords:
            raise PasswordDeleteError("not found")
        del self.passwords[(service, username)]


class BrokenKeyring(DictKeyring):
    def get_password(self, service, username):
        raise KeyringError("locked")


@pytest.fixture
def backend():
    previous = keyring.get_keyring()
    backend = DictKeyring()
    keyring.set_keyring(backend)
    yield backend
    keyring.set_keyring(previous)


def test_keyring_store_round_trip(backend):
    store = KeyringCredentialStore()

    store.set(SESSION_TOKEN_KEY, "abc")

    assert store.get(SESSION_TOKEN_KEY) == "abc"
    assert backend.passwords == {("artemiscli", "jwt-token"): "abc"}


def test_keyring_store_missing_entry(backend):
    assert KeyringCredentialStore().get(USERNAME_KEY) is None


def test_deleting_a_missing_entry_is_a_no_op(backend):
    store = KeyringCredentialStore()
    store.set(SESSION_TOKEN_KEY, "abc")

    store.delete(SESSION_TOKEN_KEY)
    store.delete(SESSION_TOKEN_KEY)

    assert store.get(SESSION_TOKEN_KEY) is None


def test_keyring_failure_is_a_credential_error():
    previous = keyring.get_keyring()
    keyring.set_keyring(BrokenKeyring())
    try:
        with pytest.raises(CredentialError, match="locked"):
            KeyringCredentialStore().get(PASSWORD_KEY)
    finally:
        keyring.set_keyring(previous)


def test_environment_overrides_login_data(monkeypatch):
    inner = MemoryCredentialStore(username="stored", password="stored-pw")
    store = EnvironmentCredentialStore(inner)
    monkeypatch.setenv("ARTEMIS_USERNAME", "from-env")

    assert store.get(USERNAME_KEY) == "from-env"
    assert store.get(PASSWORD_KEY) == "stored-pw"


def test_writes_go_to_the_wrapped_store():
    inner = MemoryCredentialStore(**{SESSION_TOKEN_KEY: "token"})
    store = EnvironmentCredentialStore(inner)

    store.set(USERNAME_KEY, "new")
    store.delete(SESSION_TOKEN_KEY)

    assert inner.entries == {USERNAME_KEY: "new"}
