"""
Credential module.

Opaque key/value storage for the username, password and session token.
"""

from .store import (
    CredentialStore,
    KeyringCredentialStore,
    EnvironmentCredentialStore,
    create_credential_store,
    SERVICE_NAME,
    USERNAME_KEY,
    PASSWORD_KEY,
    SESSION_TOKEN_KEY,
)

__all__ = [
    "CredentialStore",
    "KeyringCredentialStore",
    "EnvironmentCredentialStore",
    "create_credential_store",
    "SERVICE_NAME",
    "USERNAME_KEY",
    "PASSWORD_KEY",
    "SESSION_TOKEN_KEY",
]
