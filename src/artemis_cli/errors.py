"""Exceptions raised by the Artemis CLI."""


class ArtemisCLIError(Exception):
    """Base exception for all errors that abort a command."""


class AuthenticationError(ArtemisCLIError):
    """Login failed, or the server kept rejecting the session after a re-login."""


class FetchError(ArtemisCLIError):
    """The server answered with a non-success status, or could not be reached."""

    def __init__(self, uri: str, status_code: int | None, message: str | None = None):
        if message is None:
            if status_code is None:
                message = f"Request to {uri} failed"
            else:
                message = f"Couldn't fetch {uri} (HTTP {status_code})"
        super().__init__(message)
        self.uri = uri
        self.status_code = status_code


class NotFoundError(FetchError):
    """The requested course or exercise does not exist for this user."""


class ParseError(ArtemisCLIError):
    """A JSON payload is missing a field or has a field of the wrong type."""

    def __init__(self, message: str, path: str = ""):
        super().__init__(f"{path}: {message}" if path else message)
        self.path = path


class ResultsPendingError(ArtemisCLIError):
    """No (new) result is available for the exercise yet."""


class RepositoryError(ArtemisCLIError):
    """A git clone, commit or push failed."""


class CredentialError(ArtemisCLIError):
    """The secret storage backend could not be read or written."""


class ConfigError(ArtemisCLIError):
    """The configuration file exists but cannot be parsed."""


__all__ = [
    "ArtemisCLIError",
    "AuthenticationError",
    "FetchError",
    "NotFoundError",
    "ParseError",
    "ResultsPendingError",
    "RepositoryError",
    "CredentialError",
    "ConfigError",
]
