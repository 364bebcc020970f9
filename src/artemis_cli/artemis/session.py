"""
Authenticated HTTP session against an Artemis server.

The session token is a cookie that survives across CLI invocations: it is
kept in the credential store after a login and put back into the cookie jar
when the next invocation starts.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

import httpx

from .. import __version__
from ..credentials import (
    CredentialStore,
    PASSWORD_KEY,
    SESSION_TOKEN_KEY,
    USERNAME_KEY,
)
from ..errors import AuthenticationError, FetchError, NotFoundError, ParseError
from ..utils.logging import get_logger

logger = get_logger(__name__)


class SessionStateKind(Enum):
    NONE = "none"
    CACHED = "cached"
    AUTHENTICATED = "authenticated"


@dataclass(frozen=True)
class SessionState:
    """Where the current session token came from.

    NONE: no token. CACHED: restored from the credential store, possibly
    expired. AUTHENTICATED: obtained by a login in this process.
    """

    kind: SessionStateKind
    token: str | None = None

    @classmethod
    def none(cls) -> "SessionState":
        return cls(SessionStateKind.NONE)

    @classmethod
    def cached(cls, token: str) -> "SessionState":
        return cls(SessionStateKind.CACHED, token)

    @classmethod
    def authenticated(cls, token: str) -> "SessionState":
        return cls(SessionStateKind.AUTHENTICATED, token)


class ArtemisSession:
    """
    HTTP client that keeps the user logged in to Artemis.

    On construction the stored session token is restored; without one, a
    login with the stored username and password is performed. A request that
    is answered with 401 triggers one re-login and one retry.

    Usage:
        with ArtemisSession("https://artemis.example.edu", store) as session:
            response = session.request("GET", "/api/courses/for-dashboard")
    """

    DEFAULT_TIMEOUT = 30.0

    AUTHENTICATE_PATH = "/api/public/authenticate"

    # Name of the cookie Artemis keeps the JWT in
    TOKEN_COOKIE = "jwt"

    def __init__(
        self,
        base_url: str,
        credentials: CredentialStore,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize the session and make sure it is authenticated.

        Args:
            base_url: Base URL of the Artemis instance
            credentials: Store holding username, password and session token
            timeout: Connect/read timeout in seconds
            transport: Custom httpx transport (used by tests)

        Raises:
            AuthenticationError: If no token is stored and the login fails
        """
        self.base_url = base_url.rstrip("/")
        self.credentials = credentials
        self.state = SessionState.none()
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "User-Agent": f"artemis-cli/{__version__}",
                "Accept": "application/json",
            },
        )
        try:
            self._restore_or_login()
        except Exception:
            self.close()
            raise

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "ArtemisSession":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # Authentication
    # -------------------------------------------------------------------------

    def _restore_or_login(self) -> None:
        token = self.credentials.get(SESSION_TOKEN_KEY)
        if token:
            logger.debug("Restoring stored session token")
            self._client.cookies.set(self.TOKEN_COOKIE, token, domain=self._cookie_domain())
            self.state = SessionState.cached(token)
        else:
            logger.debug("No stored session token, logging in")
            self.login()

    def _cookie_domain(self) -> str:
        host = httpx.URL(self.base_url).host
        # The cookie jar matches hosts without a dot as "<host>.local"
        if "." not in host:
            return f"{host}.local"
        return host

    def login(self) -> None:
        """Log in with the stored username and password.

        The session cookie set by the server is written back to the
        credential store for the next invocation.

        Raises:
            AuthenticationError: If credentials are missing or rejected
        """
        username = self.credentials.get(USERNAME_KEY)
        if not username:
            raise AuthenticationError(
                "You haven't configured a username yet, use "
                "'artemis-cli config username [USERNAME]' and try again"
            )
        password = self.credentials.get(PASSWORD_KEY)
        if not password:
            raise AuthenticationError(
                "You haven't configured a password yet, use "
                "'artemis-cli config password [PASSWORD]' and try again"
            )

        self.state = SessionState.none()
        self._client.cookies.clear()
        response = self._send(
            "POST",
            self.AUTHENTICATE_PATH,
            json={"username": username, "password": password, "rememberMe": True},
        )
        if not response.is_success:
            logger.error(f"Can't log in to Artemis: HTTP {response.status_code}")
            raise AuthenticationError(
                f"Login failed (HTTP {response.status_code}), aborting..."
            )

        token = self._client.cookies.get(self.TOKEN_COOKIE)
        if not token:
            raise AuthenticationError("Login succeeded but Artemis set no session cookie")

        self.credentials.set(SESSION_TOKEN_KEY, token)
        self.state = SessionState.authenticated(token)
        logger.info("Successfully logged in")

    # -------------------------------------------------------------------------
    # Requests
    # -------------------------------------------------------------------------

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        logger.debug(f"{method} {path}")
        try:
            return self._client.request(method, path, **kwargs)
        except httpx.RequestError as e:
            logger.error(f"Request error calling {method} {path}: {e}")
            raise FetchError(
                self.url(path), None, f"Request to {self.url(path)} failed: {e}"
            ) from e

    def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """
        Send an authenticated request.

        Args:
            method: HTTP method
            path: Path relative to the base URL
            **kwargs: Passed on to httpx (params, json, ...)

        Returns:
            The successful response

        Raises:
            AuthenticationError: If the request is still unauthorized after
                a re-login
            NotFoundError: If the server answers 404
            FetchError: For any other non-success status
        """
        response = self._send(method, path, **kwargs)

        if response.status_code == httpx.codes.UNAUTHORIZED:
            logger.info(f"Session rejected ({self.state.kind.value}), logging in again")
            self.login()
            response = self._send(method, path, **kwargs)
            if response.status_code == httpx.codes.UNAUTHORIZED:
                self.state = SessionState.none()
                self.credentials.delete(SESSION_TOKEN_KEY)
                raise AuthenticationError(
                    f"Still unauthorized for {self.url(path)} after logging in again"
                )

        if response.status_code == httpx.codes.NOT_FOUND:
            raise NotFoundError(self.url(path), response.status_code)
        if not response.is_success:
            logger.error(f"Couldn't fetch {self.url(path)}: HTTP {response.status_code}")
            raise FetchError(self.url(path), response.status_code)

        return response

    def request_json(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send an authenticated request and decode the JSON body."""
        response = self.request(method, path, **kwargs)
        try:
            return response.json()
        except ValueError as e:
            raise ParseError(f"response of {self.url(path)} is not valid JSON") from e
