"""Test doubles and payload builders for the Artemis API."""

from __future__ import annotations

import json
from typing import Any

import httpx

BASE_URL = "https://artemis.test"


class MemoryCredentialStore:
    """Credential store keeping secrets in a dict."""

    def __init__(self, **entries: str):
        self.entries: dict[str, str] = dict(entries)

    def get(self, key: str) -> str | None:
        return self.entries.get(key)

    def set(self, key: str, value: str) -> None:
        self.entries[key] = value

    def delete(self, key: str) -> None:
        self.entries.pop(key, None)


class FakeArtemis:
    """
    In-memory stand-in for the Artemis REST API.

    Login hands out tokens ``token-1``, ``token-2``, ... as ``jwt`` cookies.
    Every other request needs a valid token, otherwise it gets a 401.
    """

    def __init__(self, username: str = "student", password: str = "secret"):
        self.username = username
        self.password = password
        self.valid_tokens: set[str] = set()
        self.reject_all = False
        self.logins = 0
        self.calls: list[tuple[str, str]] = []
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], list[tuple[int, Any]]] = {}

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def route(self, method: str, path: str, body: Any = None, status: int = 200) -> None:
        """Answer ``method path`` with ``body``; repeated calls queue responses."""
        self._routes.setdefault((method, path), []).append((status, body))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append((request.method, request.url.path))
        self.requests.append(request)

        if request.url.path == "/api/public/authenticate":
            return self._login(request)

        token = _cookie(request, "jwt")
        if self.reject_all or token not in self.valid_tokens:
            return httpx.Response(401)

        responses = self._routes.get((request.method, request.url.path))
        if not responses:
            return httpx.Response(404)
        status, body = responses.pop(0) if len(responses) > 1 else responses[0]
        return httpx.Response(status, json=body)

    def _login(self, request: httpx.Request) -> httpx.Response:
        self.logins += 1
        data = json.loads(request.content)
        if (data["username"], data["password"]) != (self.username, self.password):
            return httpx.Response(401)
        token = f"token-{self.logins}"
        self.valid_tokens.add(token)
        return httpx.Response(
            200, headers={"Set-Cookie": f"jwt={token}; Path=/; HttpOnly"}
        )


def _cookie(request: httpx.Request, name: str) -> str | None:
    for part in request.headers.get("cookie", "").split(";"):
        key, _, value = part.strip().partition("=")
        if key == name:
            return value
    return None


def course_payload() -> dict[str, Any]:
    """Dashboard response with one course and two exercises."""
    return {
        "courses": [
            {
                "course": {
                    "id": 5,
                    "title": "Algorithms",
                    "description": "Sorting and searching",
                    "exercises": [
                        {"id": 11, "title": "Bubble Sort"},
                        {
                            "id": 12,
                            "title": "Binary Search",
                            "studentParticipations": [
                                {
                                    "id": 77,
                                    "repositoryUri": "https://student@git.artemis.test/algo/algo-student.git",
                                    "results": [
                                        {"id": 1, "score": 40.0},
                                        {"id": 2, "score": 100.0},
                                    ],
                                }
                            ],
                        },
                    ],
                }
            }
        ]
    }


def result_payload(
    result_id: int,
    completion_date: str,
    build_failed: bool = False,
    score: float | None = 50.0,
) -> dict[str, Any]:
    return {
        "id": result_id,
        "score": score,
        "completionDate": completion_date,
        "submission": {"id": result_id * 10, "buildFailed": build_failed},
    }


def details_payload(*results: dict[str, Any], participation_id: int = 77) -> dict[str, Any]:
    """Exercise details response for exercise 12."""
    return {
        "exercise": {
            "id": 12,
            "studentParticipations": [{"id": participation_id, "results": list(results)}],
        }
    }
