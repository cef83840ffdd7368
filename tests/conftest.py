"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules:
in-memory stores and a scripted backend served through httpx.MockTransport.
"""

import json
from typing import Any, Optional

import httpx
import pytest

from shared.api_client import APIClient
from shared.config import get_settings
from modules.auth.service import AuthService
from modules.auth.token_store import InMemoryTokenStore
from modules.session.profile_store import InMemoryProfileStore


TEST_BASE_URL = "https://api.heartbridge.test"


class FakeBackend:
    """
    Scripted backend for the API client.

    Register responses per (method, path); every request is recorded so
    tests can inspect headers and decoded JSON bodies.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], tuple[int, Any]] = {}
        self.requests: list[httpx.Request] = []
        self.error: Optional[Exception] = None

    def respond(self, method: str, path: str, status: int = 200, body: Any = None) -> None:
        """Register a response. ``body`` may be JSON-able data or raw str/bytes."""
        self.routes[(method.upper(), path)] = (status, body)

    def fail_with(self, error: Exception) -> None:
        """Make every request raise a transport error."""
        self.error = error

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error

        status, body = self.routes.get((request.method, request.url.path), (404, {"error": "Not found"}))
        if isinstance(body, (str, bytes)):
            return httpx.Response(status, content=body)
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last_request.content)

    def calls_to(self, path: str) -> int:
        return sum(1 for r in self.requests if r.url.path == path)


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Reset the cached settings before and after each test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def token_store() -> InMemoryTokenStore:
    return InMemoryTokenStore()


@pytest.fixture
def profile_store() -> InMemoryProfileStore:
    return InMemoryProfileStore()


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def api_client(backend: FakeBackend, token_store: InMemoryTokenStore) -> APIClient:
    """API client wired to the fake backend."""
    return APIClient(TEST_BASE_URL, token_store, transport=httpx.MockTransport(backend.handler))


@pytest.fixture
def auth_service(api_client: APIClient) -> AuthService:
    return AuthService(api_client)
