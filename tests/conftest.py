"""
Shared pytest fixtures.

The clinic REST API is faked with `httpx.MockTransport`: tests register
canned responses per (method, path) and inspect the requests the console
made.

Fixture overview
----------------
fake_api        - in-memory stand-in for the clinic API
test_settings   - settings pointing at the fake API, session file in tmp_path
app             - console app wired to the fake API
client          - TestClient for `app` with an operator signed in
"""

import json
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import httpx
import pytest
from faker import Faker
from fastapi.testclient import TestClient

from vaxvet_console.config import Settings
from vaxvet_console.main import create_app
from vaxvet_console.schemas.auth import CurrentUser

API_BASE_URL = "http://clinic.test/api"

Responder = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


class FakeClinicApi:
    """Route table of canned responses plus a log of received requests."""

    def __init__(self, prefix: str = "/api"):
        self.prefix = prefix
        self.routes: Dict[Tuple[str, str], Responder] = {}
        self.requests: List[httpx.Request] = []

    def add(
        self,
        method: str,
        path: str,
        json: Any = None,
        status_code: int = 200,
        handler: Optional[Callable[[httpx.Request], httpx.Response]] = None,
    ) -> None:
        """Register a response for METHOD path (path relative to the API base)."""
        if handler is not None:
            self.routes[(method.upper(), path)] = handler
        else:
            self.routes[(method.upper(), path)] = httpx.Response(status_code, json=json)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.startswith(self.prefix):
            path = path[len(self.prefix):]

        responder = self.routes.get((request.method, path))
        if responder is None:
            return httpx.Response(404, json={"message": f"No route for {request.method} {path}"})
        if callable(responder):
            return responder(request)
        return responder

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        """Requests received for METHOD path."""
        full_path = f"{self.prefix}{path}"
        return [r for r in self.requests if r.method == method.upper() and r.url.path == full_path]

    def body(self, request: httpx.Request) -> Any:
        return json.loads(request.content) if request.content else None


@pytest.fixture
def faker():
    Faker.seed(1234)
    return Faker()


@pytest.fixture
def fake_api():
    return FakeClinicApi()


@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        api_base_url=API_BASE_URL,
        session_file=tmp_path / "session.json",
        notifications_enabled=False,
        cache_stale_seconds=300,
        testing_mode=True,
    )


@pytest.fixture
def app(test_settings, fake_api):
    return create_app(test_settings, transport=fake_api.transport)


@pytest.fixture
def client(app):
    """TestClient with an admin signed in."""
    app.state.console.auth.login(CurrentUser(id="u-1", user_name="admin", role="Admin"), "test-token")
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def owner_json(faker):
    """Factory for owner payloads as the API returns them."""
    def make(owner_id: int = 1, **overrides) -> Dict[str, Any]:
        data = {
            "id": owner_id,
            "firstName": faker.first_name(),
            "lastName": faker.last_name(),
            "tcKimlikNo": "12345678901",
            "address": "123 Main Street, Springfield",
            "phoneNumber": "5551234567",
            "emergencyPerson": None,
            "emergencyPhone": None,
            "createdAt": "2026-01-15T10:00:00",
            "version": 1,
        }
        data.update(overrides)
        return data
    return make
