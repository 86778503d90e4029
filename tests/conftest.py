"""
Pytest configuration and fixtures
"""
import json
import pytest
import sys
from pathlib import Path

import httpx

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from ireporter.transport import ApiClient, MemoryCredentialStore


API_BASE = "http://testserver/api"


def make_report(**overrides):
    """Report payload as returned by the iReporter API."""
    payload = {
        "id": "1",
        "userId": "u-1",
        "type": "red-flag",
        "title": "Bribery at the land registry",
        "description": "Officials are demanding payments to process land titles.",
        "location": json.dumps({"lat": 0.3476, "lng": 32.5825}),
        "status": "draft",
        "images": "[]",
        "createdAt": "2026-01-27T14:30:00Z",
        "updatedAt": "2026-01-27T14:30:00Z",
    }
    payload.update(overrides)
    return payload


class FakeApi:
    """
    In-process stand-in for the iReporter API.

    Routes are keyed by (method, path below /api). Every request is recorded
    so tests can assert that nothing was sent.
    """

    def __init__(self):
        self.routes = {}
        self.requests = []

    def add(self, method, path, status=200, json_body=None, handler=None):
        if handler is None:
            def handler(request):
                return httpx.Response(status, json=json_body)
        self.routes[(method.upper(), path)] = handler

    async def __call__(self, request):
        self.requests.append(request)
        path = request.url.path
        if path.startswith("/api"):
            path = path[len("/api"):]

        handler = self.routes.get((request.method, path))
        if handler is None:
            return httpx.Response(404, json={"error": f"No route for {request.method} {path}"})

        response = handler(request)
        if hasattr(response, "__await__"):
            response = await response
        return response

    def client(self, token=None, timeout=5.0):
        return ApiClient(
            base_url=API_BASE,
            timeout=timeout,
            credentials=MemoryCredentialStore(token),
            transport=httpx.MockTransport(self),
        )


@pytest.fixture
def fake_api():
    """Empty fake API; tests register the routes they need."""
    return FakeApi()


@pytest.fixture
def report_payload():
    """A single draft report payload."""
    return make_report()


@pytest.fixture
def report_payloads():
    """Three reports in different lifecycle states."""
    return [
        make_report(id="1", title="Bribery at the land registry"),
        make_report(id="2", title="Broken bridge on Jinja road", type="intervention",
                    status="under-investigation"),
        make_report(id="3", title="Ghost workers on district payroll", status="resolved"),
    ]


@pytest.fixture
def user_payload():
    """User object as returned by the /auth endpoints."""
    return {
        "id": "u-1",
        "email": "jane@example.com",
        "firstName": "Jane",
        "lastName": "Doe",
        "role": "user",
    }
