"""Shared fixtures: an in-memory guardrail backend served through httpx.MockTransport."""

import json
from typing import Any, Callable, Dict, List, Tuple, Union

import httpx
import pytest

from guardrail_console.config import ConsoleConfig
from guardrail_console.console import GuardrailConsole

API_URL = "http://guardrail.test"

Route = Union[Tuple[int, Any], Callable[[httpx.Request], httpx.Response]]


class FakeBackend:
    """Routes requests by (method, path); unknown routes answer 404."""

    def __init__(self, routes: Dict[Tuple[str, str], Route] = None):
        self.routes: Dict[Tuple[str, str], Route] = dict(routes or {})
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, text="Not Found")
        if callable(route):
            return route(request)
        status, payload = route
        if isinstance(payload, str):
            return httpx.Response(status, text=payload)
        return httpx.Response(status, json=payload)

    def paths(self) -> List[str]:
        return [request.url.path for request in self.requests]

    def body(self, index: int = -1) -> Dict[str, Any]:
        return json.loads(self.requests[index].content)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


def make_config_factory(**overrides) -> ConsoleConfig:
    data = {"api_url": API_URL}
    data.update(overrides)
    return ConsoleConfig(**data)


METRICS_PAYLOAD = {"total_requests": 20, "flagged_count": 5, "flag_rate": 0.25}

INCIDENTS_PAYLOAD = [
    {
        "id": 2,
        "time": "2024-05-01T12:30:00Z",
        "provider": "openai",
        "flagged": True,
        "redactions": ["email", "phone"],
    },
    {
        "id": 1,
        "time": "2024-05-01T12:00:00Z",
        "provider": "anthropic",
        "flagged": False,
        "redactions": [],
    },
]

SCAN_PAYLOAD = {
    "raw_output": "Mail j.smith@company.com",
    "redacted_output": "Mail [EMAIL]",
    "flagged": True,
    "incidents": [
        {
            "id": 3,
            "time": "2024-05-01T13:00:00Z",
            "provider": "openai",
            "flagged": True,
            "redactions": [{"type": "email", "value": "j.smith@company.com"}],
        }
    ],
}


@pytest.fixture
def config() -> ConsoleConfig:
    return make_config_factory()


@pytest.fixture
def backend() -> FakeBackend:
    """A healthy backend answering every endpoint the console uses."""
    return FakeBackend({
        ("GET", "/"): (200, {"status": "ok"}),
        ("GET", "/metrics"): (200, METRICS_PAYLOAD),
        ("GET", "/incidents"): (200, INCIDENTS_PAYLOAD),
        ("POST", "/scan"): (200, SCAN_PAYLOAD),
        ("POST", "/chat"): (200, {"answer": "hi there", "flagged": False, "redactions": []}),
    })


@pytest.fixture
def console(config, backend) -> GuardrailConsole:
    return GuardrailConsole(config, http_transport=backend.transport)


@pytest.fixture
def make_config():
    """Factory for configs pointing at the fake backend."""
    return make_config_factory


@pytest.fixture
def make_backend():
    """Factory for a FakeBackend with custom routes."""
    return FakeBackend
