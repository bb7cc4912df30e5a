"""Shared fixtures: a fake completion service and an API client wired to it."""

import asyncio

import httpx
import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_gateway
from api.router import limiter
from main import app
from services.completion_gateway import CompletionGateway

GOOD_REPLY = '{"matchScore": 82, "missingSkills": ["Kubernetes"], "improvements": ["Quantify impact"]}'


def completion_body(content) -> dict:
    return {
        "id": "gen-1",
        "choices": [{"index": 0, "message": {"role": "assistant", "content": content}}],
    }


class FakeUpstream:
    """Scriptable stand-in for the completion endpoint.

    Records every request it receives so tests can assert on outbound calls.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.json_body: object = completion_body(GOOD_REPLY)
        self.text_body: str | None = None
        self.delay = 0.0
        self.error: Exception | None = None

    def reply(self, content):
        self.status_code = 200
        self.json_body = completion_body(content)

    def fail(self, status_code: int, text: str = '{"error": {"message": "upstream says no"}}'):
        self.status_code = status_code
        self.text_body = text

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        if self.text_body is not None:
            return httpx.Response(self.status_code, text=self.text_body)
        return httpx.Response(self.status_code, json=self.json_body)

    def gateway(self, api_key: str = "test-key", **kwargs) -> CompletionGateway:
        return CompletionGateway(api_key, transport=httpx.MockTransport(self.handler), **kwargs)


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture(autouse=True)
def _no_rate_limit():
    previous = limiter.enabled
    limiter.enabled = False
    yield
    limiter.enabled = previous


@pytest.fixture
def client(upstream):
    app.dependency_overrides[get_gateway] = lambda: upstream.gateway()
    yield TestClient(app)
    app.dependency_overrides.clear()
