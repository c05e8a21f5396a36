"""Shared fixtures: a recording mock of the ReviewWeb.site API."""

import json
from typing import Any, Callable, List, Optional

import httpx
import pytest

from reviewweb.service.client import ReviewWebClient
from reviewweb.validation.config import Config

BASE_URL = "https://api.test/v1"


class MockAPI:
    """Records every request and answers with a canned response."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.responder: Callable[[httpx.Request], httpx.Response] = lambda request: httpx.Response(
            200, json={"ok": True}
        )

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    def reply(self, status: int = 200, json_body: Any = None, text: Optional[str] = None) -> None:
        """Answer every following request with this status and body."""
        if text is not None:
            self.responder = lambda request: httpx.Response(status, text=text)
        elif json_body is not None:
            self.responder = lambda request: httpx.Response(status, json=json_body)
        else:
            self.responder = lambda request: httpx.Response(status)

    def fail(self, exc_type=httpx.ConnectError) -> None:
        """Raise a transport error instead of answering."""

        def responder(request):
            raise exc_type("connection refused", request=request)

        self.responder = responder

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    @property
    def last_json(self) -> Any:
        return json.loads(self.last.content)

    def client(self) -> ReviewWebClient:
        return ReviewWebClient(base_url=BASE_URL, transport=httpx.MockTransport(self.handler))


@pytest.fixture
def api():
    """A fresh mock API per test."""
    return MockAPI()


@pytest.fixture
def config():
    """Config with a process-wide key and no files read."""
    return Config(env_config={"api_key": "config-key", "api": {"base_url": BASE_URL}})


@pytest.fixture
def keyless_config():
    """Config with no API key anywhere."""
    return Config(env_config={"api": {"base_url": BASE_URL}})
