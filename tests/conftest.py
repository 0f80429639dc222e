"""Shared fixtures: a scripted fake controller behind httpx.MockTransport."""

import json
import os
from collections import defaultdict, deque
from typing import Any, Callable, Deque, Dict, List, Optional, Tuple

import httpx
import pytest

from unifi_api.api.session import Session
from unifi_api.models import Credential

HOST = "controller.example"
BASE_URL = f"https://{HOST}:8443"

Reply = Callable[[httpx.Request], httpx.Response]


def reply(
    status: int = 200,
    body: Any = None,
    content: Optional[bytes] = None,
    headers: Optional[Dict[str, str]] = None,
) -> Reply:
    """Build a response factory; each request gets a fresh Response."""

    def _make(request: httpx.Request) -> httpx.Response:
        if content is not None:
            return httpx.Response(status, content=content, headers=headers)
        return httpx.Response(status, json=body, headers=headers)

    return _make


def ok(data: Any) -> Reply:
    return reply(200, {"data": data, "meta": {"rc": "ok"}})


def login_required() -> Reply:
    return reply(401, {"data": [], "meta": {"rc": "error", "msg": "api.err.LoginRequired"}})


class FakeController:
    """Answers requests from per-route queues and records what was sent.

    The last queued reply of a route is repeated once the queue runs down
    to it. Routes without replies answer 404.
    """

    def __init__(self) -> None:
        self.routes: Dict[Tuple[str, str], Deque[Reply]] = defaultdict(deque)
        self.requests: List[httpx.Request] = []

    def on(self, method: str, path: str, *replies: Reply) -> "FakeController":
        self.routes[(method, path)].extend(replies)
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"data": [], "meta": {"rc": "error", "msg": "api.err.NotFound"}})
        factory = queue.popleft() if len(queue) > 1 else queue[0]
        return factory(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    def json_body(self, request: httpx.Request) -> Any:
        return json.loads(request.content)


@pytest.fixture
def credential() -> Credential:
    return Credential(username="admin", password="secret", controller_host=HOST)


@pytest.fixture
def controller() -> FakeController:
    return FakeController()


@pytest.fixture
def session(credential: Credential, controller: FakeController):
    session = Session(credential, transport=controller.transport)
    yield session
    session.close()


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep CONFIG_PATH and UNIFI_* from leaking into or out of tests."""
    monkeypatch.setenv("CONFIG_PATH", "")
    for key in list(os.environ):
        if key.startswith("UNIFI_"):
            monkeypatch.delenv(key)
