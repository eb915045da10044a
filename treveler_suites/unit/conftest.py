"""
Offline fixtures: a scripted fake backend served through httpx.MockTransport.
"""

from __future__ import annotations

import json
import time
from typing import Callable, Dict, List, Optional, Tuple

import httpx
import pytest

from treveler_suites.api_testing.framework.authorization_service import AuthorizationService
from treveler_suites.api_testing.framework.clients import AuthApiClient
from treveler_suites.api_testing.framework.credential_store import CredentialStore
from treveler_suites.api_testing.framework.http_client import HttpClient


class DummyConfig:
    def __init__(self, data: Optional[Dict] = None):
        self.data = {"api.base_url": "http://testserver", "api.timeout": 5}
        self.data.update(data or {})

    def get(self, key, default=None):
        return self.data.get(key, default)


Handler = Callable[[httpx.Request], httpx.Response]


class FakeBackend:
    """
    Routes requests by (method, path) to scripted handlers and records
    every request it receives.
    """

    def __init__(self) -> None:
        self.routes: Dict[Tuple[str, str], Handler] = {}
        self.requests: List[httpx.Request] = []

    def on(self, method: str, path: str, handler: Handler) -> None:
        self.routes[(method.upper(), path)] = handler

    def reply(self, method: str, path: str, status: int = 200, delay: float = 0.0,
              **response_kwargs) -> None:
        def _handler(request: httpx.Request) -> httpx.Response:
            if delay:
                time.sleep(delay)
            return httpx.Response(status, **response_kwargs)
        self.on(method, path, _handler)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            scripted = httpx.Response(404, json={"detail": "Not Found"})
        else:
            scripted = handler(request)
        return self.streamed(scripted)

    @staticmethod
    def streamed(scripted: httpx.Response) -> httpx.Response:
        # A body passed as json=/content= is read on construction, and httpx
        # only records .elapsed when it closes a stream it is still reading.
        return httpx.Response(
            scripted.status_code,
            headers=scripted.headers,
            stream=httpx.ByteStream(scripted.content),
        )

    def last_json(self):
        return json.loads(self.requests[-1].content)

    def tokens_reply(self, method: str, path: str, access: str = "access-1",
                     refresh: Optional[str] = "refresh-1", user=None) -> None:
        body = {"access": access, "refresh": refresh, "user": user or {"id": "u1"}}
        self.reply(method, path, json=body)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def dummy_config() -> DummyConfig:
    return DummyConfig()


@pytest.fixture
def store():
    store = CredentialStore()
    yield store
    store.clear()


@pytest.fixture
def http(dummy_config, store, backend):
    with HttpClient(dummy_config, credential_store=store,
                    transport=httpx.MockTransport(backend)) as client:
        yield client


@pytest.fixture
def service(http, store, dummy_config) -> AuthorizationService:
    return AuthorizationService(AuthApiClient(http), store, dummy_config)
