"""
Sports M3U Test Configuration

Shared fixtures and configuration for all tests.
"""

import json
from typing import Any, Callable, Generator

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from sportsm3u.dependencies import get_http_client
from sportsm3u.main import app as fastapi_app
from sportsm3u.schemas import Event, EventsPayload
from sportsm3u.services.events_cache import EventsCache


# ============ Upstream Payload Fixtures ============


SAMPLE_EVENT: dict[str, Any] = {
    "match_name": "Team A vs Team B",
    "date": "2025-06-15T18:00:00Z",
    "competitors1_logo": "http://logo/a.png",
    "channel": {
        "server1URL": "http://x/1.m3u8",
        "server2URL": "null",
        "TVCategory": {"name": "Soccer"},
    },
}


def proxy_envelope(payload: Any) -> dict[str, Any]:
    """Wrap an events payload the way the fetch proxy does."""
    return {"contents": json.dumps(payload), "status": {"http_code": 200}}


@pytest.fixture
def sample_event() -> Event:
    """The documented example event."""
    return Event.model_validate(SAMPLE_EVENT)


@pytest.fixture
def sample_payload() -> EventsPayload:
    return EventsPayload.model_validate({"events": [SAMPLE_EVENT]})


# ============ Clock / Cache Fixtures ============


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def events_cache(clock: FakeClock) -> EventsCache:
    """A two-hour cache driven by the fake clock."""
    return EventsCache(ttl_seconds=2 * 60 * 60, clock=clock)


# ============ Upstream Mock Fixtures ============


class UpstreamStub:
    """Programmable fetch proxy backed by httpx.MockTransport."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.handler: Callable[[httpx.Request], httpx.Response] = (
            lambda request: httpx.Response(200, json=proxy_envelope({"events": [SAMPLE_EVENT]}))
        )

    def respond_with(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.handler = handler

    def respond_with_events(self, events: list[Any]) -> None:
        self.respond_with(lambda request: httpx.Response(200, json=proxy_envelope({"events": events})))

    def _dispatch(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self._dispatch))


@pytest.fixture
def upstream() -> UpstreamStub:
    return UpstreamStub()


# ============ FastAPI Test Client Fixtures ============


@pytest.fixture(scope="function")
def app(upstream: UpstreamStub) -> Generator[FastAPI, None, None]:
    """The application with the upstream replaced by the stub."""

    async def override_get_http_client():
        async with upstream.client() as client:
            yield client

    fastapi_app.dependency_overrides[get_http_client] = override_get_http_client
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """Synchronous test client; entering it runs the lifespan (fresh cache)."""
    with TestClient(app) as client:
        yield client
