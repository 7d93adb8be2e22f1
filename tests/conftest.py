"""Shared test fixtures for the ShortsBot test suite."""

import itertools
import json
import random
from datetime import UTC, datetime, timedelta
from urllib.parse import parse_qsl

import httpx
import pytest
from fastapi.testclient import TestClient

from shortsbot.app import create_app
from shortsbot.core.config import Settings
from shortsbot.core.dependencies import build_container
from shortsbot.core.storage import MemoryDocumentStore
from shortsbot.models import TokenRecord

START = datetime(2026, 3, 1, 12, 0, 0, tzinfo=UTC)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeUpstream:
    """Stands in for Google's token endpoint, the YouTube channels API and the
    generation API. Counts calls and lets tests inject failures."""

    def __init__(self):
        self.exchange_calls = 0
        self.refresh_calls = 0
        self.channel_calls = 0
        self.generation_requests: list[dict] = []

        self.expires_in = 3600
        self.grant_refresh_token: str | None = "refresh-1"
        self.rotate_refresh_token = False
        self.exchange_error: str | None = None
        self.refresh_error: str | None = None
        self.refresh_network_error = False
        # Replaces the whole 200 refresh reply when set
        self.refresh_payload: dict | None = None
        self.channel_status = 200
        # Raw 200 body for the channels endpoint when set
        self.channel_body: str | None = None
        self.channel_items = [
            {
                "id": "UC123",
                "snippet": {
                    "title": "Cooking Daily",
                    "customUrl": "@cookingdaily",
                    "thumbnails": {"default": {"url": "https://img.example/cd.jpg"}},
                },
                "statistics": {
                    "subscriberCount": "1200",
                    "viewCount": "45000",
                    "videoCount": "31",
                },
            }
        ]
        self.generation_status = 200
        self.generation_text: str | None = None

        self._access_tokens = (f"access-{i}" for i in itertools.count(1))

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.host == "oauth2.googleapis.com":
            return self._token(request)
        if request.url.host == "www.googleapis.com":
            return self._channels(request)
        if request.url.host == "api.anthropic.com":
            return self._messages(request)
        return httpx.Response(404)

    def _token(self, request: httpx.Request) -> httpx.Response:
        form = dict(parse_qsl(request.content.decode()))
        if form["grant_type"] == "authorization_code":
            self.exchange_calls += 1
            if self.exchange_error:
                return httpx.Response(400, json={"error": self.exchange_error})
            payload = {"access_token": next(self._access_tokens), "expires_in": self.expires_in}
            if self.grant_refresh_token:
                payload["refresh_token"] = self.grant_refresh_token
            return httpx.Response(200, json=payload)

        self.refresh_calls += 1
        if self.refresh_network_error:
            raise httpx.ConnectError("connection refused", request=request)
        if self.refresh_error:
            return httpx.Response(400, json={"error": self.refresh_error})
        if self.refresh_payload is not None:
            return httpx.Response(200, json=self.refresh_payload)
        payload = {"access_token": next(self._access_tokens), "expires_in": self.expires_in}
        if self.rotate_refresh_token:
            payload["refresh_token"] = "rotated-refresh"
        return httpx.Response(200, json=payload)

    def _channels(self, request: httpx.Request) -> httpx.Response:
        self.channel_calls += 1
        if self.channel_body is not None:
            return httpx.Response(200, text=self.channel_body)
        if self.channel_status != 200:
            return httpx.Response(self.channel_status, json={"error": {"code": self.channel_status}})
        return httpx.Response(200, json={"items": self.channel_items})

    def _messages(self, request: httpx.Request) -> httpx.Response:
        self.generation_requests.append(json.loads(request.content))
        if self.generation_status != 200:
            return httpx.Response(
                self.generation_status,
                json={"type": "error", "error": {"type": "overloaded_error", "message": "Overloaded"}},
            )
        return httpx.Response(
            200,
            json={
                "id": f"msg_{len(self.generation_requests)}",
                "type": "message",
                "role": "assistant",
                "model": "claude-haiku-4-5-20251001",
                "content": [{"type": "text", "text": self.generation_text or ""}],
                "stop_reason": "end_turn",
                "stop_sequence": None,
                "usage": {"input_tokens": 10, "output_tokens": 10},
            },
        )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        environment="test",
        base_url="http://shortsbot.test",
        frontend_url="http://app.test",
        data_dir=tmp_path / "data",
        database_url="",
        google_client_id="",
        google_client_secret="",
        anthropic_api_key="",
    )


@pytest.fixture
def store():
    return MemoryDocumentStore(
        {"credentials": {"client_id": "client-abc", "client_secret": "secret-xyz"}}
    )


@pytest.fixture
async def container(settings, store, upstream, clock):
    services = build_container(
        settings, store, transport=upstream.transport(), rng=random.Random(7), clock=clock
    )
    yield services
    await services.close()


@pytest.fixture
def seed_tokens(container, clock):
    """Returns a coroutine function storing a token record that expires *expires_in* from now."""

    async def seed(
        expires_in: timedelta,
        access: str = "stored-access",
        refresh: str = "stored-refresh",
    ) -> TokenRecord:
        record = TokenRecord(
            access_token=access, refresh_token=refresh, expiry=clock() + expires_in
        )
        async with container.state.mutate() as state:
            state.tokens = record
        return record

    return seed


@pytest.fixture
def api(settings, upstream, clock):
    """TestClient over an app wired to an in-memory store and the fake upstream."""
    services = build_container(
        settings,
        MemoryDocumentStore(),
        transport=upstream.transport(),
        rng=random.Random(3),
        clock=clock,
    )
    with TestClient(create_app(container=services)) as client:
        yield client
