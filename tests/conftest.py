"""Pytest configuration and shared fixtures for all tests.

This module provides shared test fixtures including:
- A fake Pesapal gateway served through httpx.MockTransport
- A controllable clock for token expiry
- Settings and client instances wired to the fake gateway
"""

import asyncio
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Any

import httpx
import pytest
import pytest_asyncio

from pesapal_client.auth import TOKEN_PATH
from pesapal_client.client import PesapalClient
from pesapal_client.config import PesapalSettings

SANDBOX_PREFIX = "/pesapalv3"
START_TIME = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakePesapalGateway:
    """
    Serves canned replies per API path and records every request.

    Replies queued for a path are served in order; the last one keeps being
    served once the queue is down to it. A reply body may be a dict/list
    (sent as JSON), a str (sent as raw text), None (empty body) or an
    exception class/instance (raised as a transport failure).
    """

    def __init__(self) -> None:
        self.routes: dict[str, list[tuple[int, Any]]] = defaultdict(list)
        self.requests: list[httpx.Request] = []

    def add(self, path: str, body: Any, status_code: int = 200) -> None:
        self.routes[path].append((status_code, body))

    def add_token(self, token: str = "tok-1", expires_at: datetime | None = None) -> None:
        expires_at = expires_at or START_TIME + timedelta(minutes=5)
        self.add(TOKEN_PATH, token_body(token, expires_at))

    def calls(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if _api_path(r) == path]

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        # Yield so concurrent callers can interleave mid-request
        await asyncio.sleep(0)

        queue = self.routes.get(_api_path(request))
        if not queue:
            return httpx.Response(404, text="Not Found")
        status_code, body = queue.pop(0) if len(queue) > 1 else queue[0]

        if isinstance(body, type) and issubclass(body, Exception):
            raise body("simulated failure", request=request)
        if isinstance(body, Exception):
            raise body
        if body is None:
            return httpx.Response(status_code)
        if isinstance(body, str):
            return httpx.Response(status_code, text=body)
        return httpx.Response(status_code, json=body)


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, now: datetime = START_TIME) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


def _api_path(request: httpx.Request) -> str:
    path = request.url.path
    return path[len(SANDBOX_PREFIX):] if path.startswith(SANDBOX_PREFIX) else path


def token_body(token: str | None, expires_at: datetime | None, error: Any = None) -> dict:
    """Build a RequestToken response body the way Pesapal formats it."""
    expiry = expires_at.strftime("%Y-%m-%dT%H:%M:%S.%f") + "1Z" if expires_at else None
    return {
        "token": token,
        "expiryDate": expiry,
        "error": error,
        "status": "200" if token else "500",
        "message": "Request processed successfully" if token else "",
    }


def ipn_body(url: str, ipn_id: str, **extra: Any) -> dict:
    body = {
        "url": url,
        "created_date": "2025-01-01T12:00:00.000",
        "ipn_id": ipn_id,
        "error": None,
        "status": "200",
    }
    body.update(extra)
    return body


@pytest.fixture
def gateway():
    """Fake Pesapal gateway."""
    return FakePesapalGateway()


@pytest.fixture
def clock():
    """Clock starting at START_TIME."""
    return FakeClock()


@pytest.fixture
def settings():
    """Sandbox settings with a single IPN URL and no registration delay."""
    return PesapalSettings(
        _env_file=None,
        environment="sandbox",
        consumer_key="test-consumer-key",
        consumer_secret="test-consumer-secret",
        ipn_urls=[{"url": "https://example.com/ipn"}],
        ipn_delay_seconds=0,
    )


@pytest_asyncio.fixture
async def http_client(gateway):
    """httpx client routed to the fake gateway."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(gateway.handler))
    yield client
    await client.aclose()


@pytest_asyncio.fixture
async def client(settings, http_client, clock):
    """PesapalClient wired to the fake gateway and clock."""
    pesapal = PesapalClient(settings, http_client=http_client, clock=clock)
    yield pesapal
    await pesapal.close()
