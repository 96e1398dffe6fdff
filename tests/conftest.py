"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before any app import so the process-wide
settings never pick up a developer's .env file.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["APP_ENV"] = "testing"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from typing import Any, Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from app.core.app_factory import create_app
from app.core.config import LogSettings, ProxySettings, Settings, UpstreamSettings

UPSTREAM_BASE = "https://upstream.test"


def make_settings(**proxy_overrides: Any) -> Settings:
    """Build isolated settings pointing at the fake upstream."""
    return Settings(
        upstream=UpstreamSettings(base=UPSTREAM_BASE),
        proxy=ProxySettings(**proxy_overrides),
        log=LogSettings(level="WARNING"),
    )


class FakeUpstream:
    """httpx handler recording requests and replying with a canned response."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.reply: Callable[[httpx.Request], httpx.Response] = lambda request: httpx.Response(
            200, json={"data": []}
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.reply(request)

    def respond_json(self, payload: Any, status_code: int = 200) -> None:
        self.reply = lambda request: httpx.Response(status_code, json=payload)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def fake_upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def client_factory(fake_upstream: FakeUpstream) -> Callable[..., TestClient]:
    """Build a TestClient over a fresh app; keyword args override ProxySettings."""

    def _build(**proxy_overrides: Any) -> TestClient:
        app = create_app(make_settings(**proxy_overrides), transport=fake_upstream.transport)
        return TestClient(app)

    return _build


@pytest.fixture
def client(client_factory: Callable[..., TestClient]) -> TestClient:
    return client_factory()
