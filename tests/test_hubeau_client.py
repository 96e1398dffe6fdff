"""Tests for the Hub'Eau HTTP client adapter."""

import httpx
import pytest

from app.adapters.upstream.factory import create_upstream_client
from app.adapters.upstream.hubeau_client import HubEauClient
from app.core.config import UpstreamSettings
from app.core.errors import UpstreamError

BASE = "https://upstream.test"


def _client(handler) -> HubEauClient:
    return HubEauClient(base_url=BASE, transport=httpx.MockTransport(handler))


class TestGetJson:
    """Request building and response decoding."""

    @pytest.mark.asyncio
    async def test_builds_url_with_repeated_params(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[{"ok": True}])

        client = _client(handler)
        payload = await client.get_json(
            "/api/v1/qualite/eau_potable/resultats",
            {"code_commune": "75056", "code_parametre": ["1301", "1340"], "size": "25"},
        )

        assert payload == [{"ok": True}]
        request = seen[0]
        assert request.url.host == "upstream.test"
        assert request.url.path == "/api/v1/qualite/eau_potable/resultats"
        assert request.url.params.get_list("code_parametre") == ["1301", "1340"]
        assert request.url.params["code_commune"] == "75056"
        assert request.headers["accept"] == "application/json"
        await client.aclose()

    @pytest.mark.asyncio
    async def test_non_2xx_raises_upstream_error_with_status(self) -> None:
        client = _client(lambda request: httpx.Response(503))

        with pytest.raises(UpstreamError) as exc_info:
            await client.get_json("/api/v1/communes", {"code_postal": "75001"})

        assert exc_info.value.code == "upstream_status"
        assert exc_info.value.message == "503 Service Unavailable"
        assert exc_info.value.details["http_status"] == 503

    @pytest.mark.asyncio
    async def test_invalid_json_raises_upstream_error(self) -> None:
        client = _client(lambda request: httpx.Response(200, content=b"<html>oops</html>"))

        with pytest.raises(UpstreamError) as exc_info:
            await client.get_json("/api/v1/communes", {"code_postal": "75001"})

        assert exc_info.value.code == "upstream_invalid_json"

    @pytest.mark.asyncio
    async def test_transport_error_raises_upstream_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = _client(handler)

        with pytest.raises(UpstreamError) as exc_info:
            await client.get_json("/api/v1/communes", {"code_postal": "75001"})

        assert exc_info.value.code == "upstream_unreachable"
        assert "connection refused" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_timeout_raises_upstream_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        client = _client(handler)

        with pytest.raises(UpstreamError) as exc_info:
            await client.get_json("/api/v1/communes", {"code_postal": "75001"})

        assert exc_info.value.code == "upstream_timeout"


class TestFactory:
    """Client construction from settings."""

    def test_create_upstream_client_uses_settings(self) -> None:
        client = create_upstream_client(UpstreamSettings(base=BASE, timeout_seconds=2.5))

        assert isinstance(client, HubEauClient)
        assert str(client.client.base_url).rstrip("/") == BASE
        assert client.client.timeout.read == 2.5
