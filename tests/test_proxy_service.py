"""Tests for the proxy service pipeline (validation, cache, upstream, normalization)."""

from unittest.mock import AsyncMock

import pytest

from app.adapters.cache.in_memory import InMemoryTTLCache
from app.adapters.upstream.base import AbstractUpstreamClient
from app.adapters.upstream.local_communes import LocalCommuneDirectory
from app.core.config import UpstreamSettings
from app.core.errors import UpstreamError, ValidationAppError
from app.services.proxy_service import ProxyService


def _service(payload=None, *, local=None, page_size: int = 25) -> tuple[ProxyService, AsyncMock]:
    upstream = AsyncMock(spec=AbstractUpstreamClient)
    upstream.get_json.return_value = payload if payload is not None else {"data": []}
    service = ProxyService(
        upstream=upstream,
        cache=InMemoryTTLCache(ttl_seconds=60),
        upstream_settings=UpstreamSettings(),
        page_size=page_size,
        local_communes=local,
    )
    return service, upstream


class TestValidation:
    """Required parameters are checked before cache or upstream."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("postal", [None, "", "   "])
    async def test_communes_requires_postal(self, postal) -> None:
        service, upstream = _service()

        with pytest.raises(ValidationAppError) as exc_info:
            await service.communes(postal)

        assert exc_info.value.message == "postal manquant"
        upstream.get_json.assert_not_called()
        assert service.cache.stats()["misses"] == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("insee", [None, "", " "])
    async def test_resultats_requires_insee(self, insee) -> None:
        service, upstream = _service()

        with pytest.raises(ValidationAppError) as exc_info:
            await service.resultats(insee, ["1301"])

        assert exc_info.value.message == "insee manquant"
        upstream.get_json.assert_not_called()


class TestCommunes:
    """Commune lookups."""

    @pytest.mark.asyncio
    async def test_fetches_normalizes_and_caches(self) -> None:
        service, upstream = _service({"data": [{"nom": "Paris", "code_insee": "75056"}]})

        first = await service.communes(" 75001 ")
        second = await service.communes("75001")

        assert first == [{"nom": "Paris", "code_insee": "75056", "code_postal": "75001"}]
        assert second == first
        upstream.get_json.assert_awaited_once_with("/api/v1/communes", {"code_postal": "75001"})

    @pytest.mark.asyncio
    async def test_empty_upstream_result_is_cached(self) -> None:
        service, upstream = _service([])

        assert await service.communes("99999") == []
        assert await service.communes("99999") == []
        assert upstream.get_json.await_count == 1

    @pytest.mark.asyncio
    async def test_local_directory_short_circuits_upstream(self) -> None:
        local = LocalCommuneDirectory(
            [
                {"nom": "Bourg-en-Bresse", "code_insee": "01053", "code_postal": "01000"},
                {"nom": "Paris", "code_insee": "75056", "code_postal": "75001"},
            ]
        )
        service, upstream = _service(local=local)

        result = await service.communes("010")

        assert result == [{"nom": "Bourg-en-Bresse", "code_insee": "01053", "code_postal": "01000"}]
        upstream.get_json.assert_not_called()

    @pytest.mark.asyncio
    async def test_local_directory_miss_falls_through(self) -> None:
        local = LocalCommuneDirectory([{"nom": "Paris", "code_postal": "75001"}])
        service, upstream = _service([{"nom": "Lyon", "code_insee": "69123"}], local=local)

        result = await service.communes("69001")

        assert result == [{"nom": "Lyon", "code_insee": "69123", "code_postal": "69001"}]
        upstream.get_json.assert_awaited_once()


class TestResultats:
    """Results lookups."""

    @pytest.mark.asyncio
    async def test_builds_upstream_query(self) -> None:
        service, upstream = _service(page_size=10)

        await service.resultats("75056", ["1340", "1301"])

        upstream.get_json.assert_awaited_once_with(
            "/api/v1/qualite/eau_potable/resultats",
            {
                "code_commune": "75056",
                "code_parametre": ["1340", "1301"],
                "size": "10",
                "order": "desc",
            },
        )

    @pytest.mark.asyncio
    async def test_no_param_filter_omits_code_parametre(self) -> None:
        service, upstream = _service()

        await service.resultats("75056", None)

        params = upstream.get_json.await_args.args[1]
        assert "code_parametre" not in params

    @pytest.mark.asyncio
    async def test_param_order_shares_cache_entry(self) -> None:
        service, upstream = _service({"data": [{"code_parametre": "1301", "resultat": 0}]})

        first = await service.resultats("75056", ["1301", "1340"])
        second = await service.resultats("75056", ["1340", "1301"])

        assert first == second
        assert first[0]["valeur"] == 0
        assert upstream.get_json.await_count == 1

    @pytest.mark.asyncio
    async def test_blank_param_ids_are_ignored(self) -> None:
        service, upstream = _service()

        await service.resultats("75056", ["", " 1301 "])

        params = upstream.get_json.await_args.args[1]
        assert params["code_parametre"] == ["1301"]

    @pytest.mark.asyncio
    async def test_upstream_failure_is_not_cached(self) -> None:
        service, upstream = _service()
        upstream.get_json.side_effect = UpstreamError(code="upstream_status", message="502 Bad Gateway")

        with pytest.raises(UpstreamError):
            await service.resultats("75056", [])

        assert service.cache.stats()["entries"] == 0
