"""Proxy service orchestrating validation, caching, upstream calls and normalization.

Each lookup follows the same pipeline:
- Validate required parameters before touching the cache or the upstream
- Derive the cache key and return on hit
- Fetch from the upstream API (single attempt, no retry)
- Normalize the payload into the stable schema
- Store the normalized payload and return it

Concurrent misses on the same key are not deduplicated: each one fetches
from the upstream and the last store wins.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from app.adapters.cache.base import AbstractResponseCache
from app.adapters.cache.keys import communes_cache_key, resultats_cache_key
from app.adapters.upstream.base import AbstractUpstreamClient
from app.adapters.upstream.local_communes import LocalCommuneDirectory
from app.core.config import UpstreamSettings
from app.core.errors import ValidationAppError
from app.services.normalizer import normalize_communes, normalize_resultats

logger = logging.getLogger(__name__)


def _require(value: str | None, parameter: str) -> str:
    """Return the trimmed parameter or raise when it is empty.

    Raises:
        ValidationAppError: If the parameter is absent or blank.
    """
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValidationAppError(
            code="missing_parameter",
            message=f"{parameter} manquant",
            details={"parameter": parameter},
        )
    return cleaned


def _clean_param_ids(param_ids: Iterable[str] | None) -> list[str]:
    return [p.strip() for p in param_ids or [] if p and p.strip()]


class ProxyService:
    """Service answering commune and results lookups.

    Attributes:
        upstream: Client for the upstream API.
        cache: Backend storing normalized payloads.
        local_communes: Optional directory consulted before the upstream.
    """

    def __init__(
        self,
        upstream: AbstractUpstreamClient,
        cache: AbstractResponseCache,
        upstream_settings: UpstreamSettings,
        *,
        page_size: int = 25,
        local_communes: LocalCommuneDirectory | None = None,
    ) -> None:
        self.upstream = upstream
        self.cache = cache
        self.local_communes = local_communes
        self._path_communes = upstream_settings.path_communes
        self._path_resultats = upstream_settings.path_resultats
        self._page_size = page_size

    async def communes(self, postal: str | None) -> list[dict[str, Any]]:
        """Look up the communes served by a postal code.

        Args:
            postal: Postal code (or prefix when the local directory is used).

        Returns:
            Normalized commune records.

        Raises:
            ValidationAppError: If ``postal`` is missing.
            UpstreamError: If the upstream call fails.
        """
        postal = _require(postal, "postal")

        key = communes_cache_key(postal)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        if self.local_communes is not None:
            matches = self.local_communes.search(postal)
            if matches:
                logger.info("communes.local_hit", extra={"postal": postal, "count": len(matches)})
                records = normalize_communes(matches, postal)
                self.cache.put(key, records)
                return records

        raw = await self.upstream.get_json(self._path_communes, {"code_postal": postal})
        records = normalize_communes(raw, postal)
        self.cache.put(key, records)
        return records

    async def resultats(
        self,
        insee: str | None,
        param_ids: Iterable[str] | None = None,
    ) -> list[dict[str, Any]]:
        """Look up analysis results of a commune.

        Args:
            insee: INSEE code of the commune.
            param_ids: Optional parameter codes to filter on (any order).

        Returns:
            Normalized result records.

        Raises:
            ValidationAppError: If ``insee`` is missing.
            UpstreamError: If the upstream call fails.
        """
        insee = _require(insee, "insee")
        codes = _clean_param_ids(param_ids)

        key = resultats_cache_key(insee, codes)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        params: dict[str, Any] = {"code_commune": insee}
        if codes:
            params["code_parametre"] = codes
        params["size"] = str(self._page_size)
        params["order"] = "desc"

        raw = await self.upstream.get_json(self._path_resultats, params)
        records = normalize_resultats(raw)
        self.cache.put(key, records)
        return records
