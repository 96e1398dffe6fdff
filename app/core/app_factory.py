from __future__ import annotations

"""Application factory for FastAPI app.

Builds the shared state (rate limiter, response cache, upstream client,
proxy service) once per application and wires middleware, handlers and
routers around it. Tests build isolated applications with their own state.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI

from app.adapters.cache.base import AbstractResponseCache
from app.adapters.cache.in_memory import InMemoryTTLCache, NullCache
from app.adapters.rate_limit.base import AbstractRateLimiter
from app.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from app.adapters.upstream.base import AbstractUpstreamClient
from app.adapters.upstream.factory import create_upstream_client
from app.adapters.upstream.local_communes import LocalCommuneDirectory
from app.api.routes import health_router, proxy_router
from app.core.config import ProxySettings, Settings, settings as default_settings
from app.core.exception_handlers import setup_exception_handlers
from app.core.logging import configure_logging
from app.core.middleware import cors_middleware, request_id_middleware
from app.services.proxy_service import ProxyService

logger = logging.getLogger(__name__)


def build_cache(proxy_settings: ProxySettings) -> AbstractResponseCache:
    if not proxy_settings.cache_enabled:
        return NullCache()
    return InMemoryTTLCache(ttl_seconds=proxy_settings.cache_ttl_seconds)


def build_rate_limiter(proxy_settings: ProxySettings) -> AbstractRateLimiter | None:
    if not proxy_settings.rl_enabled:
        return None
    return InMemoryFixedWindowRateLimiter(
        limit=proxy_settings.rl_max,
        window_seconds=proxy_settings.rl_window_seconds,
    )


def create_app(
    app_settings: Settings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    upstream: AbstractUpstreamClient | None = None,
    cache: AbstractResponseCache | None = None,
    rate_limiter: AbstractRateLimiter | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        app_settings: Settings to use; defaults to the environment-derived ones.
        transport: Optional httpx transport for the upstream client.
        upstream: Optional upstream client replacing the Hub'Eau client.
        cache: Optional cache backend replacing the configured one.
        rate_limiter: Optional limiter replacing the configured one.

    Returns:
        Configured FastAPI app with middleware, handlers and routers.
    """
    cfg = app_settings or default_settings

    # Logging first so subsequent init logs are formatted as desired
    configure_logging(cfg.log)

    upstream_client = upstream or create_upstream_client(cfg.upstream, transport=transport)
    local_communes = (
        LocalCommuneDirectory.from_file(cfg.proxy.communes_file)
        if cfg.proxy.communes_file
        else None
    )
    proxy_service = ProxyService(
        upstream=upstream_client,
        cache=cache or build_cache(cfg.proxy),
        upstream_settings=cfg.upstream,
        page_size=cfg.proxy.size,
        local_communes=local_communes,
    )

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "app.startup",
            extra={
                "upstream_base": cfg.upstream.base,
                "cache_ttl_ms": cfg.proxy.cache_ttl_ms,
                "rl_window_ms": cfg.proxy.rl_window_ms,
                "rl_max": cfg.proxy.rl_max,
            },
        )
        yield
        await upstream_client.aclose()

    app = FastAPI(
        title="Hub'Eau Water Quality Proxy",
        description=(
            "Proxy cache et limité en débit devant l'API Hub'Eau qualité de l'eau "
            "potable: recherche des communes par code postal et des résultats "
            "d'analyse par commune et paramètre, avec un schéma de sortie stable."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.settings = cfg
    app.state.proxy_service = proxy_service
    app.state.rate_limiter = rate_limiter or build_rate_limiter(cfg.proxy)

    # Middleware (last registered runs first)
    app.middleware("http")(cors_middleware)
    app.middleware("http")(request_id_middleware)

    # Exception handlers
    setup_exception_handlers(app)

    # Routers
    app.include_router(proxy_router)
    app.include_router(health_router)

    return app
