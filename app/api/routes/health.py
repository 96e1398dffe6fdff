from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(request: Request) -> dict:
    """Health check endpoint for load balancers and monitoring.

    Not rate limited. Reports cache counters so operators can see whether
    the proxy is absorbing upstream traffic.

    Returns:
        dict: ``{"status": "ok", "cache": {...}}``.
    """

    return {
        "status": "ok",
        "cache": request.app.state.proxy_service.cache.stats(),
    }
