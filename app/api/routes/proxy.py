"""Single proxy endpoint dispatching on the ``action`` query parameter."""

from __future__ import annotations

import logging
import time
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query, Request, Response

from app.core.errors import InvalidActionError
from app.core.rate_limit import enforce_rate_limit
from app.schemas.records import CommuneRecord, PingResponse, RateLimitInfo, ResultRecord
from app.services.proxy_service import ProxyService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Proxy"])

ACTIONS = ("ping", "communes", "resultats")


def get_proxy_service(request: Request) -> ProxyService:
    return request.app.state.proxy_service


@router.get(
    "/api/hubeau",
    response_model=None,
    dependencies=[Depends(enforce_rate_limit)],
    responses={
        200: {"description": "PingResponse, CommuneRecord[] or ResultRecord[] depending on action"},
        400: {"description": "Missing parameter or invalid action"},
        429: {"description": "Rate limited"},
        500: {"description": "Upstream failure"},
    },
)
async def hubeau(
    request: Request,
    response: Response,
    service: Annotated[ProxyService, Depends(get_proxy_service)],
    action: str | None = None,
    postal: str | None = None,
    insee: str | None = None,
    param_id: Annotated[list[str] | None, Query()] = None,
) -> Any:
    """Proxy a Hub'Eau lookup.

    Actions:
        ping: liveness payload, never cached nor forwarded.
        communes: communes of ``postal``.
        resultats: analysis results of ``insee``, optionally filtered by
            repeated ``param_id``.

    Raises:
        InvalidActionError: If ``action`` is missing or unknown.
        ValidationAppError: If the action's required parameter is missing.
        UpstreamError: If the upstream call fails.
    """
    proxy_settings = request.app.state.settings.proxy
    response.headers["Cache-Control"] = f"public, max-age={proxy_settings.cache_ttl_ms // 1000}"

    if action == "ping":
        return PingResponse(
            ts=int(time.time() * 1000),
            rl=RateLimitInfo(window_ms=proxy_settings.rl_window_ms, max=proxy_settings.rl_max),
        )

    if action == "communes":
        records = await service.communes(postal)
        payload: list[Any] = [CommuneRecord.model_validate(r) for r in records]
    elif action == "resultats":
        records = await service.resultats(insee, param_id)
        payload = [ResultRecord.model_validate(r) for r in records]
    else:
        raise InvalidActionError(
            code="invalid_action",
            message="action invalide",
            details={"action": action or ""},
        )

    return payload
