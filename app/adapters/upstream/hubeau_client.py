"""Hub'Eau HTTP client adapter."""

import logging
import time
from typing import Any

import httpx

from app.adapters.upstream.base import AbstractUpstreamClient, QueryParams
from app.core.errors import UpstreamError

logger = logging.getLogger(__name__)


class HubEauClient(AbstractUpstreamClient):
    """Async JSON client for the Hub'Eau API.

    A single ``httpx.AsyncClient`` is shared by all requests so connections
    are pooled. One attempt per call: failures surface immediately.
    """

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the underlying async HTTP client.

        Args:
            base_url: Upstream base URL (scheme and host).
            timeout_seconds: Timeout applied to connect, read, write and pool waits.
            transport: Optional transport override (used by tests).
        """
        self.client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_seconds,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    async def get_json(self, path: str, params: QueryParams) -> Any:
        """Fetch ``path`` with ``params`` and decode the JSON body.

        Raises:
            UpstreamError: On transport failure, timeout, non-2xx status or invalid JSON.
        """
        start = time.perf_counter()
        try:
            response = await self.client.get(path, params=params)
        except httpx.TimeoutException as exc:
            logger.warning("upstream.timeout", extra={"path": path, "error_type": type(exc).__name__})
            raise UpstreamError(
                code="upstream_timeout",
                message=f"upstream timeout on {path}",
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("upstream.unreachable", extra={"path": path, "error_msg": str(exc)})
            raise UpstreamError(
                code="upstream_unreachable",
                message=f"upstream unreachable: {exc}",
            ) from exc

        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "upstream.request",
            extra={
                "path": path,
                "status_code": response.status_code,
                "duration_ms": round(duration_ms, 2),
            },
        )

        if not response.is_success:
            raise UpstreamError(
                code="upstream_status",
                message=f"{response.status_code} {response.reason_phrase}".strip(),
                details={"http_status": response.status_code, "url": str(response.url)},
            )

        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError(
                code="upstream_invalid_json",
                message=f"upstream returned invalid JSON: {exc}",
                details={"http_status": response.status_code},
            ) from exc

    async def aclose(self) -> None:
        await self.client.aclose()
