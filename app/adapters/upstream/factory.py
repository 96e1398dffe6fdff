"""Factory for the upstream client."""

import httpx

from app.adapters.upstream.base import AbstractUpstreamClient
from app.adapters.upstream.hubeau_client import HubEauClient
from app.core.config import UpstreamSettings


def create_upstream_client(
    upstream_settings: UpstreamSettings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AbstractUpstreamClient:
    """Instantiate the upstream client from configuration.

    Args:
        upstream_settings: Base URL and timeout of the upstream API.
        transport: Optional httpx transport (tests pass ``httpx.MockTransport``).

    Returns:
        AbstractUpstreamClient: Configured client instance.
    """
    return HubEauClient(
        base_url=upstream_settings.base,
        timeout_seconds=upstream_settings.timeout_seconds,
        transport=transport,
    )
