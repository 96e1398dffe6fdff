"""Upstream adapter layer - Hub'Eau HTTP client and local commune directory."""

from app.adapters.upstream.base import AbstractUpstreamClient
from app.adapters.upstream.factory import create_upstream_client
from app.adapters.upstream.hubeau_client import HubEauClient
from app.adapters.upstream.local_communes import LocalCommuneDirectory

__all__ = [
    "AbstractUpstreamClient",
    "HubEauClient",
    "LocalCommuneDirectory",
    "create_upstream_client",
]
