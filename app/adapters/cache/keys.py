"""Cache key derivation for proxied requests."""

from __future__ import annotations

from typing import Iterable

PARAM_DELIMITER = ","


def communes_cache_key(postal: str) -> str:
    """Build the cache key of a commune lookup.

    Examples:
        >>> communes_cache_key("75001")
        'communes:75001'
    """
    return f"communes:{postal}"


def resultats_cache_key(insee: str, param_ids: Iterable[str]) -> str:
    """Build the cache key of a results lookup.

    Parameter codes are sorted so that the client-supplied order never
    produces distinct keys for the same query.

    Examples:
        >>> resultats_cache_key("75056", ["1340", "1301"])
        'resultats:75056:1301,1340'
        >>> resultats_cache_key("75056", [])
        'resultats:75056:'
    """
    return f"resultats:{insee}:{PARAM_DELIMITER.join(sorted(param_ids))}"
