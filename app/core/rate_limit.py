"""Rate limiting dependency for FastAPI routes.

The limiter instance is built by the app factory and stored on
``app.state.rate_limiter``; this module only extracts the client identifier
and turns a rejection into ``RateLimitedError``.

Rate limiting strategy:
- Fixed window per client identifier.
- Identifier is the first X-Forwarded-For entry, else the peer address,
  else "unknown".
"""

from __future__ import annotations

import hashlib
import logging

from fastapi import Request

from app.adapters.rate_limit.base import AbstractRateLimiter
from app.core.config import ProxySettings
from app.core.errors import RateLimitedError

logger = logging.getLogger(__name__)

FORWARDED_FOR_HEADER = "X-Forwarded-For"
UNKNOWN_CLIENT = "unknown"


def client_identifier(request: Request) -> str:
    """Return the identifier used to partition rate limit budgets.

    Examples:
        ``X-Forwarded-For: 203.0.113.7, 10.0.0.1`` -> ``"203.0.113.7"``
    """

    forwarded = request.headers.get(FORWARDED_FOR_HEADER, "")
    first = forwarded.split(",")[0].strip()
    if first:
        return first
    if request.client and request.client.host:
        return request.client.host
    return UNKNOWN_CLIENT


def _hash_identifier(identifier: str) -> str:
    """Hash the identifier for logging without exposing client addresses."""
    return hashlib.sha256(identifier.encode()).hexdigest()[:16]


def get_rate_limiter(request: Request) -> AbstractRateLimiter | None:
    return getattr(request.app.state, "rate_limiter", None)


async def enforce_rate_limit(request: Request) -> None:
    """FastAPI dependency enforcing rate limits.

    Consumes one unit from the client's budget and raises when the window
    is exhausted. A no-op when the application has no limiter (disabled).

    Raises:
        RateLimitedError: When the client exceeded its budget.
    """

    limiter = get_rate_limiter(request)
    if limiter is None:
        return

    proxy_settings: ProxySettings = request.app.state.settings.proxy
    identifier = client_identifier(request)
    result = limiter.consume(identifier)
    if result.allowed:
        logger.debug(
            "rate_limit.allowed",
            extra={
                "key_hash": _hash_identifier(identifier),
                "limit": result.limit,
                "remaining": result.remaining,
            },
        )
        return

    retry_after = result.retry_after_seconds or 0
    logger.warning(
        "rate_limit.exceeded",
        extra={
            "key_hash": _hash_identifier(identifier),
            "limit": result.limit,
            "window_ms": proxy_settings.rl_window_ms,
            "retry_after_s": retry_after,
        },
    )

    headers: dict[str, str] = {}
    if proxy_settings.rl_include_headers:
        headers["Retry-After"] = str(retry_after)
        headers["X-RateLimit-Limit"] = str(result.limit)
        headers["X-RateLimit-Remaining"] = str(result.remaining)
        headers["X-RateLimit-Reset"] = str(result.reset_at)

    raise RateLimitedError(
        code="rate_limited",
        message="rate_limited",
        details={
            "window_ms": proxy_settings.rl_window_ms,
            "max": result.limit,
            "retry_after": retry_after,
            "context": {"headers": headers},
        },
    )
