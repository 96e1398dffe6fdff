"""Rate limiter interfaces.

The API depends on this abstraction (not the concrete implementation) so the
in-process store can be replaced by a shared one without touching routes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitResult:
    """Result of a rate limit consume operation.

    Attributes:
        allowed: Whether the request is allowed to proceed.
        limit: Max requests per window.
        remaining: Remaining requests in the current window (0 when blocked).
        reset_at: UNIX epoch seconds when the current window ends.
        retry_after_seconds: Suggested wait time in seconds when blocked.
    """

    allowed: bool
    limit: int
    remaining: int
    reset_at: int
    retry_after_seconds: int | None


class AbstractRateLimiter(ABC):
    """Interface for rate limiters."""

    @property
    @abstractmethod
    def limit(self) -> int:
        """Maximum number of requests per window."""

    @property
    @abstractmethod
    def window_seconds(self) -> float:
        """Window duration in seconds."""

    @abstractmethod
    def consume(self, identifier: str) -> RateLimitResult:
        """Count one request for ``identifier`` and decide whether it may proceed.

        Args:
            identifier: Client identifier (usually its IP address).

        Returns:
            RateLimitResult describing whether it was allowed.
        """
        raise NotImplementedError

    def allow(self, identifier: str) -> bool:
        """Shorthand for ``consume(identifier).allowed``."""
        return self.consume(identifier).allowed
