"""In-memory fixed-window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: uses a lock around shared state.
- Each client's window starts with its first request, so a burst of up to
  twice the limit is possible across a window edge.
"""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable

from app.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult


@dataclass
class RateRecord:
    window_start: float
    count: int


class InMemoryFixedWindowRateLimiter(AbstractRateLimiter):
    """Rate limiter counting requests in a fixed window per identifier.

    A window opens on an identifier's first request and lasts
    ``window_seconds``. Rejected requests still count toward the window.
    """

    def __init__(
        self,
        *,
        limit: int,
        window_seconds: float,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the in-memory rate limiter.

        Args:
            limit: Maximum number of allowed requests per window.
            window_seconds: Size of the fixed window in seconds.
            clock: Time source function returning UNIX time in seconds.

        Raises:
            ValueError: If limit or window_seconds are invalid.
        """
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")

        self._limit = limit
        self._window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._records: dict[str, RateRecord] = {}

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def window_seconds(self) -> float:
        return self._window_seconds

    def _touch_locked(self, identifier: str, now: float) -> RateRecord:
        record = self._records.get(identifier)
        if record is None or now - record.window_start > self._window_seconds:
            record = RateRecord(window_start=now, count=1)
            self._records[identifier] = record
        else:
            record.count += 1
        return record

    def consume(self, identifier: str) -> RateLimitResult:
        """Count the request and return the allowance decision.

        Raises:
            ValueError: If identifier is empty.
        """
        if not identifier:
            raise ValueError("identifier must be a non-empty string")

        now = self._clock()
        with self._lock:
            record = self._touch_locked(identifier, now)
            count = record.count
            reset_at = record.window_start + self._window_seconds

        remaining = max(0, self._limit - count)
        if count <= self._limit:
            return RateLimitResult(
                allowed=True,
                limit=self._limit,
                remaining=remaining,
                reset_at=int(math.ceil(reset_at)),
                retry_after_seconds=None,
            )

        return RateLimitResult(
            allowed=False,
            limit=self._limit,
            remaining=0,
            reset_at=int(math.ceil(reset_at)),
            retry_after_seconds=max(0, int(math.ceil(reset_at - now))),
        )

    def reset(self) -> None:
        """Forget every tracked identifier."""
        with self._lock:
            self._records.clear()
