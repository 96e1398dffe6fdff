"""In-memory TTL cache for normalized upstream responses.

Thread-safe and process-local. Entries expire after a single TTL and are
evicted lazily when read; there is no size cap, so the store grows with the
number of distinct keys seen during the process lifetime.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable

from app.adapters.cache.base import AbstractResponseCache

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    """Container for a cached value with its insertion time."""

    key: str
    value: Any
    inserted_at: float


class InMemoryTTLCache(AbstractResponseCache):
    """Thread-safe, in-memory TTL cache.

    Attributes:
        ttl_seconds: Time-to-live applied to all entries.
    """

    def __init__(
        self,
        ttl_seconds: float,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0")

        self._ttl = ttl_seconds
        self._clock = clock
        self._store: dict[str, CacheEntry] = {}
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return (
            f"InMemoryTTLCache(ttl_seconds={self._ttl}, size={len(self._store)}, "
            f"hits={self._hits}, misses={self._misses}, evictions={self._evictions})"
        )

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def get(self, key: str) -> Any | None:
        """Retrieve a cached value if it exists and is not expired.

        A stale entry is evicted as a side effect.

        Args:
            key: Cache key.

        Returns:
            Cached value or None if not found/expired.
        """

        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                self._misses += 1
                logger.debug("cache.miss", extra={"cache_key": key, "reason": "not_found"})
                return None

            if self._is_expired(entry):
                del self._store[key]
                self._evictions += 1
                self._misses += 1
                logger.debug("cache.miss", extra={"cache_key": key, "reason": "expired"})
                return None

            self._hits += 1
            logger.debug("cache.hit", extra={"cache_key": key})
            return entry.value

    def put(self, key: str, value: Any) -> None:
        """Store a value stamped with the current time.

        Args:
            key: Cache key.
            value: JSON-serializable payload.
        """

        with self._lock:
            self._store[key] = CacheEntry(key=key, value=value, inserted_at=self._clock())
            logger.debug(
                "cache.set",
                extra={
                    "cache_key": key,
                    "size": len(self._store),
                    "ttl_s": self._ttl,
                },
            )

    def clear(self) -> None:
        """Remove all cached entries and reset counters."""

        with self._lock:
            self._store.clear()
            self._hits = 0
            self._misses = 0
            self._evictions = 0

    def stats(self) -> dict[str, int | float | None]:
        with self._lock:
            return {
                "ttl_seconds": self._ttl,
                "entries": len(self._store),
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
            }

    def _is_expired(self, entry: CacheEntry) -> bool:
        return self._clock() - entry.inserted_at > self._ttl


class NullCache(AbstractResponseCache):
    """Backend used when caching is disabled: every lookup misses."""

    def get(self, key: str) -> Any | None:
        return None

    def put(self, key: str, value: Any) -> None:
        return None

    def clear(self) -> None:
        return None

    def stats(self) -> dict[str, int | float | None]:
        return {"ttl_seconds": None, "entries": 0, "hits": 0, "misses": 0, "evictions": 0}
