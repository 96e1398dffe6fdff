"""Cache backend interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class AbstractResponseCache(ABC):
    """Key/value store for normalized upstream payloads.

    Stored values are JSON-serializable lists, so ``None`` always means miss.
    """

    @abstractmethod
    def get(self, key: str) -> Any | None:
        """Return the cached value for ``key`` or None on miss."""

    @abstractmethod
    def put(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``, replacing any previous entry."""

    @abstractmethod
    def clear(self) -> None:
        """Remove all cached entries."""

    @abstractmethod
    def stats(self) -> dict[str, int | float | None]:
        """Return lightweight cache metrics without exposing values."""
