"""Response cache backends.

Routes and services depend on ``AbstractResponseCache``; the backend is picked
once when the application is built.
"""

from app.adapters.cache.base import AbstractResponseCache
from app.adapters.cache.in_memory import InMemoryTTLCache, NullCache
from app.adapters.cache.keys import communes_cache_key, resultats_cache_key

__all__ = [
    "AbstractResponseCache",
    "InMemoryTTLCache",
    "NullCache",
    "communes_cache_key",
    "resultats_cache_key",
]
