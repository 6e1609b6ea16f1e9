"""Two-tier cache service.

CacheService fronts the durable and in-memory tiers behind one API. It is
built once per process by the dependency container and injected into the
services that need it.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, TypeVar

from anibridge.services.cache.durable import DurableCache
from anibridge.services.cache.memory import MemoryCache
from anibridge.services.cache.models import CacheTier

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CacheService:
    """Read-through cache over a durable and an in-memory tier.

    Example:
        >>> service = CacheService(DurableCache(":memory:"), MemoryCache())
        >>> service.set("episodes:1", [{"number": 1}], tier=CacheTier.MEMORY, ttl=600)
        >>> service.get("episodes:1", tier=CacheTier.MEMORY)
        [{'number': 1}]
    """

    def __init__(self, durable: DurableCache, memory: MemoryCache) -> None:
        self.durable = durable
        self.memory = memory

    def _tier(self, tier: CacheTier) -> DurableCache | MemoryCache:
        return self.durable if tier is CacheTier.DURABLE else self.memory

    def get(self, key: str, tier: CacheTier = CacheTier.DURABLE) -> Any | None:
        return self._tier(tier).get(key)

    def set(
        self,
        key: str,
        value: Any,
        tier: CacheTier = CacheTier.DURABLE,
        ttl: float | None = None,
    ) -> None:
        self._tier(tier).set(key, value, ttl)

    def delete(self, key: str, tier: CacheTier = CacheTier.DURABLE) -> bool:
        return self._tier(tier).delete(key)

    def clear_expired(self) -> int:
        """Sweep both tiers. Returns the total number of removed entries."""
        removed = self.durable.clear_expired() + self.memory.clear_expired()
        if removed:
            logger.info("Removed %d expired cache entries", removed)
        return removed

    def clear(self) -> int:
        return self.durable.clear() + self.memory.clear()

    def get_or_fetch(
        self,
        key: str,
        loader: Callable[[], T],
        tier: CacheTier = CacheTier.DURABLE,
        ttl: float | None = None,
        *,
        should_cache: Callable[[T], bool] | None = None,
    ) -> T:
        """Return the cached value for ``key`` or load, store and return it.

        Args:
            key: Cache key
            loader: Called on a miss; its exceptions propagate and nothing is stored
            tier: Tier to read and write
            ttl: Lifetime for a freshly loaded value
            should_cache: Predicate deciding whether a loaded value is stored

        Returns:
            Cached or freshly loaded value
        """
        cached = self.get(key, tier)
        if cached is not None:
            logger.debug("Cache hit (%s): %s", tier.value, key)
            return cached

        logger.debug("Cache miss (%s): %s", tier.value, key)
        value = loader()
        if should_cache is None or should_cache(value):
            self.set(key, value, tier, ttl)
        return value

    def close(self) -> None:
        self.memory.close()
        self.durable.close()
