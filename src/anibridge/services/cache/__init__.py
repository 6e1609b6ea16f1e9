"""Durable and in-memory cache tiers."""

from anibridge.services.cache.durable import DurableCache
from anibridge.services.cache.memory import MemoryCache, ReaperScheduler
from anibridge.services.cache.models import CacheEntry, CacheTier
from anibridge.services.cache.service import CacheService

__all__ = [
    "CacheEntry",
    "CacheService",
    "CacheTier",
    "DurableCache",
    "MemoryCache",
    "ReaperScheduler",
]
