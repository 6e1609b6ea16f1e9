"""
Cache Constants

Namespaces, key prefixes and default lifetimes for both cache tiers.
"""

from typing import ClassVar

from .system import HOUR, MINUTE


class Cache:
    """Cache storage configuration."""

    # Bump the version suffix whenever the stored entry format changes
    NAMESPACE = "anibridge_cache_v1_"
    DB_FILENAME = "cache.db"
    DIRECTORY = ".anibridge"

    DURABLE_TTL = 24 * HOUR
    MEMORY_TTL = 10 * MINUTE


class CacheKeys:
    """Logical key prefixes for cached values."""

    RESOLUTION = "resolution:"
    EPISODES = "episodes:"
    RECOMMENDATIONS = "recommendations_"


class CacheTTL:
    """Per-value lifetimes in seconds."""

    RESOLUTION = 5 * MINUTE
    EPISODES = 10 * MINUTE
    RECOMMENDATIONS: ClassVar[dict[str, int]] = {
        "related": 30 * MINUTE,
        "genre": 30 * MINUTE,
        "top": HOUR,
    }
