"""Cache entry model.

A CacheEntry wraps a cached value with the time it was stored and its
time-to-live. Entries are serialized to JSON with orjson for the durable
tier; the ephemeral tier keeps them as objects.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

import orjson


class CacheTier(str, Enum):
    """Cache tiers."""

    DURABLE = "durable"
    MEMORY = "memory"


@dataclass(frozen=True)
class CacheEntry:
    """Cached value with its storage time and lifetime.

    Attributes:
        data: Cached value (must be JSON-serializable for the durable tier)
        stored_at: Epoch seconds when the value was written
        ttl: Lifetime in seconds

    Example:
        >>> entry = CacheEntry(data={"a": 1}, stored_at=100.0, ttl=10)
        >>> entry.is_expired(now=105.0)
        False
        >>> entry.is_expired(now=110.5)
        True
    """

    data: Any
    stored_at: float
    ttl: float

    def is_expired(self, now: float) -> bool:
        """An entry is absent once ``now - stored_at > ttl``; a non-positive ttl is never readable."""
        if self.ttl <= 0:
            return True
        return now - self.stored_at > self.ttl

    def expires_at(self) -> float:
        return self.stored_at + self.ttl

    def to_json(self) -> bytes:
        """Serialize the entry with orjson."""
        return orjson.dumps(
            {"data": self.data, "stored_at": self.stored_at, "ttl": self.ttl},
        )

    @classmethod
    def from_json(cls, raw: bytes | str) -> CacheEntry:
        """Deserialize an entry.

        Raises:
            orjson.JSONDecodeError: If raw is not valid JSON
            KeyError: If a required field is missing
            TypeError, ValueError: If a field has the wrong type
        """
        payload = orjson.loads(raw)
        return cls(
            data=payload["data"],
            stored_at=float(payload["stored_at"]),
            ttl=float(payload["ttl"]),
        )
