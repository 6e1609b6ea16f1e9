"""Cache configuration model."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from anibridge.shared.constants import Cache


def _default_db_path() -> str:
    return str(Path.home() / Cache.DIRECTORY / Cache.DB_FILENAME)


class CacheSettings(BaseModel):
    """Cache configuration.

    The durable tier lives in a SQLite file; the in-memory tier lasts
    for the process.
    """

    enabled: bool = Field(default=True, description="Enable caching")
    db_path: str = Field(
        default_factory=_default_db_path,
        description="SQLite file of the durable tier",
    )
    namespace: str = Field(
        default=Cache.NAMESPACE,
        min_length=1,
        description="Key prefix of the durable tier",
    )
    durable_ttl: int = Field(
        default=Cache.DURABLE_TTL,
        gt=0,
        description="Default durable entry lifetime in seconds",
    )
    memory_ttl: int = Field(
        default=Cache.MEMORY_TTL,
        gt=0,
        description="Default in-memory entry lifetime in seconds",
    )
    sweep_on_startup: bool = Field(
        default=True,
        description="Delete expired durable entries when the cache opens",
    )


__all__ = ["CacheSettings"]
