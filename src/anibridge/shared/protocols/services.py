"""Service protocols for dependency inversion.

Core modules depend on these interfaces instead of importing the
services layer directly.
"""

from __future__ import annotations

from typing import Any, Protocol

from anibridge.core.matching.models import Candidate


class CatalogSearcherProtocol(Protocol):
    """Anything that can search the streaming catalog by title.

    Example:
        >>> from anibridge.services.catalog import StreamingCatalogClient
        >>> searcher: CatalogSearcherProtocol = StreamingCatalogClient(fetch_client)
        >>> candidates = searcher.search("Attack on Titan")
    """

    def search(self, title: str) -> list[Candidate]:
        """Return candidates in discovery order; network errors propagate."""
        ...


class KeyValueCacheProtocol(Protocol):
    """Minimal single-tier cache interface."""

    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any, ttl: float | None = None) -> None: ...
