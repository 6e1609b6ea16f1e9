"""Episode retrieval with confidence gating and caching."""

from __future__ import annotations

import logging

from anibridge.core.matching.models import EpisodeItem, ResolutionResult
from anibridge.services.cache import CacheService, CacheTier
from anibridge.services.catalog import StreamingCatalogClient
from anibridge.shared.constants import CacheKeys, CacheTTL, ConfidenceThresholds

logger = logging.getLogger(__name__)


class EpisodeService:
    """Fetch episode lists for resolved titles.

    Non-empty lists are kept in the in-memory cache tier; an empty list is
    never cached so the next call asks the catalog again.

    Attributes:
        catalog: Streaming catalog client
        cache: Cache service, or None to always fetch
        ttl: Lifetime of a cached episode list
        confidence_floor: Results at or below this confidence are not fetched
    """

    def __init__(
        self,
        catalog: StreamingCatalogClient,
        cache: CacheService | None = None,
        ttl: float = CacheTTL.EPISODES,
        confidence_floor: float = ConfidenceThresholds.EPISODE_FLOOR,
    ) -> None:
        self.catalog = catalog
        self.cache = cache
        self.ttl = ttl
        self.confidence_floor = confidence_floor

    def fetch_episodes(self, catalog_id: str) -> list[EpisodeItem]:
        """Return the episode list for a catalog id, from cache when possible.

        Network errors propagate; a malformed payload yields ``[]``.
        """
        if self.cache is None:
            return self.catalog.fetch_episodes(catalog_id)

        cached = self.cache.get_or_fetch(
            f"{CacheKeys.EPISODES}{catalog_id}",
            lambda: [item.to_dict() for item in self.catalog.fetch_episodes(catalog_id)],
            tier=CacheTier.MEMORY,
            ttl=self.ttl,
            should_cache=bool,
        )
        return [EpisodeItem.from_dict(item) for item in cached]

    def episodes_for(self, result: ResolutionResult) -> list[EpisodeItem]:
        """Fetch episodes for a resolution result only if it is confident enough.

        Returns:
            Episodes, or ``[]`` without any request when the result has no id
            or its confidence is not above the floor
        """
        if result.external_id is None or result.confidence <= self.confidence_floor:
            logger.info(
                "Skipping episode fetch (id=%s, confidence=%.2f)",
                result.external_id,
                result.confidence,
            )
            return []
        return self.fetch_episodes(result.external_id)
