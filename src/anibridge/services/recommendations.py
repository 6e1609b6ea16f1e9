"""Title recommendations from the metadata provider.

Three strategies are tried in order and the first that yields anything
wins: titles related to the source (sequels, prequels, spin-offs, side
stories), the best-scored titles sharing its leading genres, and finally
the most popular titles overall. Results are kept in the durable cache.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from anibridge.services.cache import CacheService, CacheTier
from anibridge.services.metadata import AnimeRecord, MetadataProviderClient, TopFilter
from anibridge.shared.constants import CacheKeys, CacheTTL, RecommendationPolicy
from anibridge.shared.errors import AniBridgeError
from anibridge.shared.logging import log_operation_error

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecommendationResult:
    """Recommended titles and the strategy that produced them."""

    recommendations: list[AnimeRecord] = field(default_factory=list)
    recommendation_type: str = RecommendationPolicy.TYPE_TOP

    def to_dict(self) -> dict[str, Any]:
        return {
            "recommendations": [record.model_dump(mode="json") for record in self.recommendations],
            "recommendation_type": self.recommendation_type,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RecommendationResult:
        return cls(
            recommendations=[
                AnimeRecord.model_validate(item) for item in data.get("recommendations", [])
            ],
            recommendation_type=data.get("recommendation_type", RecommendationPolicy.TYPE_TOP),
        )


class RecommendationService:
    """Build recommendations for a metadata provider title.

    Attributes:
        metadata: Metadata provider client
        cache: Cache service (durable tier), or None to always fetch
    """

    def __init__(
        self,
        metadata: MetadataProviderClient,
        cache: CacheService | None = None,
    ) -> None:
        self.metadata = metadata
        self.cache = cache

    def recommend(self, mal_id: int) -> RecommendationResult:
        """Recommendations for one title.

        Raises:
            AniBridgeError: If the source title or the genre/top lists cannot be fetched
        """
        cache_key = f"{CacheKeys.RECOMMENDATIONS}{mal_id}"
        if self.cache is not None:
            cached = self.cache.get(cache_key, CacheTier.DURABLE)
            if cached is not None:
                logger.debug("Using cached recommendations for %d", mal_id)
                return RecommendationResult.from_dict(cached)

        anime = self.metadata.get_anime(mal_id)

        result = self._related(anime) or self._by_genre(anime) or self._top(anime)
        logger.info(
            "Built %d '%s' recommendations for %d",
            len(result.recommendations),
            result.recommendation_type,
            mal_id,
        )

        if self.cache is not None:
            self.cache.set(
                cache_key,
                result.to_dict(),
                CacheTier.DURABLE,
                CacheTTL.RECOMMENDATIONS[result.recommendation_type],
            )
        return result

    def _related(self, anime: AnimeRecord) -> RecommendationResult | None:
        related_ids: list[int] = []
        for relation in anime.relations:
            if relation.relation not in RecommendationPolicy.RELATION_KINDS:
                continue
            for entry in relation.entry:
                if entry.type == "anime" and entry.mal_id not in related_ids:
                    related_ids.append(entry.mal_id)

        records: list[AnimeRecord] = []
        for related_id in related_ids:
            try:
                records.append(self.metadata.get_anime(related_id))
            except AniBridgeError as e:
                log_operation_error(
                    logger=logger,
                    error=e,
                    operation="fetch_related_anime",
                    additional_context={"mal_id": related_id},
                )

        if not records:
            return None
        return RecommendationResult(records, RecommendationPolicy.TYPE_RELATED)

    def _by_genre(self, anime: AnimeRecord) -> RecommendationResult | None:
        genre_ids = [genre.mal_id for genre in anime.genres[: RecommendationPolicy.GENRE_COUNT]]
        if not genre_ids:
            return None

        records = self.metadata.search_anime(
            genres=genre_ids,
            limit=RecommendationPolicy.GENRE_LIMIT,
        )
        records = [record for record in records if record.mal_id != anime.mal_id]
        if not records:
            return None
        return RecommendationResult(records, RecommendationPolicy.TYPE_GENRE)

    def _top(self, anime: AnimeRecord) -> RecommendationResult:
        records = [
            record
            for record in self.metadata.get_top(TopFilter.POPULARITY)
            if record.mal_id != anime.mal_id
        ]
        return RecommendationResult(
            records[: RecommendationPolicy.TOP_LIMIT],
            RecommendationPolicy.TYPE_TOP,
        )
