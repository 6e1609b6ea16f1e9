"""Metadata provider client (Jikan v4)."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Sequence, TypeVar

from pydantic import ValidationError

from anibridge.services.http_client import ResilientFetchClient
from anibridge.services.metadata.models import (
    AnimeRecord,
    ProviderResponse,
    RecommendationEntry,
)
from anibridge.shared.constants import MetadataEndpoints
from anibridge.shared.errors import ErrorContext, ParseFailureError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TopFilter(str, Enum):
    """Ranking lists offered by ``/top/anime``."""

    AIRING = "airing"
    POPULARITY = "bypopularity"
    FAVORITE = "favorite"
    COMPLETED = "completed"


class MetadataProviderClient:
    """Typed access to the metadata provider.

    Network errors (timeouts, 429, 5xx) propagate from the fetch client.
    Payloads that do not match the expected shape raise ParseFailureError.

    Attributes:
        fetch_client: Single-attempt HTTP client
        base_url: Provider API root
    """

    def __init__(
        self,
        fetch_client: ResilientFetchClient,
        base_url: str = MetadataEndpoints.BASE_URL,
    ) -> None:
        self.fetch_client = fetch_client
        self.base_url = base_url.rstrip("/")

    def get_anime(self, mal_id: int) -> AnimeRecord:
        """Full record for one title, including relations."""
        path = MetadataEndpoints.ANIME_FULL.format(mal_id=mal_id)
        return self._get(path, ProviderResponse[AnimeRecord]).data

    def search_anime(
        self,
        query: str | None = None,
        page: int = 1,
        limit: int = MetadataEndpoints.DEFAULT_SEARCH_LIMIT,
        type: str | None = None,  # noqa: A002
        status: str | None = None,
        genres: Sequence[int] | None = None,
    ) -> list[AnimeRecord]:
        """Search titles, ordered by score (highest first).

        Args:
            query: Free-text query; omitted to list by filters only
            page: 1-based page number
            limit: Page size
            type: Content type filter (``tv``, ``movie`` ...)
            status: Airing status filter
            genres: Genre ids, all of which must match
        """
        params: dict[str, Any] = {
            "page": page,
            "limit": limit,
            "order_by": "score",
            "sort": "desc",
        }
        if query:
            params["q"] = query
        if type:
            params["type"] = type
        if status:
            params["status"] = status
        if genres:
            params["genres"] = ",".join(str(genre_id) for genre_id in genres)

        return self._get(
            MetadataEndpoints.ANIME_SEARCH,
            ProviderResponse[list[AnimeRecord]],
            params,
        ).data

    def get_recommendations(self, mal_id: int) -> list[RecommendationEntry]:
        path = MetadataEndpoints.RECOMMENDATIONS.format(mal_id=mal_id)
        return self._get(path, ProviderResponse[list[RecommendationEntry]]).data

    def get_top(
        self,
        filter: TopFilter | str = TopFilter.POPULARITY,  # noqa: A002
        limit: int = MetadataEndpoints.DEFAULT_LIST_LIMIT,
    ) -> list[AnimeRecord]:
        """Top list (airing, most popular, most favorited or completed)."""
        params = {"filter": TopFilter(filter).value, "limit": limit}
        return self._get(
            MetadataEndpoints.TOP_ANIME,
            ProviderResponse[list[AnimeRecord]],
            params,
        ).data

    def get_trending(self, limit: int = MetadataEndpoints.DEFAULT_LIST_LIMIT) -> list[AnimeRecord]:
        """Titles airing this season."""
        return self._get(
            MetadataEndpoints.SEASON_NOW,
            ProviderResponse[list[AnimeRecord]],
            {"limit": limit},
        ).data

    def _get(
        self,
        path: str,
        model: type[ProviderResponse[T]],
        params: dict[str, Any] | None = None,
    ) -> ProviderResponse[T]:
        url = f"{self.base_url}{path}"
        payload = self.fetch_client.get_json(
            url,
            params=params,
            headers=MetadataEndpoints.HEADERS,
        )
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise ParseFailureError(
                f"Unexpected metadata provider response for {path}",
                ErrorContext(
                    operation="metadata_request",
                    url=url,
                    additional_data={"error_count": e.error_count()},
                ),
                e,
            ) from e
