"""Streaming catalog client.

Searches the catalog, fetches episode lists and builds embed player URLs.
Every catalog request goes through the routing proxy.
"""

from __future__ import annotations

import logging
from enum import Enum

from anibridge.core.matching.models import Candidate, EpisodeItem
from anibridge.services.catalog.parsers import (
    parse_episode_payload,
    parse_search_results,
)
from anibridge.services.http_client import ResilientFetchClient
from anibridge.shared.constants import CatalogEndpoints, PlayerServers
from anibridge.shared.errors import ParseFailureError
from anibridge.shared.logging import log_operation_error

logger = logging.getLogger(__name__)


class ServerQuality(str, Enum):
    """Embed player servers."""

    HD_1 = "HD-1"
    HD_2 = "HD-2"
    HD_3 = "HD-3"


class AudioLanguage(str, Enum):
    SUB = "sub"
    DUB = "dub"


class StreamingCatalogClient:
    """Client for the streaming catalog.

    Network errors from the fetch client propagate to the caller. A
    malformed episode-list payload is not an error: it yields ``[]``.

    Attributes:
        fetch_client: Single-attempt HTTP client
        base_url: Catalog origin
    """

    def __init__(
        self,
        fetch_client: ResilientFetchClient,
        base_url: str = CatalogEndpoints.BASE_URL,
    ) -> None:
        self.fetch_client = fetch_client
        self.base_url = base_url.rstrip("/")

    def search(self, title: str) -> list[Candidate]:
        """Search the catalog by title.

        Args:
            title: Free-text query

        Returns:
            Candidates in discovery order
        """
        html = self.fetch_client.get_text(
            f"{self.base_url}{CatalogEndpoints.SEARCH_PATH}",
            params={"keyword": title},
            headers=CatalogEndpoints.HEADERS,
            proxied=True,
        )
        candidates = parse_search_results(html)
        logger.debug("Catalog search '%s' returned %d results", title, len(candidates))
        return candidates

    def fetch_episodes(self, catalog_id: str) -> list[EpisodeItem]:
        """Fetch the ordered episode list of a catalog record.

        Args:
            catalog_id: Catalog identifier from resolution

        Returns:
            Episodes sorted by number, or ``[]`` for a malformed payload
        """
        path = CatalogEndpoints.EPISODE_LIST_PATH.format(catalog_id=catalog_id)
        body = self.fetch_client.get_text(
            f"{self.base_url}{path}",
            headers=CatalogEndpoints.HEADERS,
            proxied=True,
        )

        try:
            episodes = parse_episode_payload(body)
        except ParseFailureError as e:
            log_operation_error(
                logger=logger,
                error=e,
                operation="fetch_episodes",
                additional_context={"catalog_id": catalog_id},
            )
            return []

        logger.info("Fetched %d episodes for catalog id %s", len(episodes), catalog_id)
        return episodes

    @staticmethod
    def player_source(
        episode_id: str,
        language: AudioLanguage | str = AudioLanguage.SUB,
        quality: ServerQuality | str = ServerQuality.HD_1,
    ) -> str:
        """Build the embed player URL for an episode.

        Example:
            >>> StreamingCatalogClient.player_source("1234", "dub", "HD-2")
            'https://megaplay.buzz/stream/s-2/1234/dub'
        """
        base_url = PlayerServers.BASE_URLS[ServerQuality(quality).value]
        return f"{base_url}/{episode_id}/{AudioLanguage(language).value}"
