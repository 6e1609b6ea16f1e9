"""Streaming catalog client and markup parsers."""

from anibridge.services.catalog.client import (
    AudioLanguage,
    ServerQuality,
    StreamingCatalogClient,
)
from anibridge.services.catalog.parsers import (
    parse_episode_fragment,
    parse_episode_payload,
    parse_search_results,
)

__all__ = [
    "AudioLanguage",
    "ServerQuality",
    "StreamingCatalogClient",
    "parse_episode_fragment",
    "parse_episode_payload",
    "parse_search_results",
]
