"""
Network Constants

Upstream endpoints, request headers, timeouts and HTTP status ranges.
"""

from typing import ClassVar


class HTTPStatusCodes:
    """HTTP status codes interpreted by the fetch client."""

    OK_MIN = 200
    OK_MAX = 299
    TOO_MANY_REQUESTS = 429
    SERVER_ERROR_MIN = 500
    SERVER_ERROR_MAX = 599


class Timeout:
    """Request timeouts in seconds."""

    DEFAULT = 10.0


class CatalogEndpoints:
    """Streaming catalog endpoints (reached through the routing proxy)."""

    PROXY_URL = "https://tv-stream-proxy.onrender.com/proxy?url="
    BASE_URL = "https://hianimez.is"
    SEARCH_PATH = "/search"
    EPISODE_LIST_PATH = "/ajax/v2/episode/list/{catalog_id}"

    # CSS selectors for scraped markup
    SEARCH_RESULT_SELECTOR = "a.film-poster-ahref"
    EPISODE_SELECTOR = "a.ssl-item.ep-item"
    EPISODE_TITLE_SELECTOR = ".ep-name"

    HEADERS: ClassVar[dict[str, str]] = {
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.5",
        "Accept-Encoding": "gzip, deflate",
        "User-Agent": (
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
        ),
    }


class PlayerServers:
    """Embed player base URLs per server quality."""

    BASE_URLS: ClassVar[dict[str, str]] = {
        "HD-1": "https://megaplay.buzz/stream/s-4",
        "HD-2": "https://megaplay.buzz/stream/s-2",
        "HD-3": "https://megacloud.bloggy.click/stream/s-3",
    }


class MetadataEndpoints:
    """Metadata provider (Jikan v4) endpoints."""

    BASE_URL = "https://api.jikan.moe/v4"
    ANIME_FULL = "/anime/{mal_id}/full"
    ANIME_SEARCH = "/anime"
    RECOMMENDATIONS = "/anime/{mal_id}/recommendations"
    TOP_ANIME = "/top/anime"
    SEASON_NOW = "/seasons/now"

    DEFAULT_LIST_LIMIT = 20
    DEFAULT_SEARCH_LIMIT = 24

    HEADERS: ClassVar[dict[str, str]] = {
        "Accept": "application/json",
        "User-Agent": "AniBridge/0.1",
    }


class RetryDefaults:
    """Caller-side retry and backoff defaults."""

    MAX_ATTEMPTS = 5
    BASE_DELAY = 2.0  # seconds; 2, 4, 8, 16, 32
    MAX_DELAY = 32.0
