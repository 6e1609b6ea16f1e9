"""Pure parse functions for streaming catalog markup.

Every function takes a string and returns domain models. Nothing here
performs I/O, so the parsers are tested against literal HTML and JSON.
"""

from __future__ import annotations

import logging
from typing import Any

import orjson
from bs4 import BeautifulSoup

from anibridge.core.matching.models import Candidate, EpisodeItem
from anibridge.shared.constants import CatalogEndpoints
from anibridge.shared.errors import ErrorContext, ParseFailureError

logger = logging.getLogger(__name__)


def _parse_episode_number(raw: str | None) -> int | None:
    if raw is None:
        return None
    try:
        number = int(raw.strip())
    except ValueError:
        return None
    return number if number >= 1 else None


def parse_search_results(html: str) -> list[Candidate]:
    """Extract search candidates in discovery order.

    Anchors missing a title or an id are skipped; a repeated id keeps its
    first occurrence.

    Args:
        html: Search results page

    Returns:
        Candidates, possibly empty
    """
    soup = BeautifulSoup(html or "", "html.parser")
    candidates: list[Candidate] = []
    seen: set[str] = set()

    for anchor in soup.select(CatalogEndpoints.SEARCH_RESULT_SELECTOR):
        title = (anchor.get("title") or "").strip()
        external_id = (anchor.get("data-id") or "").strip()
        if not title or not external_id or external_id in seen:
            continue
        seen.add(external_id)
        candidates.append(Candidate(external_id=external_id, display_title=title))

    logger.debug("Parsed %d search candidates", len(candidates))
    return candidates


def parse_episode_fragment(html: str) -> list[EpisodeItem]:
    """Extract episodes from the episode-list HTML fragment.

    Anchors without an id, or with a number that is not a positive
    integer, are skipped. The title falls back to ``Episode {number}``.
    The result is sorted by number with duplicates dropped (first wins).
    """
    soup = BeautifulSoup(html or "", "html.parser")
    by_number: dict[int, EpisodeItem] = {}

    for anchor in soup.select(CatalogEndpoints.EPISODE_SELECTOR):
        episode_id = (anchor.get("data-id") or "").strip()
        number = _parse_episode_number(anchor.get("data-number"))
        if not episode_id or number is None:
            logger.debug("Skipping malformed episode anchor: %s", anchor.attrs)
            continue
        if number in by_number:
            continue

        title_element = anchor.select_one(CatalogEndpoints.EPISODE_TITLE_SELECTOR)
        title = title_element.get_text(strip=True) if title_element else ""
        by_number[number] = EpisodeItem(
            episode_id=episode_id,
            number=number,
            title=title or f"Episode {number}",
        )

    return [by_number[number] for number in sorted(by_number)]


def parse_episode_payload(raw: str | bytes) -> list[EpisodeItem]:
    """Parse the JSON envelope ``{status, html}`` of the episode-list endpoint.

    Raises:
        ParseFailureError: If the body is not JSON, ``status`` is falsy or
            ``html`` is missing
    """
    context = ErrorContext(operation="parse_episode_payload")
    try:
        payload: Any = orjson.loads(raw)
    except orjson.JSONDecodeError as e:
        raise ParseFailureError("Episode list response is not valid JSON", context, e) from e

    if not isinstance(payload, dict):
        raise ParseFailureError("Episode list response is not a JSON object", context)
    if not payload.get("status"):
        raise ParseFailureError("Episode list response reported failure", context)

    html = payload.get("html")
    if not isinstance(html, str) or not html:
        raise ParseFailureError("Episode list response has no HTML fragment", context)

    return parse_episode_fragment(html)
