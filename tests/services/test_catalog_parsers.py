"""Tests for the catalog markup parsers."""

import orjson
import pytest

from anibridge.core.matching.models import Candidate, EpisodeItem
from anibridge.services.catalog.parsers import (
    parse_episode_fragment,
    parse_episode_payload,
    parse_search_results,
)
from anibridge.shared.errors import ParseFailureError


class TestParseSearchResults:
    """Test cases for search page parsing."""

    def test_extracts_candidates_in_page_order(self, search_page_html: str) -> None:
        assert parse_search_results(search_page_html) == [
            Candidate("112", "Attack on Titan"),
            Candidate("113", "Attack on Titan Season 2"),
        ]

    def test_duplicate_ids_keep_first(self) -> None:
        html = (
            '<a class="film-poster-ahref" title="Naruto" data-id="20"></a>'
            '<a class="film-poster-ahref" title="Naruto (dub)" data-id="20"></a>'
        )

        assert parse_search_results(html) == [Candidate("20", "Naruto")]

    def test_ignores_other_anchors(self) -> None:
        html = '<a class="dynamic-name" title="Naruto" data-id="20"></a>'

        assert parse_search_results(html) == []

    def test_empty_page(self) -> None:
        assert parse_search_results("") == []


class TestParseEpisodeFragment:
    """Test cases for the episode-list fragment."""

    def test_sorted_by_number_with_title_fallback(self, episode_fragment_html: str) -> None:
        # Given: anchors appear as 2, 1, 3 and episode 3 has no title element
        # When
        episodes = parse_episode_fragment(episode_fragment_html)

        # Then
        assert episodes == [
            EpisodeItem("e1", 1, "The First"),
            EpisodeItem("e2", 2, "The Second"),
            EpisodeItem("e3", 3, "Episode 3"),
        ]

    def test_skips_malformed_anchors(self) -> None:
        html = (
            '<a class="ssl-item ep-item" data-number="1"></a>'
            '<a class="ssl-item ep-item" data-id="x" data-number="abc"></a>'
            '<a class="ssl-item ep-item" data-id="y" data-number="0"></a>'
            '<a class="ssl-item ep-item" data-id="z" data-number="4"></a>'
        )

        assert parse_episode_fragment(html) == [EpisodeItem("z", 4, "Episode 4")]

    def test_duplicate_numbers_keep_first(self) -> None:
        html = (
            '<a class="ssl-item ep-item" data-id="a" data-number="1"></a>'
            '<a class="ssl-item ep-item" data-id="b" data-number="1"></a>'
        )

        assert [item.episode_id for item in parse_episode_fragment(html)] == ["a"]

    def test_blank_title_falls_back(self) -> None:
        html = '<a class="ssl-item ep-item" data-id="a" data-number="7"><div class="ep-name">  </div></a>'

        assert parse_episode_fragment(html)[0].title == "Episode 7"


class TestParseEpisodePayload:
    """Test cases for the JSON envelope."""

    def test_valid_payload(self, episode_fragment_html: str) -> None:
        raw = orjson.dumps({"status": True, "html": episode_fragment_html})

        assert [item.number for item in parse_episode_payload(raw)] == [1, 2, 3]

    @pytest.mark.parametrize(
        "raw",
        [
            "not json",
            "[1, 2]",
            '{"status": false, "html": "<a></a>"}',
            '{"status": true}',
            '{"status": true, "html": ""}',
        ],
    )
    def test_malformed_payloads_raise(self, raw: str) -> None:
        with pytest.raises(ParseFailureError):
            parse_episode_payload(raw)
