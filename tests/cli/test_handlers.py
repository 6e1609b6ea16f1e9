"""Tests for the CLI command handlers."""

import io
import json
from pathlib import Path
from unittest.mock import Mock

import pytest
from rich.console import Console

from anibridge.cli.cache_handler import handle_cache_purge_command
from anibridge.cli.common.context import CliContext, set_cli_context
from anibridge.cli.episodes_handler import handle_episodes_command
from anibridge.cli.helpers import build_metadata, call_with_retry
from anibridge.cli.recommend_handler import handle_recommend_command
from anibridge.cli.resolve_handler import handle_resolve_command, handle_watch_command
from anibridge.config import Settings
from anibridge.core.matching.models import ContentMetadata, ContentType, EpisodeItem, ResolutionResult
from anibridge.services.cache import DurableCache
from anibridge.services.catalog import StreamingCatalogClient
from anibridge.services.metadata import AnimeRecord
from anibridge.services.recommendations import RecommendationResult
from anibridge.services.retry import BackoffPolicy
from anibridge.shared.errors import CliError, ErrorCode, UpstreamUnavailableError


@pytest.fixture
def console() -> Console:
    return Console(file=io.StringIO(), width=200)


@pytest.fixture
def container() -> Mock:
    """Container double wired with mocks and a no-wait retry policy."""
    container = Mock()
    container.backoff_policy.return_value = BackoffPolicy(max_attempts=1)
    container.catalog_client.return_value = StreamingCatalogClient(Mock())
    return container


def _output(console: Console) -> str:
    return console.file.getvalue()


class TestBuildMetadata:
    """Test cases for merging command-line options with provider metadata."""

    def test_nothing_given(self) -> None:
        assert build_metadata() is None

    def test_type_is_parsed(self) -> None:
        assert build_metadata("movie").type is ContentType.MOVIE

    def test_unknown_type(self) -> None:
        with pytest.raises(CliError) as exc_info:
            build_metadata("cartoon")

        assert exc_info.value.code is ErrorCode.CLI_INVALID_ARGUMENTS

    def test_explicit_values_win(self) -> None:
        base = ContentMetadata(type=ContentType.TV, year=2013, alternate_titles=("Attack on Titan",))

        metadata = build_metadata(year=2014, alternate_titles=["AoT"], base=base)

        assert metadata == ContentMetadata(
            type=ContentType.TV,
            year=2014,
            alternate_titles=("AoT", "Attack on Titan"),
        )


class TestCallWithRetry:
    def test_disabled_runs_once(self) -> None:
        operation = Mock(side_effect=UpstreamUnavailableError("down", status_code=503))

        with pytest.raises(UpstreamUnavailableError):
            call_with_retry(operation, BackoffPolicy(base_delay=0.0), enabled=False)

        assert operation.call_count == 1

    def test_enabled_retries(self) -> None:
        operation = Mock(side_effect=[UpstreamUnavailableError("down", status_code=503), "ok"])

        assert call_with_retry(operation, BackoffPolicy(base_delay=0.0)) == "ok"
        assert operation.call_count == 2


class TestResolveHandler:
    """Test cases for handle_resolve_command."""

    def test_resolved_title_exits_zero(self, container: Mock, console: Console) -> None:
        resolver = container.title_resolver.return_value
        resolver.resolve_with_fallback.return_value = ResolutionResult("112", 0.9, "Attack on Titan")

        exit_code = handle_resolve_command("Attack on Titan", container=container, console=console)

        assert exit_code == 0
        assert "112" in _output(console)
        resolver.resolve_with_fallback.assert_called_once_with("Attack on Titan", None)

    def test_direct_flag(self, container: Mock, console: Console) -> None:
        resolver = container.title_resolver.return_value
        resolver.resolve.return_value = ResolutionResult.no_match()

        exit_code = handle_resolve_command("Naruto", direct=True, container=container, console=console)

        assert exit_code == 1
        resolver.resolve_with_fallback.assert_not_called()
        assert "no confident match" in _output(console)

    def test_provider_metadata_is_used(self, container: Mock, console: Console) -> None:
        container.metadata_client.return_value.get_anime.return_value = AnimeRecord(
            mal_id=16498,
            title="Shingeki no Kyojin",
            title_english="Attack on Titan",
            type="TV",
            year=2013,
        )
        resolver = container.title_resolver.return_value
        resolver.resolve_with_fallback.return_value = ResolutionResult("112", 0.8, "Attack on Titan")

        handle_resolve_command(
            "Shingeki no Kyojin",
            mal_id=16498,
            container=container,
            console=console,
        )

        metadata = resolver.resolve_with_fallback.call_args.args[1]
        assert metadata.type is ContentType.TV
        assert metadata.year == 2013
        assert metadata.alternate_titles == ("Attack on Titan",)

    def test_json_output(self, container: Mock, capsys: pytest.CaptureFixture[str]) -> None:
        set_cli_context(CliContext(json_output=True))
        resolver = container.title_resolver.return_value
        resolver.resolve_with_fallback.return_value = ResolutionResult("112", 0.9, "Attack on Titan")

        handle_resolve_command("Attack on Titan", container=container)

        payload = json.loads(capsys.readouterr().out)
        assert payload["success"] is True
        assert payload["command"] == "resolve"
        assert payload["data"] == {
            "external_id": "112",
            "confidence": 0.9,
            "matched_title": "Attack on Titan",
        }


class TestWatchHandler:
    """Test cases for handle_watch_command."""

    def test_lists_episodes_with_player_urls(self, container: Mock, capsys: pytest.CaptureFixture[str]) -> None:
        set_cli_context(CliContext(json_output=True))
        result = ResolutionResult("112", 0.9, "Attack on Titan")
        container.title_resolver.return_value.resolve_with_fallback.return_value = result
        container.episode_service.return_value.episodes_for.return_value = [
            EpisodeItem("e1", 1, "To You, in 2000 Years"),
        ]

        exit_code = handle_watch_command(
            "Attack on Titan",
            language="dub",
            quality="HD-2",
            container=container,
        )

        assert exit_code == 0
        episodes = json.loads(capsys.readouterr().out)["data"]["episodes"]
        assert episodes == [
            {
                "episode_id": "e1",
                "number": 1,
                "title": "To You, in 2000 Years",
                "player_url": "https://megaplay.buzz/stream/s-2/e1/dub",
            }
        ]
        container.episode_service.return_value.episodes_for.assert_called_once_with(result)

    def test_no_episodes_exits_one(self, container: Mock, console: Console) -> None:
        container.title_resolver.return_value.resolve_with_fallback.return_value = ResolutionResult(
            "112", 0.9, "Attack on Titan"
        )
        container.episode_service.return_value.episodes_for.return_value = []

        exit_code = handle_watch_command("Attack on Titan", container=container, console=console)

        assert exit_code == 1
        assert "No episodes available" in _output(console)


class TestEpisodesHandler:
    def test_lists_episodes(self, container: Mock, console: Console) -> None:
        container.episode_service.return_value.fetch_episodes.return_value = [
            EpisodeItem("e1", 1, "Pilot"),
            EpisodeItem("e2", 2, "Episode 2"),
        ]

        exit_code = handle_episodes_command("112", container=container, console=console)

        assert exit_code == 0
        assert "Pilot" in _output(console)
        assert "Episodes (2)" in _output(console)


class TestRecommendHandler:
    def test_prints_table(self, container: Mock, console: Console) -> None:
        container.recommendation_service.return_value.recommend.return_value = RecommendationResult(
            [AnimeRecord(mal_id=2, title="Shingeki no Kyojin Season 2", score=8.5)],
            "related",
        )

        exit_code = handle_recommend_command(1, container=container, console=console)

        assert exit_code == 0
        output = _output(console)
        assert "Recommendations (related)" in output
        assert "8.50" in output


class TestCachePurgeHandler:
    def test_purges_expired_entries(self, container: Mock, console: Console, tmp_path: Path) -> None:
        db_path = tmp_path / "cache.db"
        settings = Settings(cache={"db_path": str(db_path)})
        container.config.return_value = settings

        stale = DurableCache(db_path, namespace=settings.cache.namespace, clock=lambda: 0.0)
        stale.set("old", 1, ttl=10)
        stale.close()
        fresh = DurableCache(db_path, namespace=settings.cache.namespace, sweep_on_open=False)
        fresh.set("new", 2, ttl=3600)
        fresh.close()

        exit_code = handle_cache_purge_command(container=container, console=console)

        assert exit_code == 0
        assert "Removed 1 expired cache entries" in _output(console)
