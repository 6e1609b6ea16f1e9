"""Resolve and watch command handlers."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.table import Table

from anibridge.cli.common.context import get_cli_context
from anibridge.cli.helpers import (
    build_metadata,
    call_with_retry,
    create_console,
    create_container,
    episodes_table,
)
from anibridge.cli.json_formatter import format_json_output, write_json_output
from anibridge.containers import Container
from anibridge.core.matching.models import ContentMetadata, ResolutionResult
from anibridge.services.catalog import AudioLanguage, ServerQuality

logger = logging.getLogger(__name__)


def _resolution_table(title: str, result: ResolutionResult) -> Table:
    table = Table(title=f"Resolution for '{title}'", show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Catalog ID", result.external_id or "[red]no confident match[/red]")
    table.add_row("Confidence", f"{result.confidence:.1f}")
    table.add_row("Matched title", result.matched_title or "-")
    return table


def _metadata_from_provider(
    container: Container,
    mal_id: int | None,
    *,
    retry: bool,
) -> ContentMetadata | None:
    if mal_id is None:
        return None
    client = container.metadata_client()
    record = call_with_retry(lambda: client.get_anime(mal_id), container.backoff_policy(), enabled=retry)
    logger.info("Using metadata of '%s' (%d)", record.title, record.mal_id)
    return record.to_metadata()


def resolve_title(
    title: str,
    metadata: ContentMetadata | None,
    *,
    direct: bool = False,
    retry: bool = True,
    container: Container | None = None,
) -> ResolutionResult:
    container = container or create_container()
    resolver = container.title_resolver()
    resolve = resolver.resolve if direct else resolver.resolve_with_fallback
    return call_with_retry(lambda: resolve(title, metadata), container.backoff_policy(), enabled=retry)


def handle_resolve_command(
    title: str,
    content_type: str | None = None,
    year: int | None = None,
    season: str | None = None,
    episode_count: int | None = None,
    alternate_titles: list[str] | None = None,
    mal_id: int | None = None,
    *,
    direct: bool = False,
    retry: bool = True,
    container: Container | None = None,
    console: Console | None = None,
) -> int:
    """Resolve a title and print the result.

    Returns:
        Exit code (0 when a confident match was found, 1 otherwise)
    """
    container = container or create_container()
    base = _metadata_from_provider(container, mal_id, retry=retry)
    metadata = build_metadata(content_type, year, season, episode_count, alternate_titles, base)

    result = resolve_title(title, metadata, direct=direct, retry=retry, container=container)

    if get_cli_context().is_json_output_enabled():
        write_json_output(
            format_json_output(success=True, command="resolve", data=result.to_dict()),
        )
    else:
        (console or create_console()).print(_resolution_table(title, result))

    return 0 if result.is_resolved else 1


def handle_watch_command(
    title: str,
    content_type: str | None = None,
    year: int | None = None,
    season: str | None = None,
    episode_count: int | None = None,
    alternate_titles: list[str] | None = None,
    mal_id: int | None = None,
    *,
    language: str = AudioLanguage.SUB.value,
    quality: str = ServerQuality.HD_1.value,
    retry: bool = True,
    container: Container | None = None,
    console: Console | None = None,
) -> int:
    """Resolve a title with fallback, then list its episodes with player URLs.

    Episodes are only fetched for results above the confidence floor.
    """
    container = container or create_container()
    base = _metadata_from_provider(container, mal_id, retry=retry)
    metadata = build_metadata(content_type, year, season, episode_count, alternate_titles, base)

    result = resolve_title(title, metadata, retry=retry, container=container)
    episode_service = container.episode_service()
    episodes = call_with_retry(
        lambda: episode_service.episodes_for(result),
        container.backoff_policy(),
        enabled=retry,
    )
    player_urls = [
        container.catalog_client().player_source(episode.episode_id, language, quality)
        for episode in episodes
    ]

    if get_cli_context().is_json_output_enabled():
        data = {
            "resolution": result.to_dict(),
            "episodes": [
                {**episode.to_dict(), "player_url": url}
                for episode, url in zip(episodes, player_urls)
            ],
        }
        write_json_output(format_json_output(success=True, command="watch", data=data))
    else:
        console = console or create_console()
        console.print(_resolution_table(title, result))
        if episodes:
            console.print(episodes_table(episodes, player_urls))
        elif result.is_resolved:
            console.print("[yellow]No episodes available[/yellow]")

    return 0 if episodes else 1
