"""Helpers shared by the CLI command handlers."""

from __future__ import annotations

import logging
from typing import Callable, Sequence, TypeVar

from rich.console import Console
from rich.table import Table

from anibridge.containers import Container
from anibridge.core.matching.models import ContentMetadata, ContentType, EpisodeItem
from anibridge.services.retry import BackoffPolicy, retry_with_backoff
from anibridge.shared.errors import ErrorCode, create_cli_error

logger = logging.getLogger(__name__)

T = TypeVar("T")


def create_container() -> Container:
    """Build the dependency container for one CLI invocation."""
    return Container()


def create_console() -> Console:
    return Console()


def call_with_retry(
    operation: Callable[[], T],
    policy: BackoffPolicy,
    *,
    enabled: bool = True,
) -> T:
    """Run a network operation, retrying transient failures unless disabled.

    Raises:
        AniBridgeError: The last error once retries are exhausted
    """
    if not enabled:
        return operation()

    outcome = retry_with_backoff(operation, policy)
    if outcome.attempts > 1 and outcome.succeeded:
        logger.info("Succeeded after %d attempts", outcome.attempts)
    return outcome.unwrap()


def build_metadata(
    content_type: str | None = None,
    year: int | None = None,
    season: str | None = None,
    episode_count: int | None = None,
    alternate_titles: Sequence[str] | None = None,
    base: ContentMetadata | None = None,
) -> ContentMetadata | None:
    """Combine command-line metadata with an optional provider record.

    Explicit options win over the provider's values.

    Raises:
        CliError: If the content type is not recognized
    """
    parsed_type = ContentType.parse(content_type) if content_type else None
    if content_type and parsed_type is None:
        allowed = ", ".join(member.value for member in ContentType)
        raise create_cli_error(
            message=f"Unknown content type '{content_type}'. Use one of: {allowed}",
            command="resolve",
            code=ErrorCode.CLI_INVALID_ARGUMENTS,
        )

    base = base or ContentMetadata()
    metadata = ContentMetadata(
        type=parsed_type or base.type,
        year=year or base.year,
        season=season or base.season,
        episode_count=episode_count or base.episode_count,
        alternate_titles=tuple(alternate_titles or ()) + base.alternate_titles,
    )
    if metadata == ContentMetadata():
        return None
    return metadata


def episodes_table(episodes: list[EpisodeItem], player_urls: list[str] | None = None) -> Table:
    table = Table(title=f"Episodes ({len(episodes)})")
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Title")
    table.add_column("Episode ID", style="dim")
    if player_urls is not None:
        table.add_column("Player", style="green", overflow="fold")

    for index, episode in enumerate(episodes):
        row = [str(episode.number), episode.title or "", episode.episode_id]
        if player_urls is not None:
            row.append(player_urls[index])
        table.add_row(*row)
    return table
