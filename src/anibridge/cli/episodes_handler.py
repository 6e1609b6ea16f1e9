"""Episodes command handler."""

from __future__ import annotations

from rich.console import Console

from anibridge.cli.common.context import get_cli_context
from anibridge.cli.helpers import call_with_retry, create_console, create_container, episodes_table
from anibridge.cli.json_formatter import format_json_output, write_json_output
from anibridge.containers import Container


def handle_episodes_command(
    catalog_id: str,
    *,
    retry: bool = True,
    container: Container | None = None,
    console: Console | None = None,
) -> int:
    """List the episodes of a catalog record."""
    container = container or create_container()
    episode_service = container.episode_service()
    episodes = call_with_retry(
        lambda: episode_service.fetch_episodes(catalog_id),
        container.backoff_policy(),
        enabled=retry,
    )

    if get_cli_context().is_json_output_enabled():
        write_json_output(
            format_json_output(
                success=True,
                command="episodes",
                data={"catalog_id": catalog_id, "episodes": [e.to_dict() for e in episodes]},
            ),
        )
    else:
        console = console or create_console()
        if episodes:
            console.print(episodes_table(episodes))
        else:
            console.print("[yellow]No episodes available[/yellow]")

    return 0 if episodes else 1
