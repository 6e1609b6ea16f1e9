"""Recommend command handler."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from anibridge.cli.common.context import get_cli_context
from anibridge.cli.helpers import call_with_retry, create_console, create_container
from anibridge.cli.json_formatter import format_json_output, write_json_output
from anibridge.containers import Container


def handle_recommend_command(
    mal_id: int,
    *,
    retry: bool = True,
    container: Container | None = None,
    console: Console | None = None,
) -> int:
    container = container or create_container()
    service = container.recommendation_service()
    result = call_with_retry(
        lambda: service.recommend(mal_id),
        container.backoff_policy(),
        enabled=retry,
    )

    if get_cli_context().is_json_output_enabled():
        write_json_output(format_json_output(success=True, command="recommend", data=result.to_dict()))
        return 0

    table = Table(title=f"Recommendations ({result.recommendation_type})")
    table.add_column("MAL ID", justify="right", style="cyan")
    table.add_column("Title")
    table.add_column("Type")
    table.add_column("Score", justify="right")
    for record in result.recommendations:
        table.add_row(
            str(record.mal_id),
            record.preferred_title,
            record.type or "-",
            f"{record.score:.2f}" if record.score is not None else "-",
        )
    (console or create_console()).print(table)
    return 0
