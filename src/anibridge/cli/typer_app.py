"""
AniBridge Typer CLI Application

Command-line front end for title resolution, episode listing and
recommendations.
"""

from __future__ import annotations

from typing import Annotated

import typer

from anibridge.cli.cache_handler import handle_cache_purge_command
from anibridge.cli.common.context import CliContext, LogLevel, get_cli_context, set_cli_context
from anibridge.cli.common.error_handler import handle_cli_error
from anibridge.cli.common.options import (
    alternate_title_option,
    episodes_option,
    json_output_option,
    log_level_option,
    mal_id_option,
    no_retry_option,
    season_option,
    type_option,
    verbose_option,
    version_option,
    year_option,
)
from anibridge.cli.episodes_handler import handle_episodes_command
from anibridge.cli.recommend_handler import handle_recommend_command
from anibridge.cli.resolve_handler import handle_resolve_command, handle_watch_command
from anibridge.config.loader import get_config
from anibridge.services.catalog import AudioLanguage, ServerQuality
from anibridge.shared.logging import setup_structured_logger


def main_callback(
    verbose: int,
    log_level: LogLevel,
    json_output: bool,
) -> None:
    """Set the CLI context and configure logging before any command runs."""
    context = CliContext(verbose=verbose, log_level=log_level, json_output=json_output)
    set_cli_context(context)

    settings = get_config()
    setup_structured_logger(
        level=context.get_effective_log_level(),
        log_file=settings.logging.file,
        use_rich_console=settings.logging.console_output and not json_output,
    )


app = typer.Typer(
    name="anibridge",
    help="Resolve anime titles to streaming catalog records and list their episodes.",
    add_completion=True,
    rich_markup_mode="rich",
    no_args_is_help=True,
)

cache_app = typer.Typer(help="Cache maintenance.", no_args_is_help=True)
app.add_typer(cache_app, name="cache")


@app.callback()
def main(
    verbose: Annotated[int, verbose_option] = 0,
    log_level: Annotated[LogLevel, log_level_option] = LogLevel.INFO,
    json_output: Annotated[bool, json_output_option] = False,
    version: Annotated[bool, version_option] = False,
) -> None:
    """Main CLI callback with error handling."""
    try:
        main_callback(verbose, log_level, json_output)
    except typer.Exit:
        raise
    except Exception as e:
        exit_code = handle_cli_error(e, "main-callback", json_output=json_output)
        raise typer.Exit(exit_code) from e


def _run(command: str, handler, *args, **kwargs) -> None:
    """Run a handler, mapping its exceptions to an exit code."""
    try:
        exit_code = handler(*args, **kwargs)
    except (Exception, KeyboardInterrupt) as e:  # noqa: BLE001
        json_output = get_cli_context().is_json_output_enabled()
        exit_code = handle_cli_error(e, command, json_output=json_output)
    if exit_code:
        raise typer.Exit(exit_code)


@app.command("resolve")
def resolve_command(
    title: str = typer.Argument(..., help="Title as known to the metadata provider"),
    content_type: str | None = type_option,
    year: int | None = year_option,
    season: str | None = season_option,
    episode_count: int | None = episodes_option,
    alternate_titles: list[str] | None = alternate_title_option,
    mal_id: int | None = mal_id_option,
    direct: bool = typer.Option(False, "--direct", help="Use the direct strategy only"),
    no_retry: bool = no_retry_option,
) -> None:
    """
    Resolve a title to a streaming catalog id.

    Examples:
        anibridge resolve "Shingeki no Kyojin" --type TV --year 2013

        anibridge resolve "Kimetsu no Yaiba: Mugen Ressha-hen" --mal-id 40456
    """
    _run(
        "resolve",
        handle_resolve_command,
        title,
        content_type,
        year,
        season,
        episode_count,
        alternate_titles,
        mal_id,
        direct=direct,
        retry=not no_retry,
    )


@app.command("episodes")
def episodes_command(
    catalog_id: str = typer.Argument(..., help="Streaming catalog id"),
    no_retry: bool = no_retry_option,
) -> None:
    """List the episodes of a streaming catalog record."""
    _run("episodes", handle_episodes_command, catalog_id, retry=not no_retry)


@app.command("watch")
def watch_command(
    title: str = typer.Argument(..., help="Title as known to the metadata provider"),
    content_type: str | None = type_option,
    year: int | None = year_option,
    season: str | None = season_option,
    episode_count: int | None = episodes_option,
    alternate_titles: list[str] | None = alternate_title_option,
    mal_id: int | None = mal_id_option,
    language: AudioLanguage = typer.Option(AudioLanguage.SUB, "--lang", help="Audio track"),
    quality: ServerQuality = typer.Option(ServerQuality.HD_1, "--server", help="Player server"),
    no_retry: bool = no_retry_option,
) -> None:
    """Resolve a title with fallback and list its episodes with player URLs."""
    _run(
        "watch",
        handle_watch_command,
        title,
        content_type,
        year,
        season,
        episode_count,
        alternate_titles,
        mal_id,
        language=language.value,
        quality=quality.value,
        retry=not no_retry,
    )


@app.command("recommend")
def recommend_command(
    mal_id: int = typer.Argument(..., help="Metadata provider id"),
    no_retry: bool = no_retry_option,
) -> None:
    """Recommend titles related to a metadata provider title."""
    _run("recommend", handle_recommend_command, mal_id, retry=not no_retry)


@cache_app.command("purge")
def cache_purge_command(
    purge_all: bool = typer.Option(False, "--all", help="Delete every entry, not only expired ones"),
) -> None:
    """Delete expired cache entries."""
    _run("cache purge", handle_cache_purge_command, purge_all=purge_all)


def run() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    run()
