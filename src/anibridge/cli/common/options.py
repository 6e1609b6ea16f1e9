"""
Reusable Typer Options Module

Option definitions shared by the main callback and the commands. The
global options are used as ``Annotated`` metadata; the command options
are plain defaults.
"""

from __future__ import annotations

import typer

from anibridge import __version__


def version_callback(value: bool) -> None:
    """Print version information and exit."""
    if value:
        typer.echo(f"AniBridge v{__version__}")
        raise typer.Exit


verbose_option = typer.Option(
    "--verbose",
    "-v",
    count=True,
    help="Enable verbose output (equivalent to --log-level DEBUG).",
)

log_level_option = typer.Option(
    "--log-level",
    case_sensitive=False,
    help="Set the logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Default: INFO.",
)

json_output_option = typer.Option(
    "--json",
    help="Enable machine-readable JSON output instead of human-readable format.",
)

version_option = typer.Option(
    "--version",
    "-V",
    help="Show version information and exit.",
    callback=version_callback,
    is_eager=True,
)

# Resolution metadata options
type_option = typer.Option(None, "--type", "-t", help="Content type (TV, Movie, OVA, Special, ONA, Music)")
year_option = typer.Option(None, "--year", "-y", help="Release year")
season_option = typer.Option(None, "--season", help="Airing season label (e.g. spring)")
episodes_option = typer.Option(None, "--episodes", help="Episode count")
alternate_title_option = typer.Option(
    None,
    "--alt-title",
    "-a",
    help="Alternate title (repeatable)",
)
mal_id_option = typer.Option(
    None,
    "--mal-id",
    help="Fill metadata from the metadata provider record with this id",
)
no_retry_option = typer.Option(
    False,
    "--no-retry",
    help="Fail on the first network error instead of retrying with backoff",
)
