"""Cache maintenance command handlers."""

from __future__ import annotations

import logging

from rich.console import Console

from anibridge.cli.common.context import get_cli_context
from anibridge.cli.helpers import create_console, create_container
from anibridge.cli.json_formatter import format_json_output, write_json_output
from anibridge.containers import Container
from anibridge.services.cache import DurableCache

logger = logging.getLogger(__name__)


def handle_cache_purge_command(
    *,
    purge_all: bool = False,
    container: Container | None = None,
    console: Console | None = None,
) -> int:
    """Delete expired durable cache entries, or every entry with ``purge_all``.

    The database is opened without the start-up sweep so the count
    reflects what this command removed.
    """
    container = container or create_container()
    settings = container.config()

    cache = DurableCache(
        settings.cache.db_path,
        namespace=settings.cache.namespace,
        default_ttl=settings.cache.durable_ttl,
        sweep_on_open=False,
    )
    try:
        removed = cache.clear() if purge_all else cache.clear_expired()
    finally:
        cache.close()
    logger.info("Purged %d cache entries", removed)

    if get_cli_context().is_json_output_enabled():
        write_json_output(
            format_json_output(
                success=True,
                command="cache purge",
                data={"removed": removed, "all": purge_all},
            ),
        )
    else:
        what = "cache entries" if purge_all else "expired cache entries"
        (console or create_console()).print(f"Removed {removed} {what}")
    return 0
