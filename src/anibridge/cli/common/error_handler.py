"""
CLI Error Handling Utilities

Consistent error output and exit codes across CLI commands.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

from anibridge.cli.json_formatter import format_json_output, write_json_output
from anibridge.shared.errors import (
    AniBridgeNetworkError,
    ApplicationError,
    CliError,
    DomainError,
    InfrastructureError,
    create_cli_error,
)

logger = logging.getLogger(__name__)

EXIT_ERROR = 1
EXIT_UPSTREAM_UNAVAILABLE = 2
EXIT_INTERRUPTED = 130


def handle_cli_error(
    error: BaseException,
    command: str,
    *,
    json_output: bool = False,
) -> int:
    """Handle a CLI error: map, log and print it.

    Args:
        error: The exception that occurred
        command: The CLI command being executed
        json_output: Whether to output JSON format

    Returns:
        Exit code for the CLI command
    """
    error_context: dict[str, Any] = {
        "command": command,
        "error_type": type(error).__name__,
    }
    cli_error = _map_error_to_cli_error(error, command, error_context)
    _log_error(error, command, cli_error, error_context)

    if json_output:
        write_json_output(
            format_json_output(
                success=False,
                command=command,
                errors=[cli_error.message],
                data={
                    "error_code": error_context.get("error_code", cli_error.code.value),
                    "error_type": type(error).__name__,
                    "exit_code": cli_error.exit_code,
                    "retryable": error_context.get("retryable", False),
                },
            ),
        )
    else:
        sys.stderr.write(f"Error: {cli_error.message}\n")

    return cli_error.exit_code


def _map_error_to_cli_error(
    error: BaseException,
    command: str,
    error_context: dict[str, Any],
) -> CliError:
    if isinstance(error, CliError):
        error_context["error_code"] = error.code.value
        return error

    if isinstance(error, AniBridgeNetworkError):
        error_context["error_code"] = error.code.value
        error_context["retryable"] = error.retryable
        exit_code = EXIT_UPSTREAM_UNAVAILABLE if error.retryable else EXIT_ERROR
        return create_cli_error(
            message=f"Upstream error: {error.message}",
            command=command,
            original_error=error,
            exit_code=exit_code,
        )

    if isinstance(error, (ApplicationError, InfrastructureError, DomainError)):
        error_context["error_code"] = error.code.value
        return create_cli_error(
            message=error.message,
            command=command,
            original_error=error,
        )

    if isinstance(error, KeyboardInterrupt):
        return create_cli_error(
            message="Command interrupted by user",
            command=command,
            exit_code=EXIT_INTERRUPTED,
        )

    if isinstance(error, ValueError):
        return create_cli_error(
            message=f"Invalid input: {error}",
            command=command,
            original_error=error,
        )

    error_context["error_category"] = "unexpected"
    return create_cli_error(
        message=f"Unexpected error: {error}",
        command=command,
        original_error=error if isinstance(error, Exception) else None,
    )


def _log_error(
    error: BaseException,
    command: str,
    cli_error: CliError,
    error_context: dict[str, Any],
) -> None:
    if isinstance(error, KeyboardInterrupt):
        logger.warning("Command interrupted: %s", command, extra={"context": error_context})
    elif isinstance(error, (ApplicationError, InfrastructureError, DomainError, ValueError)):
        logger.error(
            "CLI error in %s: %s",
            command,
            cli_error.message,
            extra={"context": error_context},
        )
    else:
        logger.exception(
            "CLI error in %s: %s",
            command,
            cli_error.message,
            extra={"context": error_context},
        )
