"""
JSON Output Formatter for AniBridge CLI

Every command produces the same envelope when ``--json`` is given.
"""

from __future__ import annotations

import sys
from datetime import datetime, timezone
from typing import Any

import orjson


def format_json_output(
    success: bool,
    command: str,
    data: Any | None = None,
    errors: list[str] | None = None,
    warnings: list[str] | None = None,
) -> bytes:
    """
    Format command output as JSON.

    Args:
        success: Whether the command executed successfully
        command: The command name (e.g., "resolve")
        data: The command's output data
        errors: List of error messages
        warnings: List of warning messages

    Returns:
        JSON-encoded bytes ready for output
    """
    errors = errors or []
    warnings = warnings or []

    json_data = {
        "success": success and not errors,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "command": command,
        "data": data,
        "errors": errors,
        "warnings": warnings,
    }

    try:
        return orjson.dumps(json_data, option=orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2)
    except TypeError as e:
        error_data = {
            "success": False,
            "timestamp": json_data["timestamp"],
            "command": command,
            "data": None,
            "errors": [f"JSON serialization failed: {e!s}"],
            "warnings": [],
        }
        return orjson.dumps(error_data, option=orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2)


def write_json_output(output: bytes) -> None:
    sys.stdout.buffer.write(output)
    sys.stdout.buffer.write(b"\n")
    sys.stdout.buffer.flush()
