"""AniBridge Error Handling Module

This module defines the error handling system for AniBridge, providing
structured error classes with context information.

The error hierarchy follows these principles:
- One Source of Truth: All error codes are defined in ErrorCode enum
- Structured Context: ErrorContext provides additional information
- Transient vs permanent: network errors carry a ``retryable`` flag so
  callers can decide on backoff without inspecting codes
- Proper Exception Chaining: Original exceptions are preserved
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any, Union

# Type alias for primitive context values (str, int, float, bool only)
PrimitiveContextValue = Union[str, int, float, bool]


class ErrorCode(str, Enum):
    """Error codes for AniBridge.

    This enum serves as the single source of truth for all error codes
    used throughout the package.
    """

    # Network and API Errors
    NETWORK_ERROR = "NETWORK_ERROR"
    API_TIMEOUT = "API_TIMEOUT"
    API_RATE_LIMIT = "API_RATE_LIMIT"
    API_SERVER_ERROR = "API_SERVER_ERROR"
    API_REQUEST_FAILED = "API_REQUEST_FAILED"

    # Parsing Errors
    PARSING_ERROR = "PARSING_ERROR"
    INVALID_RESPONSE = "INVALID_RESPONSE"

    # Cache Errors
    CACHE_ERROR = "CACHE_ERROR"
    CACHE_READ_FAILED = "CACHE_READ_FAILED"
    CACHE_WRITE_FAILED = "CACHE_WRITE_FAILED"
    CACHE_SERIALIZATION_ERROR = "CACHE_SERIALIZATION_ERROR"

    # Configuration Errors
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # CLI Errors
    CLI_COMMAND_FAILED = "CLI_COMMAND_FAILED"
    CLI_INVALID_ARGUMENTS = "CLI_INVALID_ARGUMENTS"
    CLI_UNEXPECTED_ERROR = "CLI_UNEXPECTED_ERROR"


def _coerce_primitives(value: Any | None) -> dict[str, PrimitiveContextValue] | None:
    """Coerce additional_data values to primitives.

    Converts Path, Enum, Decimal to primitive types.

    Args:
        value: Input dictionary or None

    Returns:
        Dictionary with primitive values only, or None

    Raises:
        TypeError: If value is not a dict or contains unconvertible types
    """
    if value is None:
        return None

    if not isinstance(value, dict):
        error_msg = f"additional_data must be dict, got {type(value).__name__}"
        raise TypeError(error_msg)

    coerced: dict[str, PrimitiveContextValue] = {}
    for key, val in value.items():
        if isinstance(val, (str, int, float, bool)):
            coerced[key] = val
        elif isinstance(val, Path):
            coerced[key] = str(val)
        elif isinstance(val, Enum):
            coerced[key] = val.value
        elif isinstance(val, Decimal):
            coerced[key] = float(val)
        elif val is None:
            continue
        else:
            error_msg = (
                f"Cannot coerce {type(val).__name__} to primitive type. "
                f"Only str, int, float, bool, Path, Enum, Decimal are allowed."
            )
            raise TypeError(error_msg)

    return coerced


@dataclass(frozen=True)
class ErrorContext:
    """Context information for errors.

    Only primitive types (str, int, float, bool) are allowed in
    additional_data so that contexts serialize safely into log records.

    Attributes:
        operation: Optional operation name that caused the error
        url: Optional request URL associated with the error
        additional_data: Optional dict with primitive values only
    """

    operation: str | None = None
    url: str | None = None
    additional_data: dict[str, PrimitiveContextValue] | None = None

    def __post_init__(self) -> None:
        """Coerce additional_data to primitives."""
        if self.additional_data is not None:
            coerced = _coerce_primitives(self.additional_data)
            # frozen dataclass: bypass __setattr__ for the coerced copy
            object.__setattr__(self, "additional_data", coerced)

    def safe_dict(self) -> dict[str, Any]:
        """Export context as a dict that always carries additional_data."""
        data: dict[str, Any] = {}
        if self.operation is not None:
            data["operation"] = self.operation
        if self.url is not None:
            data["url"] = self.url
        data["additional_data"] = dict(self.additional_data or {})
        return data


class AniBridgeError(Exception):
    """Base exception class for all AniBridge errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize AniBridgeError.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            context: Additional context information
            original_error: Original exception that caused this error
        """
        self.code = code
        self.message = message
        self.context = context or ErrorContext()
        self.original_error = original_error
        super().__init__(f"{code.value}: {message}")

    def __str__(self) -> str:
        """Return string representation of the error."""
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging and JSON output."""
        return {
            "code": self.code.value,
            "message": self.message,
            "context": self.context.safe_dict(),
            "original_error": str(self.original_error) if self.original_error else None,
        }


class DomainError(AniBridgeError):
    """Domain-specific errors.

    These errors occur when upstream data violates the shapes the
    resolver and parsers rely on.
    """


class InfrastructureError(AniBridgeError):
    """Infrastructure-related errors.

    These errors occur when interacting with external systems like the
    network, the cache database or the file system.
    """


class ApplicationError(AniBridgeError):
    """Application-level errors (configuration, command handling)."""


class CacheError(InfrastructureError):
    """Durable cache storage errors."""


class AniBridgeNetworkError(InfrastructureError):
    """Network-related errors.

    Attributes:
        retryable: Whether a caller-side retry with backoff is advised
    """

    retryable: bool = True


class RequestTimeoutError(AniBridgeNetworkError):
    """The request did not complete within the configured timeout."""

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(ErrorCode.API_TIMEOUT, message, context, original_error)


class RateLimitedError(AniBridgeNetworkError):
    """Upstream answered HTTP 429.

    Attributes:
        retry_after: Seconds requested by the ``Retry-After`` header, if any
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        retry_after: float | None = None,
    ) -> None:
        super().__init__(ErrorCode.API_RATE_LIMIT, message, context)
        self.retry_after = retry_after


class UpstreamUnavailableError(AniBridgeNetworkError):
    """Upstream answered 5xx or could not be reached."""

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(ErrorCode.API_SERVER_ERROR, message, context, original_error)
        self.status_code = status_code


class RequestFailedError(AniBridgeNetworkError):
    """Upstream answered a non-2xx status that retrying will not fix."""

    retryable = False

    def __init__(
        self,
        message: str,
        status_code: int,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(ErrorCode.API_REQUEST_FAILED, message, context)
        self.status_code = status_code


class ParseFailureError(DomainError):
    """Malformed HTML or JSON received from an upstream service."""

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(ErrorCode.PARSING_ERROR, message, context, original_error)


def create_config_error(
    message: str,
    operation: str | None = None,
    original_error: Exception | None = None,
) -> ApplicationError:
    """Create a configuration error."""
    return ApplicationError(
        ErrorCode.CONFIGURATION_ERROR,
        message,
        ErrorContext(operation=operation),
        original_error,
    )


class CliError(ApplicationError):
    """CLI-specific error carrying the command and its exit code."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
        command: str | None = None,
        exit_code: int = 1,
    ) -> None:
        super().__init__(code, message, context, original_error)
        self.command = command
        self.exit_code = exit_code


def create_cli_error(
    message: str,
    command: str | None = None,
    original_error: Exception | None = None,
    exit_code: int = 1,
    code: ErrorCode = ErrorCode.CLI_UNEXPECTED_ERROR,
) -> CliError:
    """Create a CLI error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"command": command} if command else None
    )
    context = ErrorContext(operation=command, additional_data=additional_data)
    return CliError(code, message, context, original_error, command, exit_code)
