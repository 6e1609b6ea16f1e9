"""Retry and logging configuration models."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from anibridge.shared.constants import Logging, RetryDefaults

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class RetrySettings(BaseModel):
    """Caller-side retry schedule for network operations."""

    max_attempts: int = Field(
        default=RetryDefaults.MAX_ATTEMPTS,
        ge=1,
        description="Total attempts including the first",
    )
    base_delay: float = Field(
        default=RetryDefaults.BASE_DELAY,
        ge=0,
        description="Delay before the first retry in seconds",
    )
    max_delay: float = Field(
        default=RetryDefaults.MAX_DELAY,
        ge=0,
        description="Upper bound on a single delay in seconds",
    )


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: str = Field(default=Logging.DEFAULT_LEVEL, description="Logging level")
    file: str | None = Field(
        default=None,
        description="Optional JSON-lines log file",
    )
    console_output: bool = Field(
        default=True,
        description="Rich console output (JSON lines when disabled)",
    )

    @field_validator("level")
    @classmethod
    def _validate_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            msg = f"Invalid log level: {value}. Must be one of {', '.join(_LOG_LEVELS)}"
            raise ValueError(msg)
        return level


__all__ = ["LoggingSettings", "RetrySettings"]
