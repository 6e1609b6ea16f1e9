"""Bounded retry with exponential backoff.

The fetch client never retries on its own. Callers that want to ride out
transient upstream failures wrap the call in ``retry_with_backoff``, which
waits 2, 4, 8, 16 then 32 seconds between attempts by default.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from anibridge.shared.constants import RetryDefaults
from anibridge.shared.errors import (
    AniBridgeError,
    AniBridgeNetworkError,
    RateLimitedError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class BackoffPolicy:
    """Retry schedule.

    Attributes:
        max_attempts: Total attempts including the first one
        base_delay: Delay before the first retry, in seconds
        max_delay: Upper bound on any single delay, in seconds
    """

    max_attempts: int = RetryDefaults.MAX_ATTEMPTS
    base_delay: float = RetryDefaults.BASE_DELAY
    max_delay: float = RetryDefaults.MAX_DELAY

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            msg = f"max_attempts must be >= 1, got {self.max_attempts}"
            raise ValueError(msg)
        if self.base_delay < 0 or self.max_delay < 0:
            raise ValueError("Delays must be non-negative")

    def delay_for(self, attempt: int) -> float:
        """Delay after the zero-based ``attempt`` failed.

        Example:
            >>> [BackoffPolicy().delay_for(n) for n in range(5)]
            [2.0, 4.0, 8.0, 16.0, 32.0]
        """
        return min(self.base_delay * (2**attempt), self.max_delay)

    def delay_after(self, attempt: int, error: Exception) -> float:
        """Delay for ``attempt``, stretched to a server-requested Retry-After."""
        delay = self.delay_for(attempt)
        if isinstance(error, RateLimitedError) and error.retry_after is not None:
            delay = max(delay, min(error.retry_after, self.max_delay))
        return delay


@dataclass(frozen=True)
class RetryOutcome(Generic[T]):
    """Result of a retried operation.

    Attributes:
        value: Return value of the successful attempt
        error: Last error when every attempt failed
        attempts: Number of attempts made
    """

    value: T | None
    error: Exception | None
    attempts: int

    @property
    def succeeded(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, or re-raise the last error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


def is_retryable(error: Exception) -> bool:
    """Only network errors flagged retryable are worth another attempt."""
    return isinstance(error, AniBridgeNetworkError) and error.retryable


def retry_with_backoff(
    operation: Callable[[], T],
    policy: BackoffPolicy | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> RetryOutcome[T]:
    """Run ``operation`` until it succeeds, fails permanently or runs out of attempts.

    Non-retryable errors (parse failures, 4xx responses) end the loop at
    once and are reported in the outcome. Errors that are not AniBridge
    errors propagate unchanged.

    Args:
        operation: Zero-argument callable to run
        policy: Backoff schedule
        sleep: Delay function, injectable for tests

    Returns:
        RetryOutcome describing the final attempt
    """
    policy = policy or BackoffPolicy()

    for attempt in range(policy.max_attempts):
        try:
            value = operation()
        except AniBridgeNetworkError as e:
            attempts = attempt + 1
            if not is_retryable(e) or attempts >= policy.max_attempts:
                if attempts > 1:
                    logger.warning("Giving up after %d attempt(s): %s", attempts, e)
                return RetryOutcome(value=None, error=e, attempts=attempts)

            delay = policy.delay_after(attempt, e)
            logger.warning(
                "Attempt %d/%d failed (%s). Retrying in %.1fs",
                attempts,
                policy.max_attempts,
                e.code.value,
                delay,
            )
            sleep(delay)
        except AniBridgeError as e:
            return RetryOutcome(value=None, error=e, attempts=attempt + 1)
        else:
            return RetryOutcome(value=value, error=None, attempts=attempt + 1)

    # max_attempts >= 1, so the loop always returns
    raise AssertionError("unreachable")
