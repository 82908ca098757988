"""Retry policy for GitHub requests.

Decides which failures are worth another attempt and how long to wait
before making it. All functions here are pure.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import GitHubClientError, GitHubRateLimitError, GitHubRetryableError

MAX_RATE_LIMIT_WAIT = timedelta(minutes=5)
"""Longest declared reset the executor is willing to sleep through."""


class RetryOptions(BaseModel):
    """Retry and backoff settings for a single executor call.

    Delays are in seconds. ``max_retries`` counts retries, so an operation
    is attempted at most ``max_retries + 1`` times.
    """

    model_config = ConfigDict(frozen=True)

    max_retries: int = Field(default=3, ge=0, description="Retries after the first attempt")
    base_delay: float = Field(default=1.0, ge=0.0, description="First backoff delay (seconds)")
    max_delay: float = Field(default=30.0, ge=0.0, description="Backoff delay cap (seconds)")
    backoff_factor: float = Field(default=2.0, gt=1.0, description="Delay multiplier per attempt")
    rate_limit_retries: int = Field(
        default=3,
        ge=0,
        description="Maximum waits for a declared rate limit reset within one call",
    )


def is_retryable(error: GitHubClientError) -> bool:
    """Whether another attempt could succeed.

    Server errors, network failures and rate limiting are transient.
    Authentication, permission, not-found, validation and unclassified
    errors are not retried.
    """
    return isinstance(error, GitHubRetryableError)


def backoff_delay(attempt: int, options: RetryOptions) -> float:
    """Exponential backoff delay in seconds for a zero-based attempt index."""
    delay = options.base_delay * options.backoff_factor**attempt
    return min(delay, options.max_delay)


def rate_limit_wait(error: GitHubClientError, now: datetime | None = None) -> float | None:
    """Seconds to wait for a declared rate limit reset.

    Returns:
        The wait if the error is a rate limit with a reset time strictly
        in the future and less than ``MAX_RATE_LIMIT_WAIT`` away, else None
        (the caller then falls back to exponential backoff)
    """
    if not isinstance(error, GitHubRateLimitError) or error.reset_at is None:
        return None
    now = now or datetime.now(UTC)
    wait = error.reset_at - now
    if timedelta(0) < wait < MAX_RATE_LIMIT_WAIT:
        return wait.total_seconds()
    return None
