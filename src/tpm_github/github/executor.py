"""Resilient request execution for the GitHub API.

``ResilientExecutor`` wraps a single HTTP request with:
- a pre-flight rate limit gate (no request is sent while the tracked
  window is exhausted and has not reset yet)
- translation of failures into the GitHub error taxonomy
- retries for transient failures, waiting for the declared rate limit
  reset when it is near, otherwise exponential backoff
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import TypeVar

from tpm_github.logging import get_logger

from .errors import DEFAULT_API_URL, translate_error
from .exceptions import GitHubClientError, GitHubRateLimitError
from .rate_limit import RateLimitTracker
from .retry import RetryOptions, backoff_delay, is_retryable, rate_limit_wait

logger = get_logger(__name__)

T = TypeVar("T")

Operation = Callable[[], Awaitable[T]]
SleepFunc = Callable[[float], Awaitable[None]]
Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


class ResilientExecutor:
    """Executes GitHub requests with rate limit awareness and retries.

    Each ``execute`` call keeps its own attempt counter; concurrent calls
    only share the rate limit tracker.

    Usage:
        executor = ResilientExecutor()
        response = await executor.execute(
            lambda: github.rest.repos.async_get(owner="octo", repo="hello")
        )
    """

    def __init__(
        self,
        tracker: RateLimitTracker | None = None,
        options: RetryOptions | None = None,
        *,
        api_url: str = DEFAULT_API_URL,
        sleep: SleepFunc = asyncio.sleep,
        clock: Clock = utc_now,
    ) -> None:
        """Initialize the executor.

        Args:
            tracker: Rate limit tracker to consult and update (one is created
                     if not provided; the executor is its only writer)
            options: Default retry options for calls that pass none
            api_url: API base URL, used to shorten resource paths in errors
            sleep: Coroutine function used for retry waits
            clock: Returns the current UTC time
        """
        self._tracker = tracker or RateLimitTracker()
        self._options = options or RetryOptions()
        self._api_url = api_url
        self._sleep = sleep
        self._clock = clock

    @property
    def tracker(self) -> RateLimitTracker:
        """The rate limit tracker owned by this executor."""
        return self._tracker

    @property
    def options(self) -> RetryOptions:
        """Default retry options."""
        return self._options

    async def execute(self, operation: Operation[T], options: RetryOptions | None = None) -> T:
        """Run an operation, retrying transient failures.

        Args:
            operation: Zero-argument callable performing exactly one request
            options: Retry options for this call (defaults to the executor's)

        Returns:
            Whatever the operation returned on its successful attempt

        Raises:
            GitHubRateLimitError: If the tracked window is exhausted and has
                not reset (the operation is not called)
            GitHubClientError: The translated error of the final attempt, or
                of the first non-retryable failure
        """
        opts = options or self._options
        rate_limit_waits = 0
        last_error: GitHubClientError | None = None
        last_cause: Exception | None = None

        for attempt in range(opts.max_retries + 1):
            self._check_rate_limit()

            try:
                result = await operation()
            except Exception as e:
                error = self._handle_failure(e)
                last_error, last_cause = error, e
            else:
                self._tracker.update(getattr(result, "headers", None))
                return result

            if attempt == opts.max_retries:
                break

            if not is_retryable(error):
                logger.debug("Not retrying {}: {}", error.kind.value, error)
                break

            wait = rate_limit_wait(error, self._clock())
            if wait is not None and rate_limit_waits < opts.rate_limit_retries:
                rate_limit_waits += 1
                logger.info(
                    "Rate limited; waiting {:.1f}s for reset (attempt {}/{})",
                    wait,
                    attempt + 1,
                    opts.max_retries + 1,
                )
                await self._sleep(wait)
                continue

            delay = backoff_delay(attempt, opts)
            logger.warning(
                "GitHub request failed ({}), retrying in {:.2f}s (attempt {}/{}): {}",
                error.kind.value,
                delay,
                attempt + 1,
                opts.max_retries + 1,
                error,
            )
            await self._sleep(delay)

        if last_error is None:
            raise RuntimeError("No attempt was made")
        if last_cause is last_error:
            raise last_error
        raise last_error from last_cause

    def _check_rate_limit(self) -> None:
        """Raise without sending if the tracked window rejects requests."""
        window = self._tracker.peek()
        if window is not None and window.blocks_requests(self._clock()):
            logger.warning(
                "Rate limit exhausted; skipping request until {}",
                window.reset_at.isoformat(),
            )
            raise GitHubRateLimitError(window.reset_at)

    def _handle_failure(self, error: Exception) -> GitHubClientError:
        """Translate a failure and record any rate limit headers it carried."""
        response = getattr(error, "response", None)
        if response is not None:
            self._tracker.update(getattr(response, "headers", None))
        return translate_error(error, self._api_url)
