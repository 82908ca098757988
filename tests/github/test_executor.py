"""Tests for ResilientExecutor.

Tests cover:
- Success path and tracker updates
- Retries with exponential backoff for transient failures
- No retries for permanent failures
- Waiting for a near rate limit reset
- The pre-flight gate on an exhausted window
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
from githubkit.exception import RequestError
from pydantic import ValidationError

from tests.factories import make_request_failed
from tpm_github.github.exceptions import (
    GitHubAuthenticationError,
    GitHubNetworkError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    GitHubServerError,
)
from tpm_github.github.executor import ResilientExecutor
from tpm_github.github.rate_limit import RateLimitTracker, RateLimitWindow
from tpm_github.github.retry import RetryOptions

NOW = datetime(2024, 1, 15, 10, 0, 0, tzinfo=UTC)


class FakeClock:
    """Deterministic clock whose sleep advances time."""

    def __init__(self, now: datetime = NOW) -> None:
        self.now = now
        self.sleeps: list[float] = []

    def __call__(self) -> datetime:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += timedelta(seconds=seconds)


def _headers(remaining: int, reset_in: int = 3600, limit: int = 5000) -> dict[str, str]:
    return {
        "x-ratelimit-remaining": str(remaining),
        "x-ratelimit-limit": str(limit),
        "x-ratelimit-used": str(limit - remaining),
        "x-ratelimit-reset": str(int((NOW + timedelta(seconds=reset_in)).timestamp())),
    }


def _ok(headers: dict[str, str] | None = None) -> MagicMock:
    response = MagicMock()
    response.headers = headers if headers is not None else _headers(4999)
    return response


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def tracker():
    return RateLimitTracker()


@pytest.fixture
def executor(clock, tracker):
    return ResilientExecutor(
        tracker,
        RetryOptions(max_retries=3, base_delay=1.0, max_delay=30.0, backoff_factor=2.0),
        sleep=clock.sleep,
        clock=clock,
    )


# -----------------------------------------------------------------------------
# Success
# -----------------------------------------------------------------------------
class TestSuccess:
    """Successful operations."""

    async def test_returns_result(self, executor, clock):
        response = _ok()
        operation = AsyncMock(return_value=response)

        assert await executor.execute(operation) is response
        operation.assert_awaited_once()
        assert clock.sleeps == []

    async def test_updates_tracker(self, executor, tracker):
        await executor.execute(AsyncMock(return_value=_ok(_headers(4200))))
        assert tracker.peek().remaining == 4200

    async def test_missing_headers_leave_tracker(self, executor, tracker):
        await executor.execute(AsyncMock(return_value=_ok(_headers(4200))))
        await executor.execute(AsyncMock(return_value=_ok({})))
        assert tracker.peek().remaining == 4200

    async def test_result_without_headers_attribute(self, executor, tracker):
        assert await executor.execute(AsyncMock(return_value=42)) == 42
        assert tracker.peek() is None


# -----------------------------------------------------------------------------
# Retries
# -----------------------------------------------------------------------------
class TestRetries:
    """Retry and backoff behavior."""

    async def test_flaky_server_error_retried_once(self, executor, clock):
        response = _ok()
        operation = AsyncMock(side_effect=[make_request_failed(502), response])

        assert await executor.execute(operation) is response
        assert operation.await_count == 2
        assert len(clock.sleeps) == 1
        assert clock.sleeps[0] > 0

    async def test_network_error_retried(self, executor, clock):
        response = _ok()
        operation = AsyncMock(side_effect=[RequestError("connection reset"), response])

        assert await executor.execute(operation) is response
        assert clock.sleeps == [1.0]

    async def test_max_retries_bounds_attempts(self, executor, clock):
        operation = AsyncMock(side_effect=make_request_failed(500))

        with pytest.raises(GitHubServerError) as exc_info:
            await executor.execute(operation)

        assert operation.await_count == 4
        assert clock.sleeps == [1.0, 2.0, 4.0]
        assert exc_info.value.status == 500

    @pytest.mark.parametrize("max_retries", [0, 1, 5])
    async def test_attempt_count_is_retries_plus_one(self, executor, max_retries):
        operation = AsyncMock(side_effect=make_request_failed(503))

        with pytest.raises(GitHubServerError):
            await executor.execute(operation, RetryOptions(max_retries=max_retries))

        assert operation.await_count == max_retries + 1

    async def test_backoff_capped(self, clock):
        executor = ResilientExecutor(
            options=RetryOptions(max_retries=4, base_delay=1.0, max_delay=3.0),
            sleep=clock.sleep,
            clock=clock,
        )
        with pytest.raises(GitHubServerError):
            await executor.execute(AsyncMock(side_effect=make_request_failed(500)))
        assert clock.sleeps == [1.0, 2.0, 3.0, 3.0]

    async def test_error_chained_to_cause(self, executor):
        failure = make_request_failed(500)
        with pytest.raises(GitHubServerError) as exc_info:
            await executor.execute(AsyncMock(side_effect=failure), RetryOptions(max_retries=0))
        assert exc_info.value.__cause__ is failure


class TestNoRetry:
    """Permanent failures are raised immediately."""

    async def test_authentication_not_retried(self, executor, clock):
        operation = AsyncMock(side_effect=make_request_failed(401))

        with pytest.raises(GitHubAuthenticationError):
            await executor.execute(operation)

        operation.assert_awaited_once()
        assert clock.sleeps == []

    async def test_not_found_not_retried(self, executor):
        operation = AsyncMock(side_effect=make_request_failed(404))
        with pytest.raises(GitHubNotFoundError):
            await executor.execute(operation)
        operation.assert_awaited_once()

    async def test_already_translated_error_passes_through(self, executor):
        error = GitHubNotFoundError("repos/a/b")
        with pytest.raises(GitHubNotFoundError) as exc_info:
            await executor.execute(AsyncMock(side_effect=error))
        assert exc_info.value is error

    async def test_unknown_error_not_retried(self, executor):
        operation = AsyncMock(side_effect=ValueError("bad payload"))
        with pytest.raises(Exception, match="bad payload"):
            await executor.execute(operation)
        operation.assert_awaited_once()


# -----------------------------------------------------------------------------
# Rate Limiting
# -----------------------------------------------------------------------------
class TestRateLimitHandling:
    """Rate limit waits and the pre-flight gate."""

    async def test_waits_for_near_reset(self, executor, clock):
        response = _ok()
        operation = AsyncMock(
            side_effect=[make_request_failed(403, headers=_headers(0, reset_in=60)), response]
        )

        assert await executor.execute(operation) is response
        assert clock.sleeps == [60.0]

    async def test_error_headers_update_tracker(self, executor, tracker):
        operation = AsyncMock(side_effect=make_request_failed(404, headers=_headers(17)))
        with pytest.raises(GitHubNotFoundError):
            await executor.execute(operation)
        assert tracker.peek().remaining == 17

    async def test_far_reset_backs_off_then_gate_raises(self, executor, clock):
        """A reset beyond the wait cap is not slept through."""
        operation = AsyncMock(side_effect=make_request_failed(403, headers=_headers(0, reset_in=3600)))

        with pytest.raises(GitHubRateLimitError):
            await executor.execute(operation)

        operation.assert_awaited_once()
        assert clock.sleeps == [1.0]

    async def test_missing_reset_uses_backoff(self, executor, clock):
        response = _ok()
        operation = AsyncMock(
            side_effect=[make_request_failed(403, headers={"x-ratelimit-remaining": "0"}), response]
        )

        assert await executor.execute(operation) is response
        assert clock.sleeps == [1.0]

    async def test_rate_limit_waits_are_capped(self, clock):
        executor = ResilientExecutor(
            options=RetryOptions(max_retries=2, rate_limit_retries=0),
            sleep=clock.sleep,
            clock=clock,
        )
        reset = str(int((NOW + timedelta(seconds=60)).timestamp()))
        # No limit header, so the tracker keeps no window and the gate stays open
        headers = {"x-ratelimit-remaining": "0", "x-ratelimit-reset": reset}
        response = _ok()
        operation = AsyncMock(side_effect=[make_request_failed(403, headers=headers), response])

        assert await executor.execute(operation) is response
        assert clock.sleeps == [1.0]

    async def test_preflight_gate_blocks_without_calling(self, executor, tracker, clock):
        tracker.update(_headers(0, reset_in=600))
        operation = AsyncMock()

        with pytest.raises(GitHubRateLimitError) as exc_info:
            await executor.execute(operation)

        operation.assert_not_awaited()
        # Fails fast: no backoff sleeps before raising
        assert clock.sleeps == []
        assert exc_info.value.reset_at == NOW + timedelta(seconds=600)

    async def test_preflight_gate_opens_after_reset(self, executor, tracker, clock):
        tracker.update(_headers(0, reset_in=600))
        clock.now = NOW + timedelta(seconds=601)
        response = _ok()

        assert await executor.execute(AsyncMock(return_value=response)) is response

    async def test_concurrent_calls_share_tracker(self, executor, tracker):
        await executor.execute(AsyncMock(return_value=_ok(_headers(0, reset_in=600))))
        other = AsyncMock()
        with pytest.raises(GitHubRateLimitError):
            await executor.execute(other)
        other.assert_not_awaited()

    async def test_network_timeout_retried(self, executor, clock):
        response = _ok()
        operation = AsyncMock(side_effect=[TimeoutError(), TimeoutError(), response])

        assert await executor.execute(operation) is response
        assert clock.sleeps == [1.0, 2.0]


class TestExecutorDefaults:
    """Construction defaults."""

    def test_creates_tracker(self):
        executor = ResilientExecutor()
        assert isinstance(executor.tracker, RateLimitTracker)
        assert executor.options == RetryOptions()

    def test_window_snapshot_is_immutable(self):
        window = RateLimitWindow(remaining=1, limit=2, reset_at=NOW)
        with pytest.raises(ValidationError):
            window.remaining = 0  # type: ignore[misc]

    async def test_network_error_type(self, clock):
        executor = ResilientExecutor(options=RetryOptions(max_retries=0), sleep=clock.sleep, clock=clock)
        with pytest.raises(GitHubNetworkError):
            await executor.execute(AsyncMock(side_effect=ConnectionRefusedError()))
