"""Process-local tracking of the GitHub rate limit window.

The tracker holds the last window reported by GitHub's ``x-ratelimit-*``
headers. It is owned by a single ``ResilientExecutor``, which consults it
before each request and refreshes it after each response. Nothing is
persisted: a new process starts with no window.
"""

from __future__ import annotations

from typing import Any

from tpm_github.config import RateLimitConfig
from tpm_github.logging import get_logger

from .schemas import RateLimitStatus, RateLimitWindow

logger = get_logger(__name__)


class RateLimitTracker:
    """Last known rate limit window for one client.

    Usage:
        tracker = RateLimitTracker()
        tracker.update(response.headers)
        window = tracker.peek()
        if window is not None and window.blocks_requests():
            ...
    """

    def __init__(self, config: RateLimitConfig | None = None) -> None:
        """Initialize with no known window.

        Args:
            config: Status thresholds (defaults to RateLimitConfig())
        """
        self._config = config or RateLimitConfig()
        self._window: RateLimitWindow | None = None

    def peek(self) -> RateLimitWindow | None:
        """Return the current window snapshot (None until headers are seen)."""
        return self._window

    def update(self, headers: Any) -> bool:
        """Replace the window from response headers.

        Partial header sets and malformed values leave the previous window
        untouched.

        Args:
            headers: Response headers (dict or httpx.Headers)

        Returns:
            True if the window was replaced
        """
        try:
            window = RateLimitWindow.from_headers(headers)
        except ValueError as e:
            logger.debug("Ignoring malformed rate limit headers: {}", e)
            return False

        if window is None:
            return False

        previous = self._window
        self._window = window

        if window.is_exhausted and (previous is None or not previous.is_exhausted):
            logger.warning(
                "GitHub rate limit exhausted ({} used of {}), resets at {}",
                window.used,
                window.limit,
                window.reset_at.isoformat(),
            )
        return True

    def get_status(self) -> RateLimitStatus:
        """Health status of the current window (HEALTHY if unknown)."""
        if self._window is None:
            return RateLimitStatus.HEALTHY
        return self._window.get_status(
            self._config.healthy_threshold_pct,
            self._config.warning_threshold_pct,
        )

    def to_dict(self) -> dict[str, Any]:
        """Export current state as a dictionary (for display and logging)."""
        if self._window is None:
            return {"known": False}
        return {
            "known": True,
            "limit": self._window.limit,
            "remaining": self._window.remaining,
            "used": self._window.used,
            "remaining_percent": round(self._window.remaining_percent, 2),
            "reset_at": self._window.reset_at.isoformat(),
            "seconds_until_reset": self._window.seconds_until_reset,
            "status": self.get_status().value,
        }
