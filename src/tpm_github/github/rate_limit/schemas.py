"""Rate limit window model.

A window is built either from the ``x-ratelimit-*`` headers that come back
on every REST response or from the ``resources.core`` block of
``GET /rate_limit``.
"""

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, computed_field

from tpm_github.github.errors import normalize_headers, parse_reset_time

REQUIRED_HEADERS = ("x-ratelimit-remaining", "x-ratelimit-limit", "x-ratelimit-reset")


class RateLimitStatus(StrEnum):
    """How much of the window is left.

    With the default thresholds: HEALTHY at 50% or more, WARNING from 20%,
    CRITICAL below that, EXHAUSTED at zero.
    """

    HEALTHY = "healthy"
    WARNING = "warning"
    CRITICAL = "critical"
    EXHAUSTED = "exhausted"


class RateLimitWindow(BaseModel):
    """Provider-reported quota state for the authenticated token.

    ``used + remaining == limit`` is expected but not enforced; the
    server's numbers are trusted as-is.
    """

    model_config = ConfigDict(frozen=True)

    remaining: int = Field(ge=0, description="Requests remaining in current window")
    limit: int = Field(gt=0, description="Maximum requests allowed per window")
    reset_at: datetime = Field(description="UTC datetime when the window resets")
    used: int = Field(default=0, ge=0, description="Requests used in current window")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def remaining_percent(self) -> float:
        """Percentage of the window remaining (0.0 to 100.0)."""
        return (self.remaining / self.limit) * 100

    @property
    def is_exhausted(self) -> bool:
        """True when no requests remain."""
        return self.remaining == 0

    @property
    def seconds_until_reset(self) -> int:
        """Seconds until the window resets (0 if already past)."""
        delta = self.reset_at - datetime.now(UTC)
        return max(0, int(delta.total_seconds()))

    def blocks_requests(self, now: datetime | None = None) -> bool:
        """Whether a request issued now is known to be rejected."""
        now = now or datetime.now(UTC)
        return self.remaining == 0 and self.reset_at > now

    def get_status(
        self,
        healthy_threshold: float = 50.0,
        warning_threshold: float = 20.0,
    ) -> RateLimitStatus:
        """Classify the window by the share of quota remaining."""
        if self.remaining == 0:
            return RateLimitStatus.EXHAUSTED
        if self.remaining_percent >= healthy_threshold:
            return RateLimitStatus.HEALTHY
        if self.remaining_percent >= warning_threshold:
            return RateLimitStatus.WARNING
        return RateLimitStatus.CRITICAL

    @classmethod
    def from_headers(cls, headers: Any) -> Self | None:
        """Parse a window from ``x-ratelimit-*`` response headers.

        Returns:
            The window, or None unless remaining, limit and reset are all present

        Raises:
            ValueError: If a present header is not a valid value
        """
        values = normalize_headers(headers)
        if not all(name in values for name in REQUIRED_HEADERS):
            return None

        reset_at = parse_reset_time(values["x-ratelimit-reset"])
        if reset_at is None:
            raise ValueError(f"Invalid x-ratelimit-reset: {values['x-ratelimit-reset']!r}")

        return cls(
            remaining=int(values["x-ratelimit-remaining"]),
            limit=int(values["x-ratelimit-limit"]),
            reset_at=reset_at,
            used=int(values.get("x-ratelimit-used") or 0),
        )

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> Self:
        """Parse the core window from a GET /rate_limit response body."""
        resources = data.get("resources") or {}
        core = resources.get("core") or data["rate"]
        return cls(
            remaining=core["remaining"],
            limit=core["limit"],
            reset_at=datetime.fromtimestamp(core["reset"], tz=UTC),
            used=core.get("used", 0),
        )
