"""GitHub client exceptions.

Every way a GitHub request can fail maps to exactly one ``GitHubErrorKind``
and one exception class. Consumers can either catch the concrete classes or
dispatch on ``error.kind`` with a ``match`` statement.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import ClassVar


class GitHubErrorKind(StrEnum):
    """Closed set of classified GitHub failure categories."""

    AUTHENTICATION = "authentication"
    RATE_LIMIT = "rate_limit"
    NOT_FOUND = "not_found"
    PERMISSION = "permission"
    VALIDATION = "validation"
    NETWORK = "network"
    SERVER_ERROR = "server_error"
    UNKNOWN = "unknown"


class GitHubClientError(Exception):
    """Base exception for GitHub client errors."""

    kind: ClassVar[GitHubErrorKind] = GitHubErrorKind.UNKNOWN

    @property
    def message(self) -> str:
        """User-facing message."""
        return str(self)


class GitHubRetryableError(GitHubClientError):
    """Base class for errors that the executor may retry.

    Only transient conditions derive from this class: server errors,
    network failures and rate limiting.
    """


class GitHubAuthenticationError(GitHubClientError):
    """Raised when authentication fails (401) or no token is configured."""

    kind = GitHubErrorKind.AUTHENTICATION

    def __init__(
        self,
        message: str = "Invalid GitHub token. Please check your GITHUB_TOKEN environment variable.",
    ) -> None:
        super().__init__(message)


class GitHubRateLimitError(GitHubRetryableError):
    """Raised when the rate limit is exhausted (403 with remaining == 0)."""

    kind = GitHubErrorKind.RATE_LIMIT

    def __init__(self, reset_at: datetime | None = None, message: str | None = None) -> None:
        if message is None:
            if reset_at is not None:
                message = f"Rate limit exceeded. Resets at {reset_at.isoformat()}"
            else:
                message = "GitHub API rate limit exceeded"
        super().__init__(message)
        self._reset_at = reset_at

    @property
    def reset_at(self) -> datetime | None:
        """When the rate limit window resets (UTC), if the server said."""
        return self._reset_at


class GitHubNotFoundError(GitHubClientError):
    """Raised when a resource is not found (404)."""

    kind = GitHubErrorKind.NOT_FOUND

    def __init__(self, resource: str = "resource") -> None:
        super().__init__(f"GitHub resource not found: {resource}")
        self._resource = resource

    @property
    def resource(self) -> str:
        """Request path of the missing resource, API host stripped."""
        return self._resource


class GitHubPermissionError(GitHubClientError):
    """Raised on 403 responses that are not rate limiting."""

    kind = GitHubErrorKind.PERMISSION

    def __init__(self, action: str = "access this GitHub resource") -> None:
        super().__init__(f"Insufficient permissions for GitHub action: {action}")
        self._action = action

    @property
    def action(self) -> str:
        """The action that was refused."""
        return self._action


class GitHubValidationError(GitHubClientError):
    """Raised when GitHub rejects request parameters (422)."""

    kind = GitHubErrorKind.VALIDATION

    def __init__(self, detail: str = "Invalid request parameters") -> None:
        super().__init__(f"Validation failed: {detail}")
        self._detail = detail

    @property
    def detail(self) -> str:
        """Server-provided validation message."""
        return self._detail


class GitHubNetworkError(GitHubRetryableError):
    """Raised when the API could not be reached or the request timed out."""

    kind = GitHubErrorKind.NETWORK

    CONNECTION = "connection"
    TIMEOUT = "timeout"

    _MESSAGES: ClassVar[dict[str, str]] = {
        CONNECTION: "Unable to connect to GitHub API. Please check your internet connection.",
        TIMEOUT: "Request to GitHub API timed out. Please try again.",
    }

    def __init__(self, detail: str = CONNECTION) -> None:
        message = self._MESSAGES.get(detail, detail)
        super().__init__(f"GitHub network error: {message}")
        self._detail = detail

    @property
    def detail(self) -> str:
        """Either ``connection`` or ``timeout``."""
        return self._detail


class GitHubServerError(GitHubRetryableError):
    """Raised for 5xx responses and any status without a dedicated kind."""

    kind = GitHubErrorKind.SERVER_ERROR

    def __init__(self, status: int, message: str | None = None) -> None:
        super().__init__(message or f"GitHub API error ({status})")
        self._status = status

    @property
    def status(self) -> int:
        """HTTP status code returned by GitHub."""
        return self._status


class GitHubUnknownError(GitHubClientError):
    """Raised for failures that could not be classified."""

    kind = GitHubErrorKind.UNKNOWN

    def __init__(self, detail: str) -> None:
        super().__init__(f"Unexpected GitHub error: {detail}")
        self._detail = detail

    @property
    def detail(self) -> str:
        """Message of the original error."""
        return self._detail
