"""Test fixtures for the TPM GitHub client."""

from .github_responses import (
    GITHUB_ISSUE_RESPONSE,
    GITHUB_LABEL_RESPONSE,
    GITHUB_MILESTONES_RESPONSE,
    GITHUB_PERMISSION_RESPONSE,
    GITHUB_PULL_REQUEST_AS_ISSUE,
    GITHUB_PULL_REQUEST_RESPONSE,
    GITHUB_REPO_RESPONSE,
    GITHUB_USER_RESPONSE,
)
from .rate_limit_responses import (
    HEADERS_CRITICAL,
    HEADERS_EXHAUSTED,
    HEADERS_HEALTHY,
    HEADERS_PARTIAL,
    RATE_LIMIT_RESPONSE_EXHAUSTED,
    RATE_LIMIT_RESPONSE_HEALTHY,
    RATE_LIMIT_RESPONSE_RATE_ONLY,
    RATE_LIMIT_RESPONSE_WARNING,
    make_rate_limit_headers,
)

__all__ = [
    # Mock GitHub API responses
    "GITHUB_ISSUE_RESPONSE",
    "GITHUB_LABEL_RESPONSE",
    "GITHUB_MILESTONES_RESPONSE",
    "GITHUB_PERMISSION_RESPONSE",
    "GITHUB_PULL_REQUEST_AS_ISSUE",
    "GITHUB_PULL_REQUEST_RESPONSE",
    "GITHUB_REPO_RESPONSE",
    "GITHUB_USER_RESPONSE",
    # Rate limit
    "HEADERS_CRITICAL",
    "HEADERS_EXHAUSTED",
    "HEADERS_HEALTHY",
    "HEADERS_PARTIAL",
    "RATE_LIMIT_RESPONSE_EXHAUSTED",
    "RATE_LIMIT_RESPONSE_HEALTHY",
    "RATE_LIMIT_RESPONSE_RATE_ONLY",
    "RATE_LIMIT_RESPONSE_WARNING",
    "make_rate_limit_headers",
]
