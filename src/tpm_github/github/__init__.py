"""GitHub API client module.

This module provides:
- Error taxonomy: GitHubErrorKind and one exception class per kind
- translate_error: Raw transport/SDK errors to taxonomy members
- Retry policy: RetryOptions, is_retryable, backoff_delay
- Rate limit tracking: RateLimitTracker, RateLimitWindow, RateLimitStatus
- ResilientExecutor: Rate-limit-aware request execution with retries
- GitHubClient: Async GitHub API client routed through the executor
- Validation workflows and create_github_issue
"""

from .exceptions import (
    GitHubAuthenticationError,
    GitHubClientError,
    GitHubErrorKind,
    GitHubNetworkError,
    GitHubNotFoundError,
    GitHubPermissionError,
    GitHubRateLimitError,
    GitHubRetryableError,
    GitHubServerError,
    GitHubUnknownError,
    GitHubValidationError,
)
from .errors import translate_error
from .retry import RetryOptions, backoff_delay, is_retryable, rate_limit_wait
from .rate_limit import RateLimitStatus, RateLimitTracker, RateLimitWindow
from .executor import ResilientExecutor
from .client import GitHubClient
from .validation import (
    MilestoneValidationResult,
    PermissionValidationResult,
    ProjectValidationResult,
    RepositoryPermissions,
    SetupValidationResult,
    ValidationResult,
    validate_github_setup,
    validate_milestones,
    validate_permissions,
    validate_project,
    validate_repository,
)
from .issues import IssueCreationResult, create_github_issue

__all__ = [
    # Client
    "GitHubClient",
    "ResilientExecutor",
    # Exceptions
    "GitHubAuthenticationError",
    "GitHubClientError",
    "GitHubErrorKind",
    "GitHubNetworkError",
    "GitHubNotFoundError",
    "GitHubPermissionError",
    "GitHubRateLimitError",
    "GitHubRetryableError",
    "GitHubServerError",
    "GitHubUnknownError",
    "GitHubValidationError",
    "translate_error",
    # Retry policy
    "RetryOptions",
    "backoff_delay",
    "is_retryable",
    "rate_limit_wait",
    # Rate limit tracking
    "RateLimitStatus",
    "RateLimitTracker",
    "RateLimitWindow",
    # Validation
    "MilestoneValidationResult",
    "PermissionValidationResult",
    "ProjectValidationResult",
    "RepositoryPermissions",
    "SetupValidationResult",
    "ValidationResult",
    "validate_github_setup",
    "validate_milestones",
    "validate_permissions",
    "validate_project",
    "validate_repository",
    # Issues
    "IssueCreationResult",
    "create_github_issue",
]
