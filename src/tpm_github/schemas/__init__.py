"""Pydantic schemas for GitHub API responses."""

from .github_api import (
    GitHubBranchRef,
    GitHubIssue,
    GitHubLabel,
    GitHubMilestone,
    GitHubPullRequest,
    GitHubRepository,
    GitHubUser,
    PermissionLevel,
)
from .repository import full_name, parse_repo_string

__all__ = [
    # GitHub API
    "GitHubBranchRef",
    "GitHubIssue",
    "GitHubLabel",
    "GitHubMilestone",
    "GitHubPullRequest",
    "GitHubRepository",
    "GitHubUser",
    "PermissionLevel",
    # Repository
    "full_name",
    "parse_repo_string",
]
