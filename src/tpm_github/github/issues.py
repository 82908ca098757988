"""Issue creation workflow.

Creates an issue after validating the repository, creating any missing
labels and resolving the milestone by title. Label and milestone problems
do not block the issue; they are reported as warnings.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from tpm_github.logging import bind_repo

from .errors import translate_error
from .exceptions import (
    GitHubAuthenticationError,
    GitHubNotFoundError,
    GitHubPermissionError,
    GitHubUnknownError,
)
from .validation import ValidationResult, validate_repository

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tpm_github.schemas.github_api import GitHubIssue

    from .client import GitHubClient

LABEL_COLORS = (
    "D93F0B",  # red
    "FBCA04",  # yellow
    "0E8A16",  # green
    "006B75",  # teal
    "1D76DB",  # blue
    "0052CC",  # dark blue
    "5319E7",  # purple
    "E99695",  # pink
    "F9D0C4",  # light pink
    "C2E0C6",  # light green
    "BFDADC",  # light teal
    "C5DEF5",  # light blue
)


def pick_label_color() -> str:
    """Pick a color for an auto-created label."""
    return random.choice(LABEL_COLORS)


@dataclass
class IssueCreationResult:
    """Result of ``create_github_issue``."""

    success: bool = False
    """True if the issue was created."""

    issue: GitHubIssue | None = None
    """The created issue."""

    created_labels: list[dict[str, str]] = field(default_factory=list)
    """Labels created because they did not exist (name, color)."""

    warnings: list[str] = field(default_factory=list)
    """Non-fatal problems (label creation, milestone lookup)."""

    error: str | None = None
    """Failure message when success is False."""

    validation: ValidationResult | None = None
    """Repository validation result."""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {"success": self.success, "warnings": self.warnings}
        if self.issue is not None:
            result["issue"] = {
                "id": self.issue.id,
                "number": self.issue.number,
                "title": self.issue.title,
                "url": self.issue.html_url,
                "state": self.issue.state,
                "labels": [label.name for label in self.issue.labels],
                "milestone": self.issue.milestone.title if self.issue.milestone else None,
                "assignees": [user.login for user in self.issue.assignees],
            }
        if self.created_labels:
            result["created_labels"] = self.created_labels
        if self.error is not None:
            result["error"] = self.error
        if self.validation is not None:
            result["validation"] = self.validation.to_dict()
        return result


def _describe_failure(error: Exception) -> str:
    """Error message with a remediation hint for a failed issue creation."""
    github_error = translate_error(error)
    if isinstance(github_error, GitHubAuthenticationError):
        return f"Authentication failed: {github_error.message}. Please verify your GitHub Personal Access Token."
    if isinstance(github_error, GitHubNotFoundError):
        return (
            f"Repository not found: {github_error.message}. "
            "Please verify the repository name and your access permissions."
        )
    if isinstance(github_error, GitHubPermissionError):
        return (
            f"Permission denied: {github_error.message}. "
            "Please ensure your token has 'repo' scope and write access."
        )
    if isinstance(github_error, GitHubUnknownError):
        return f"Unexpected error: {github_error.message}"
    return f"GitHub API error: {github_error.message}"


async def create_github_issue(
    client: GitHubClient,
    owner: str,
    repo: str,
    title: str,
    body: str | None = None,
    *,
    labels: Sequence[str] = (),
    milestone: str | None = None,
    assignees: Sequence[str] = (),
) -> IssueCreationResult:
    """Create an issue in ``owner/repo``.

    Args:
        client: GitHub client
        owner: Repository owner
        repo: Repository name
        title: Issue title
        body: Issue body (markdown)
        labels: Label names; missing labels are created
        milestone: Milestone title; issue is created without it if not found
        assignees: Usernames to assign

    Returns:
        IssueCreationResult (never raises)
    """
    log = bind_repo(owner, repo, component="issues")
    result = IssueCreationResult()

    validation = await validate_repository(client, owner, repo)
    result.validation = validation
    if not validation.is_valid:
        result.error = validation.error or f"Repository validation failed for '{owner}/{repo}'."
        return result

    for name in labels:
        try:
            if await client.get_label(owner, repo, name) is not None:
                log.debug("Label already exists: {}", name)
                continue
            label = await client.create_label(
                owner,
                repo,
                name=name,
                color=pick_label_color(),
                description=f"Auto-created label: {name}",
            )
        except Exception as e:
            error = translate_error(e)
            log.warning("Failed to create label '{}': {}", name, error)
            result.warnings.append(f"Failed to create label '{name}': {error.message}")
            continue
        log.info("Created label '{}'", label.name)
        result.created_labels.append({"name": label.name, "color": label.color})

    milestone_number: int | None = None
    if milestone:
        try:
            found = await client.find_milestone_by_title(owner, repo, milestone)
        except Exception as e:
            error = translate_error(e)
            log.warning("Failed to find milestone '{}': {}", milestone, error)
            result.warnings.append(f"Failed to find milestone '{milestone}': {error.message}")
        else:
            if found is None:
                log.warning("Milestone '{}' not found, creating issue without it", milestone)
                result.warnings.append(f"Milestone '{milestone}' not found. Issue created without milestone.")
            else:
                milestone_number = found.number

    try:
        issue = await client.create_issue(
            owner,
            repo,
            title=title,
            body=body,
            labels=list(labels),
            assignees=list(assignees),
            milestone=milestone_number,
        )
    except Exception as e:
        result.error = _describe_failure(e)
        log.error("Failed to create GitHub issue: {}", result.error)
        return result

    log.info("Created issue #{}: {}", issue.number, issue.html_url)
    result.success = True
    result.issue = issue
    return result
