"""Pydantic schemas for parsing GitHub API responses.

These schemas map directly to the GitHub REST API response structure and
keep only the fields the validation and issue workflows use.
See: https://docs.github.com/en/rest
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field, model_validator

PermissionLevel = Literal["admin", "maintain", "write", "triage", "read", "none"]


class GitHubUser(BaseModel):
    """GitHub user object from API responses."""

    login: str = Field(description="GitHub username")
    id: int = Field(description="GitHub user ID")
    type: str = Field(default="User", description="User type (User, Bot, Organization)")
    avatar_url: str | None = Field(default=None, description="Avatar image URL")
    html_url: str | None = Field(default=None, description="Profile URL")


class GitHubRepository(BaseModel):
    """GitHub repository object.

    Maps to: GET /repos/{owner}/{repo}
    """

    id: int = Field(description="Repository ID")
    name: str = Field(description="Repository name")
    full_name: str = Field(description="owner/name")
    private: bool = Field(default=False, description="Whether the repository is private")
    description: str | None = Field(default=None, description="Repository description")
    html_url: str | None = Field(default=None, description="Repository URL")
    clone_url: str | None = Field(default=None, description="HTTPS clone URL")
    language: str | None = Field(default=None, description="Primary language")
    stargazers_count: int = Field(default=0, description="Star count")
    forks_count: int = Field(default=0, description="Fork count")
    open_issues_count: int = Field(default=0, description="Open issues and PRs")
    created_at: datetime | None = Field(default=None, description="When the repository was created")
    updated_at: datetime | None = Field(default=None, description="Last update timestamp")

    def summary(self) -> dict[str, object]:
        """Metadata snapshot reported by repository validation."""
        return {
            "name": self.name,
            "full_name": self.full_name,
            "private": self.private,
            "description": self.description,
        }


class GitHubLabel(BaseModel):
    """GitHub label object from API responses."""

    id: int = Field(description="Label ID")
    name: str = Field(description="Label name")
    color: str = Field(description="Label color (hex without #)")
    description: str | None = Field(default=None, description="Label description")


class GitHubMilestone(BaseModel):
    """GitHub milestone object.

    Maps to: GET /repos/{owner}/{repo}/milestones
    """

    id: int = Field(description="Milestone ID")
    number: int = Field(description="Milestone number (used when assigning issues)")
    title: str = Field(description="Milestone title")
    state: str = Field(default="open", description="Milestone state (open, closed)")
    description: str | None = Field(default=None, description="Milestone description")
    due_on: datetime | None = Field(default=None, description="Due date (UTC)")

    def summary(self) -> dict[str, object]:
        """Compact form used in validation results."""
        return {
            "id": self.id,
            "title": self.title,
            "due_on": self.due_on.isoformat() if self.due_on else None,
        }


class GitHubIssue(BaseModel):
    """GitHub issue object.

    Maps to: GET /repos/{owner}/{repo}/issues/{number}
    """

    id: int = Field(description="Issue ID")
    number: int = Field(description="Issue number")
    title: str = Field(description="Issue title")
    body: str | None = Field(default=None, description="Issue body")
    state: str = Field(description="Issue state (open, closed)")
    html_url: str = Field(description="Issue URL")
    user: GitHubUser | None = Field(default=None, description="Issue author")
    labels: list[GitHubLabel] = Field(default_factory=list, description="Issue labels")
    assignees: list[GitHubUser] = Field(default_factory=list, description="Assignees")
    milestone: GitHubMilestone | None = Field(default=None, description="Assigned milestone")
    created_at: datetime | None = Field(default=None, description="When the issue was created")
    updated_at: datetime | None = Field(default=None, description="Last update timestamp")
    is_pull_request: bool = Field(
        default=False,
        description="True when the issues endpoint returned a pull request",
    )

    @model_validator(mode="before")
    @classmethod
    def _flag_pull_requests(cls, data: Any) -> Any:
        # The issues endpoint returns pull requests too, marked by a "pull_request" object
        if isinstance(data, dict) and "is_pull_request" not in data:
            return {**data, "is_pull_request": bool(data.get("pull_request"))}
        return data


class GitHubBranchRef(BaseModel):
    """Head or base of a pull request."""

    ref: str = Field(description="Branch name")
    sha: str = Field(description="Commit SHA the branch points at")
    label: str | None = Field(default=None, description="owner:branch")


class GitHubPullRequest(BaseModel):
    """GitHub pull request object.

    Maps to: GET /repos/{owner}/{repo}/pulls
    """

    id: int = Field(description="Pull request ID")
    number: int = Field(description="Pull request number")
    title: str = Field(description="Pull request title")
    body: str | None = Field(default=None, description="Pull request body")
    state: str = Field(description="Pull request state (open, closed)")
    html_url: str = Field(description="Pull request URL")
    user: GitHubUser | None = Field(default=None, description="Pull request author")
    head: GitHubBranchRef = Field(description="Branch with the changes")
    base: GitHubBranchRef = Field(description="Branch the changes merge into")
    draft: bool = Field(default=False, description="Whether the pull request is a draft")
    mergeable: bool | None = Field(default=None, description="None while GitHub computes it")
    merged: bool = Field(default=False, description="Whether the pull request was merged")
    created_at: datetime | None = Field(default=None, description="When the pull request was opened")
    updated_at: datetime | None = Field(default=None, description="Last update timestamp")
