"""Factory functions for creating test data.

This module provides factory functions for:
- GitHub API payload dicts (users, repositories, milestones, labels, issues)
- githubkit response doubles (``parsed_data.model_dump()`` and ``headers``)
- githubkit transport errors (``RequestFailed`` with a mocked response)
- A GitHubClient double for workflow tests

Design principles:
- Factories provide sensible defaults that can be overridden
- Payload factories return dicts suitable for Pydantic model validation
"""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

from githubkit.exception import RequestFailed

from tpm_github.schemas.github_api import (
    GitHubIssue,
    GitHubLabel,
    GitHubMilestone,
    GitHubRepository,
    GitHubUser,
)

API_URL = "https://api.github.com"


# -----------------------------------------------------------------------------
# Payload Factories
# -----------------------------------------------------------------------------
def make_github_user(login: str = "octocat", **overrides: Any) -> dict[str, Any]:
    """Create a GitHub user payload."""
    return {"login": login, "id": 583231, "type": "User", **overrides}


def make_github_repo(
    owner: str = "octo-org",
    name: str = "hello-world",
    *,
    private: bool = False,
    description: str | None = "Test repository",
    **overrides: Any,
) -> dict[str, Any]:
    """Create a GitHub repository payload."""
    return {
        "id": 1296269,
        "name": name,
        "full_name": f"{owner}/{name}",
        "private": private,
        "description": description,
        "html_url": f"https://github.com/{owner}/{name}",
        **overrides,
    }


def make_github_milestone(
    number: int = 1,
    title: str = "Sprint 1",
    *,
    due_on: str | None = None,
    state: str = "open",
    **overrides: Any,
) -> dict[str, Any]:
    """Create a GitHub milestone payload (id derived from number)."""
    return {
        "id": 1000 + number,
        "number": number,
        "title": title,
        "state": state,
        "description": None,
        "due_on": due_on,
        **overrides,
    }


def make_github_label(name: str = "bug", color: str = "d73a4a", **overrides: Any) -> dict[str, Any]:
    """Create a GitHub label payload."""
    return {"id": abs(hash(name)) % 10**9, "name": name, "color": color, "description": None, **overrides}


def make_github_issue(
    number: int = 42,
    title: str = "Test issue",
    *,
    owner: str = "octo-org",
    repo: str = "hello-world",
    labels: list[dict[str, Any]] | None = None,
    milestone: dict[str, Any] | None = None,
    assignees: list[dict[str, Any]] | None = None,
    **overrides: Any,
) -> dict[str, Any]:
    """Create a GitHub issue payload."""
    return {
        "id": 9000 + number,
        "number": number,
        "title": title,
        "body": "Issue body",
        "state": "open",
        "html_url": f"https://github.com/{owner}/{repo}/issues/{number}",
        "user": make_github_user(),
        "labels": labels or [],
        "assignees": assignees or [],
        "milestone": milestone,
        **overrides,
    }


# -----------------------------------------------------------------------------
# githubkit Response / Error Doubles
# -----------------------------------------------------------------------------
def _parsed(data: Any) -> Any:
    if isinstance(data, list):
        return [_parsed(item) for item in data]
    mock = MagicMock()
    mock.model_dump.return_value = data
    return mock


def make_response(data: Any = None, headers: dict[str, str] | None = None) -> MagicMock:
    """Create a MagicMock that behaves like a githubkit Response.

    ``parsed_data`` mirrors githubkit models: each item has ``model_dump()``.
    """
    response = MagicMock()
    response.parsed_data = _parsed(data if data is not None else {})
    response.headers = headers or {}
    return response


def make_request_failed(
    status: int,
    *,
    headers: dict[str, str] | None = None,
    path: str = "repos/octo-org/hello-world",
    method: str = "GET",
    json_body: dict[str, Any] | None = None,
) -> RequestFailed:
    """Create a githubkit RequestFailed for an HTTP error response."""
    response = MagicMock()
    response.status_code = status
    response.headers = headers or {}
    response.raw_request.url = f"{API_URL}/{path}"
    response.raw_request.method = method
    response.json.return_value = json_body or {"message": "Error"}
    return RequestFailed(response)


# -----------------------------------------------------------------------------
# Client Double
# -----------------------------------------------------------------------------
def make_mock_client(
    *,
    user: dict[str, Any] | None = None,
    repo: dict[str, Any] | None = None,
    permission: str = "admin",
    milestones: list[dict[str, Any]] | None = None,
) -> MagicMock:
    """Create a GitHubClient double with AsyncMock API methods.

    Methods return validated schema objects, as the real client does.
    """
    client = MagicMock()
    client.get_current_user = AsyncMock(return_value=GitHubUser.model_validate(user or make_github_user()))
    client.get_repository = AsyncMock(
        return_value=GitHubRepository.model_validate(repo or make_github_repo())
    )
    client.get_collaborator_permission = AsyncMock(return_value=permission)
    client.list_milestones = AsyncMock(
        return_value=[GitHubMilestone.model_validate(m) for m in (milestones or [])]
    )
    client.create_milestone = AsyncMock()
    client.find_milestone_by_title = AsyncMock(return_value=None)
    client.get_label = AsyncMock(return_value=None)
    client.create_label = AsyncMock(
        side_effect=lambda owner, repo, *, name, color, description=None: GitHubLabel.model_validate(
            make_github_label(name, color)
        )
    )
    client.create_issue = AsyncMock(return_value=GitHubIssue.model_validate(make_github_issue()))
    return client
