"""Async GitHub API client wrapper using githubkit.

Every request goes through a ``ResilientExecutor``, so callers get typed
errors from ``tpm_github.github.exceptions`` and automatic retries for
transient failures. githubkit's own retry handling is disabled so that
the executor is the single place retry policy lives.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from datetime import datetime
from functools import partial
from pathlib import Path
from typing import Any, Literal

from githubkit import GitHub
from pydantic import ValidationError

from tpm_github.config import GitHubConfig, get_settings, load_settings
from tpm_github.logging import get_logger
from tpm_github.schemas.github_api import (
    GitHubIssue,
    GitHubLabel,
    GitHubMilestone,
    GitHubPullRequest,
    GitHubRepository,
    GitHubUser,
)

from .errors import translate_error
from .exceptions import GitHubAuthenticationError, GitHubNotFoundError
from .executor import ResilientExecutor
from .rate_limit import RateLimitTracker, RateLimitWindow
from .retry import RetryOptions

logger = get_logger(__name__)

IssueState = Literal["open", "closed", "all"]
RepoType = Literal["all", "owner", "public", "private", "member"]
SortDirection = Literal["asc", "desc"]

PER_PAGE = 100


def _dump(item: Any) -> dict[str, Any]:
    """Convert a githubkit model (or plain mapping) into a dict.

    Fields missing from the payload are left out so schema defaults apply.
    """
    if hasattr(item, "model_dump"):
        return item.model_dump(exclude_unset=True)
    return dict(item)


class GitHubClient:
    """Async GitHub API client with resilient request execution.

    Usage:
        async with GitHubClient() as client:
            repo = await client.get_repository("octo-org", "hello-world")
            print(repo.full_name)

    Or without context manager:
        client = GitHubClient.from_settings()
        user = await client.get_current_user()
        await client.close()
    """

    def __init__(
        self,
        token: str | None = None,
        config: GitHubConfig | None = None,
        *,
        tracker: RateLimitTracker | None = None,
        executor: ResilientExecutor | None = None,
    ) -> None:
        """Initialize the GitHub client.

        Args:
            token: GitHub PAT. If not provided, uses GITHUB_TOKEN/GITHUB_PAT from settings.
            config: Client configuration. If not provided, uses settings.github.
            tracker: Optional rate limit tracker for the default executor.
            executor: Optional executor (overrides tracker and config retry options).

        Raises:
            GitHubAuthenticationError: If no token is available.
        """
        if token is None or config is None:
            settings = get_settings()
            token = token or settings.github_token
            config = config or settings.github

        if not token:
            raise GitHubAuthenticationError(
                "GitHub token required. Set GITHUB_TOKEN or GITHUB_PAT environment variable."
            )

        self._token = token
        self._config = config
        self._client: GitHub[Any] | None = None
        self._executor = executor or ResilientExecutor(
            tracker,
            config.retry_options(),
            api_url=config.api_url,
        )

    @classmethod
    def from_settings(cls, config_path: str | Path | None = None) -> GitHubClient:
        """Create a client from environment variables and the optional config file.

        Args:
            config_path: YAML file to read instead of github-client.config.yaml
        """
        settings = load_settings(config_path)
        return cls(
            settings.github_token,
            settings.github,
            tracker=RateLimitTracker(settings.rate_limit),
        )

    @property
    def _github(self) -> GitHub[Any]:
        """Get or create the githubkit client instance."""
        if self._client is None:
            self._client = GitHub(
                self._token,
                base_url=self._config.api_url,
                user_agent=self._config.user_agent,
                timeout=self._config.timeout_seconds,
                auto_retry=False,
            )
        return self._client

    @property
    def config(self) -> GitHubConfig:
        """Client configuration."""
        return self._config

    @property
    def executor(self) -> ResilientExecutor:
        """The executor all requests go through."""
        return self._executor

    @property
    def rate_limit(self) -> RateLimitWindow | None:
        """Last rate limit window seen in response headers."""
        return self._executor.tracker.peek()

    async def close(self) -> None:
        """Drop the githubkit instance; a later request creates a new one."""
        self._client = None

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        await self.close()

    async def _request(
        self,
        operation: Callable[[], Awaitable[Any]],
        options: RetryOptions | None = None,
    ) -> Any:
        return await self._executor.execute(operation, options)

    async def _list_all(self, method: Callable[..., Awaitable[Any]], **params: Any) -> list[dict[str, Any]]:
        """Fetch every page of a list endpoint, one executor call per page."""
        items: list[dict[str, Any]] = []
        page = 1
        while True:
            resp = await self._request(partial(method, **params, per_page=PER_PAGE, page=page))
            batch = [_dump(item) for item in resp.parsed_data]
            items.extend(batch)
            if len(batch) < PER_PAGE:
                return items
            page += 1

    # -------------------------------------------------------------------------
    # Users & Rate Limit
    # -------------------------------------------------------------------------
    async def get_current_user(self) -> GitHubUser:
        """Get the authenticated user."""
        resp = await self._request(self._github.rest.users.async_get_authenticated)
        return GitHubUser.model_validate(_dump(resp.parsed_data))

    async def test_connection(self) -> GitHubUser:
        """Verify credentials by fetching the authenticated user."""
        user = await self.get_current_user()
        logger.info("Authenticated to GitHub as {}", user.login)
        return user

    async def get_rate_limit(self) -> RateLimitWindow:
        """Fetch the core rate limit window.

        GET /rate_limit does not count against the quota, so it bypasses the
        executor's pre-flight gate and is not retried.
        """
        try:
            resp = await self._github.rest.rate_limit.async_get()
        except Exception as e:
            raise translate_error(e, self._config.api_url) from e
        self._executor.tracker.update(resp.headers)
        return RateLimitWindow.from_api_response(_dump(resp.parsed_data))

    # -------------------------------------------------------------------------
    # Repositories
    # -------------------------------------------------------------------------
    async def get_repository(self, owner: str, repo: str) -> GitHubRepository:
        """Get a repository.

        Raises:
            GitHubNotFoundError: If the repository does not exist or is not visible
        """
        resp = await self._request(partial(self._github.rest.repos.async_get, owner=owner, repo=repo))
        return GitHubRepository.model_validate(_dump(resp.parsed_data))

    async def list_repositories(self, repo_type: RepoType = "owner") -> list[GitHubRepository]:
        """List repositories for the authenticated user, most recently updated first."""
        resp = await self._request(
            partial(
                self._github.rest.repos.async_list_for_authenticated_user,
                type=repo_type,
                sort="updated",
                per_page=PER_PAGE,
            )
        )
        repos: list[GitHubRepository] = []
        for item in resp.parsed_data:
            try:
                repos.append(GitHubRepository.model_validate(_dump(item)))
            except ValidationError:
                continue
        return repos

    async def get_collaborator_permission(self, owner: str, repo: str, username: str) -> str:
        """Get a user's permission level on a repository.

        Returns:
            One of "admin", "maintain", "write", "triage", "read" or "none"
        """
        resp = await self._request(
            partial(
                self._github.rest.repos.async_get_collaborator_permission_level,
                owner=owner,
                repo=repo,
                username=username,
            )
        )
        return str(_dump(resp.parsed_data)["permission"])

    # -------------------------------------------------------------------------
    # Issues
    # -------------------------------------------------------------------------
    async def list_issues(
        self,
        owner: str,
        repo: str,
        *,
        state: IssueState = "open",
        labels: list[str] | None = None,
        assignee: str | None = None,
        sort: Literal["created", "updated", "comments"] = "created",
        direction: SortDirection = "desc",
    ) -> list[GitHubIssue]:
        """List issues for a repository (pull requests are filtered out)."""
        params: dict[str, Any] = {
            "owner": owner,
            "repo": repo,
            "state": state,
            "sort": sort,
            "direction": direction,
        }
        if labels:
            params["labels"] = ",".join(labels)
        if assignee:
            params["assignee"] = assignee

        issues: list[GitHubIssue] = []
        for data in await self._list_all(self._github.rest.issues.async_list_for_repo, **params):
            try:
                issue = GitHubIssue.model_validate(data)
            except ValidationError:
                continue
            if not issue.is_pull_request:
                issues.append(issue)
        return issues

    async def create_issue(
        self,
        owner: str,
        repo: str,
        *,
        title: str,
        body: str | None = None,
        labels: list[str] | None = None,
        assignees: list[str] | None = None,
        milestone: int | None = None,
    ) -> GitHubIssue:
        """Create an issue.

        Args:
            owner: Repository owner
            repo: Repository name
            title: Issue title
            body: Issue body (markdown)
            labels: Label names (must exist, or GitHub creates them without color)
            assignees: Usernames to assign
            milestone: Milestone number

        Returns:
            The created issue
        """
        data: dict[str, Any] = {"title": title}
        if body is not None:
            data["body"] = body
        if labels:
            data["labels"] = labels
        if assignees:
            data["assignees"] = assignees
        if milestone is not None:
            data["milestone"] = milestone

        resp = await self._request(
            partial(self._github.rest.issues.async_create, owner=owner, repo=repo, **data)
        )
        return GitHubIssue.model_validate(_dump(resp.parsed_data))

    # -------------------------------------------------------------------------
    # Pull Requests
    # -------------------------------------------------------------------------
    async def list_pull_requests(
        self,
        owner: str,
        repo: str,
        *,
        state: IssueState = "open",
        head: str | None = None,
        base: str | None = None,
        sort: Literal["created", "updated", "popularity", "long-running"] = "created",
        direction: SortDirection = "desc",
    ) -> list[GitHubPullRequest]:
        """List pull requests for a repository.

        Args:
            owner: Repository owner
            repo: Repository name
            state: open, closed or all
            head: Filter by head as ``user:branch``
            base: Filter by base branch name
            sort: Sort field
            direction: Sort direction
        """
        params: dict[str, Any] = {
            "owner": owner,
            "repo": repo,
            "state": state,
            "sort": sort,
            "direction": direction,
        }
        if head:
            params["head"] = head
        if base:
            params["base"] = base

        pulls: list[GitHubPullRequest] = []
        for data in await self._list_all(self._github.rest.pulls.async_list, **params):
            try:
                pulls.append(GitHubPullRequest.model_validate(data))
            except ValidationError:
                continue
        return pulls

    async def create_pull_request(
        self,
        owner: str,
        repo: str,
        *,
        title: str,
        head: str,
        base: str,
        body: str | None = None,
        draft: bool = False,
        maintainer_can_modify: bool | None = None,
    ) -> GitHubPullRequest:
        """Open a pull request merging ``head`` into ``base``."""
        data: dict[str, Any] = {"title": title, "head": head, "base": base}
        if body is not None:
            data["body"] = body
        if draft:
            data["draft"] = True
        if maintainer_can_modify is not None:
            data["maintainer_can_modify"] = maintainer_can_modify

        resp = await self._request(
            partial(self._github.rest.pulls.async_create, owner=owner, repo=repo, **data)
        )
        return GitHubPullRequest.model_validate(_dump(resp.parsed_data))

    # -------------------------------------------------------------------------
    # Milestones
    # -------------------------------------------------------------------------
    async def list_milestones(self, owner: str, repo: str) -> list[GitHubMilestone]:
        """List open and closed milestones for a repository."""
        milestones: list[GitHubMilestone] = []
        for data in await self._list_all(
            self._github.rest.issues.async_list_milestones, owner=owner, repo=repo, state="all"
        ):
            try:
                milestones.append(GitHubMilestone.model_validate(data))
            except ValidationError:
                continue
        return milestones

    async def find_milestone_by_title(self, owner: str, repo: str, title: str) -> GitHubMilestone | None:
        """Find a milestone by exact title."""
        for milestone in await self.list_milestones(owner, repo):
            if milestone.title == title:
                return milestone
        return None

    async def create_milestone(
        self,
        owner: str,
        repo: str,
        *,
        title: str,
        description: str | None = None,
        due_on: datetime | None = None,
    ) -> GitHubMilestone:
        """Create a milestone."""
        data: dict[str, Any] = {"title": title}
        if description is not None:
            data["description"] = description
        if due_on is not None:
            data["due_on"] = due_on

        resp = await self._request(
            partial(self._github.rest.issues.async_create_milestone, owner=owner, repo=repo, **data)
        )
        return GitHubMilestone.model_validate(_dump(resp.parsed_data))

    # -------------------------------------------------------------------------
    # Labels
    # -------------------------------------------------------------------------
    async def get_label(self, owner: str, repo: str, name: str) -> GitHubLabel | None:
        """Get a label by name.

        Returns:
            The label, or None if it does not exist
        """
        try:
            resp = await self._request(
                partial(self._github.rest.issues.async_get_label, owner=owner, repo=repo, name=name)
            )
        except GitHubNotFoundError:
            return None
        return GitHubLabel.model_validate(_dump(resp.parsed_data))

    async def create_label(
        self,
        owner: str,
        repo: str,
        *,
        name: str,
        color: str,
        description: str | None = None,
    ) -> GitHubLabel:
        """Create a label (color is hex without '#')."""
        data: dict[str, Any] = {"name": name, "color": color}
        if description is not None:
            data["description"] = description

        resp = await self._request(
            partial(self._github.rest.issues.async_create_label, owner=owner, repo=repo, **data)
        )
        return GitHubLabel.model_validate(_dump(resp.parsed_data))
