"""Milestone reconciliation.

Required milestone titles are diffed against the repository's existing
milestones (open and closed). Missing ones are created one at a time,
each due one sprint after the previous one.
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from tpm_github.github.errors import translate_error
from tpm_github.github.exceptions import GitHubPermissionError
from tpm_github.logging import bind_repo

from .results import MilestoneValidationResult

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tpm_github.github.client import GitHubClient


def sprint_due_dates(start: datetime, sprint_duration_weeks: int) -> Iterator[datetime]:
    """Yield consecutive sprint end dates starting one sprint after ``start``.

    >>> dates = sprint_due_dates(datetime(2024, 1, 1, tzinfo=UTC), 2)
    >>> next(dates).date(), next(dates).date()
    (datetime.date(2024, 1, 15), datetime.date(2024, 1, 29))
    """
    sprint = timedelta(weeks=sprint_duration_weeks)
    cursor = start
    while True:
        cursor = cursor + sprint
        yield cursor


async def validate_milestones(
    client: GitHubClient,
    owner: str,
    repo: str,
    required_titles: Sequence[str],
    *,
    create_missing: bool = True,
    sprint_duration_weeks: int = 2,
    start_date: datetime | None = None,
) -> MilestoneValidationResult:
    """Ensure every required milestone exists, creating missing ones if allowed.

    Creation is sequential and stops at the first failure; milestones
    created before the failure are reported and left in place.

    Args:
        client: GitHub client
        owner: Repository owner
        repo: Repository name
        required_titles: Milestone titles that must exist
        create_missing: Create missing milestones (otherwise report them)
        sprint_duration_weeks: Spacing between consecutive due dates
        start_date: Start of the first sprint (defaults to now, UTC)

    Returns:
        MilestoneValidationResult with the final milestone list and the
        milestones created by this call
    """
    log = bind_repo(owner, repo)
    full_name = f"{owner}/{repo}"

    try:
        existing = await client.list_milestones(owner, repo)
        existing_titles = {m.title for m in existing}
        missing = [title for title in dict.fromkeys(required_titles) if title not in existing_titles]

        if not missing:
            return MilestoneValidationResult(
                is_valid=True,
                milestones=[m.summary() for m in existing],
            )

        if not create_missing:
            return MilestoneValidationResult(
                is_valid=False,
                error=(
                    f"Missing milestones in '{full_name}': {', '.join(missing)}. "
                    "These milestones need to be created before proceeding; rerun "
                    "with milestone creation enabled or create them in GitHub."
                ),
                details={
                    "error_type": "missing_milestones",
                    "missing_milestones": missing,
                    "existing_milestones": [m.title for m in existing],
                },
                milestones=[m.summary() for m in existing],
            )

        created: list[dict[str, object]] = []
        due_dates = sprint_due_dates(start_date or datetime.now(UTC), sprint_duration_weeks)

        for title, due_on in zip(missing, due_dates, strict=False):
            try:
                milestone = await client.create_milestone(
                    owner,
                    repo,
                    title=title,
                    description=f"Auto-generated milestone for {sprint_duration_weeks}-week sprint",
                    due_on=due_on,
                )
            except Exception as e:
                error = translate_error(e)
                log.warning("Failed to create milestone '{}': {}", title, error)
                return MilestoneValidationResult(
                    is_valid=False,
                    error=(
                        f"Failed to create milestone '{title}' in '{full_name}': "
                        f"{error.message}. Verify your token has write permissions "
                        "to the repository."
                    ),
                    details={
                        "error_type": "milestone_creation_failed",
                        "failed_milestone": title,
                        "created": created,
                    },
                    created=created,
                )

            log.info("Created milestone '{}' due {}", milestone.title, due_on.date().isoformat())
            created.append(milestone.summary())

        updated = await client.list_milestones(owner, repo)
    except Exception as e:
        error = translate_error(e)
        log.warning("Milestone validation failed: {}", error)

        if isinstance(error, GitHubPermissionError):
            return MilestoneValidationResult(
                is_valid=False,
                error=(
                    f"Permission denied: cannot access milestones for '{full_name}'. "
                    "Your token needs 'repo' scope and write permissions to view and "
                    "create milestones."
                ),
                details={"error_type": "milestone_permission_denied"},
            )
        return MilestoneValidationResult(
            is_valid=False,
            error=(
                f"Failed to validate milestones for '{full_name}': {error.message}. "
                "Check your network connection and token, then try again."
            ),
            details={"error_type": "milestone_validation_failed", "original_error": error.message},
        )

    return MilestoneValidationResult(
        is_valid=True,
        details={"created_count": len(created), "total_milestones": len(updated)},
        milestones=[m.summary() for m in updated],
        created=created,
    )
