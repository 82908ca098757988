"""Combined repository setup validation."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import TYPE_CHECKING

from tpm_github.logging import bind_repo

from .milestones import validate_milestones
from .permissions import validate_permissions, validate_project
from .repository import validate_repository
from .results import MilestoneValidationResult, ProjectValidationResult, SetupValidationResult

if TYPE_CHECKING:
    from tpm_github.github.client import GitHubClient


async def validate_github_setup(
    client: GitHubClient,
    owner: str,
    repo: str,
    *,
    project_id: int | None = None,
    required_milestones: Sequence[str] = (),
    create_missing_milestones: bool = True,
    sprint_duration_weeks: int = 2,
    start_date: datetime | None = None,
) -> SetupValidationResult:
    """Run every applicable validation for ``owner/repo``.

    All checks run even when an earlier one fails, so the summary reports
    every problem at once. Project validation runs only with a project_id,
    milestone validation only with required milestones.
    """
    log = bind_repo(owner, repo)

    repository = await validate_repository(client, owner, repo)
    permissions = await validate_permissions(client, owner, repo)

    project: ProjectValidationResult | None = None
    if project_id:
        project = await validate_project(client, owner, repo, project_id)

    milestones: MilestoneValidationResult | None = None
    if required_milestones:
        milestones = await validate_milestones(
            client,
            owner,
            repo,
            required_milestones,
            create_missing=create_missing_milestones,
            sprint_duration_weeks=sprint_duration_weeks,
            start_date=start_date,
        )

    summary: list[str] = []

    if repository.is_valid:
        summary.append(f"✓ Repository '{owner}/{repo}' is accessible")
    else:
        summary.append(f"✗ Repository validation failed: {repository.error}")

    if permissions.is_valid:
        summary.append("✓ All required permissions are available")
    else:
        summary.append(f"✗ Permission validation failed: {permissions.error}")

    if project is not None:
        if project.is_valid:
            summary.append(f"✓ Project {project_id} is accessible with write permissions")
        else:
            summary.append(f"✗ Project validation failed: {project.error}")

    if milestones is not None:
        if not milestones.is_valid:
            summary.append(f"✗ Milestone validation failed: {milestones.error}")
        elif milestones.created:
            summary.append(f"✓ Milestones validated ({len(milestones.created)} created)")
        else:
            summary.append("✓ All required milestones exist")

    checks = [repository, permissions, project, milestones]
    is_valid = all(check.is_valid for check in checks if check is not None)
    log.info("Setup validation {}", "passed" if is_valid else "failed")

    return SetupValidationResult(
        is_valid=is_valid,
        repository=repository,
        permissions=permissions,
        project=project,
        milestones=milestones,
        summary=summary,
    )
