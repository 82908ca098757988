"""Permission and project access validation.

GitHub reports one permission level per collaborator (admin, maintain,
write, triage, read or none). The workflows need issues, labels and
project write access, so the level is expanded into capabilities with
``RepositoryPermissions.from_level``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from tpm_github.github.errors import translate_error
from tpm_github.github.exceptions import GitHubAuthenticationError, GitHubNotFoundError
from tpm_github.logging import bind_repo

from .results import PermissionValidationResult, ProjectValidationResult, RepositoryPermissions

if TYPE_CHECKING:
    from tpm_github.github.client import GitHubClient

PROJECTS_NOTE = "Projects v2 validation requires the GraphQL API"


async def validate_permissions(
    client: GitHubClient, owner: str, repo: str
) -> PermissionValidationResult:
    """Check that the authenticated user can create issues, labels and modify projects.

    Args:
        client: GitHub client
        owner: Repository owner
        repo: Repository name

    Returns:
        PermissionValidationResult with derived capabilities when the
        permission level could be determined
    """
    log = bind_repo(owner, repo)
    full_name = f"{owner}/{repo}"

    try:
        await client.get_repository(owner, repo)
        user = await client.get_current_user()
    except Exception as e:
        error = translate_error(e)
        log.warning("Permission validation failed: {}", error)

        if isinstance(error, GitHubAuthenticationError):
            return PermissionValidationResult(
                is_valid=False,
                error=(
                    f"Authentication failed: cannot verify permissions for '{full_name}' "
                    "because the token is invalid. Please check your GitHub Personal "
                    "Access Token."
                ),
                details={"error_type": "authentication_failed"},
            )
        if isinstance(error, GitHubNotFoundError):
            return PermissionValidationResult(
                is_valid=False,
                error=(
                    f"Repository '{full_name}' not found or not accessible, so permissions "
                    "cannot be verified. Verify the repository name and your token's access."
                ),
                details={"error_type": "repository_not_found"},
            )
        return PermissionValidationResult(
            is_valid=False,
            error=(
                f"Failed to validate permissions for '{full_name}': {error.message}. "
                "Check your network connection and token, then try again."
            ),
            details={"error_type": "permission_validation_failed", "original_error": error.message},
        )

    try:
        level = await client.get_collaborator_permission(owner, repo, user.login)
    except Exception as e:
        error = translate_error(e)
        log.warning("Could not determine permission level for {}: {}", user.login, error)
        return PermissionValidationResult(
            is_valid=False,
            error=(
                f"Unable to determine permissions for '{full_name}': {error.message}. "
                "The permissions endpoint may not be accessible or your token may lack "
                "the required scopes. Verify your token has 'repo' scope or check "
                "permissions manually in GitHub."
            ),
            details={
                "error_type": "permission_check_failed",
                "original_error": error.message,
                "suggestion": "Verify your token has repo scope and try again, or check permissions manually in GitHub",
            },
        )

    permissions = RepositoryPermissions.from_level(level)
    missing = permissions.missing

    if missing:
        log.info("User {} has '{}' access, missing: {}", user.login, level, ", ".join(missing))
        return PermissionValidationResult(
            is_valid=False,
            error=(
                f"Insufficient permissions for '{full_name}': current level '{level}' is "
                f"missing {', '.join(missing)}. Your token needs 'repo' scope and write "
                "access to the repository."
            ),
            details={
                "error_type": "insufficient_permissions",
                "missing_permissions": missing,
                "required_scopes": ["repo"],
                "current_permissions": {"level": level},
            },
            permissions=permissions,
        )

    return PermissionValidationResult(
        is_valid=True,
        details={
            "message": "All required permissions are available",
            "current_permissions": {"level": level},
        },
        permissions=permissions,
    )


async def validate_project(
    client: GitHubClient, owner: str, repo: str, project_id: int
) -> ProjectValidationResult:
    """Check write access to a project attached to ``owner/repo``.

    Projects v2 lives behind the GraphQL API, so this check is derived
    from repository permissions: write access requires valid permissions
    plus the modify-projects or admin capability.
    """
    full_name = f"{owner}/{repo}"

    try:
        permissions = await validate_permissions(client, owner, repo)
    except Exception as e:
        error = translate_error(e)
        return ProjectValidationResult(
            is_valid=False,
            error=(
                f"Failed to validate project {project_id} for '{full_name}': {error.message}. "
                f"Note: full project validation requires the GitHub GraphQL API."
            ),
            details={
                "error_type": "project_validation_failed",
                "project_id": project_id,
                "original_error": error.message,
            },
        )

    caps = permissions.permissions
    has_write_access = permissions.is_valid and caps is not None and (
        caps.can_modify_projects or caps.can_admin
    )

    if not has_write_access:
        return ProjectValidationResult(
            is_valid=False,
            error=(
                f"Cannot validate project {project_id} for '{full_name}': your token needs "
                "'repo' scope and write permissions to access projects in this repository."
            ),
            details={
                "error_type": "insufficient_project_permissions",
                "project_id": project_id,
                "note": PROJECTS_NOTE,
            },
        )

    return ProjectValidationResult(
        is_valid=True,
        details={"project": {"id": project_id, "note": PROJECTS_NOTE}},
        project_exists=True,
        has_write_access=True,
    )
