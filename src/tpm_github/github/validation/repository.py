"""Repository accessibility validation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tpm_github.github.errors import translate_error
from tpm_github.github.exceptions import (
    GitHubAuthenticationError,
    GitHubNotFoundError,
    GitHubPermissionError,
)
from tpm_github.logging import bind_repo

from .results import ValidationResult

if TYPE_CHECKING:
    from tpm_github.github.client import GitHubClient


async def validate_repository(client: GitHubClient, owner: str, repo: str) -> ValidationResult:
    """Check that the token authenticates and can see ``owner/repo``.

    Args:
        client: GitHub client
        owner: Repository owner
        repo: Repository name

    Returns:
        ValidationResult with repository metadata in details on success
    """
    log = bind_repo(owner, repo)
    full_name = f"{owner}/{repo}"

    try:
        await client.get_current_user()
        repository = await client.get_repository(owner, repo)
    except Exception as e:
        error = translate_error(e)
        log.warning("Repository validation failed: {}", error)

        if isinstance(error, GitHubAuthenticationError):
            return ValidationResult(
                is_valid=False,
                error=(
                    f"Authentication failed while accessing '{full_name}': the GitHub "
                    "Personal Access Token is invalid or expired. Verify the token "
                    "has the required permissions and has not expired."
                ),
                details={"error_type": "authentication"},
            )
        if isinstance(error, GitHubNotFoundError):
            return ValidationResult(
                is_valid=False,
                error=(
                    f"Repository not found: '{full_name}' does not exist or is not "
                    "accessible with the provided token. Verify the repository name "
                    "and that your token has access to this repository."
                ),
                details={"error_type": "not_found", "repository": full_name},
            )
        if isinstance(error, GitHubPermissionError):
            return ValidationResult(
                is_valid=False,
                error=(
                    f"Access denied: your token does not have sufficient permissions "
                    f"to access '{full_name}'. The repository may be private or your "
                    "token may lack the required scopes."
                ),
                details={"error_type": "permission", "repository": full_name},
            )
        return ValidationResult(
            is_valid=False,
            error=(
                f"Failed to validate repository '{full_name}': {error.message}. "
                "Check your network connection and try again."
            ),
            details={"error_type": "unknown", "original_error": error.message},
        )

    log.debug("Repository {} is accessible", repository.full_name)
    return ValidationResult(is_valid=True, details={"repository": repository.summary()})
