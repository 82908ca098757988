"""Result objects for repository validation workflows.

Validation never raises: every outcome, including failures, is reported
through one of these objects so callers (CLI, issue workflow) can render
or serialize it directly.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a single validation check."""

    is_valid: bool
    """True if the check passed."""

    error: str | None = None
    """Human-readable failure message naming owner/repo, cause and remedy."""

    details: dict[str, Any] | None = None
    """Structured context (``error_type`` on failure)."""

    @property
    def error_type(self) -> str | None:
        """Failure category from details, if any."""
        if self.details is None:
            return None
        return self.details.get("error_type")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {"is_valid": self.is_valid}
        if self.error is not None:
            result["error"] = self.error
        if self.details is not None:
            result["details"] = self.details
        return result


@dataclass(frozen=True)
class RepositoryPermissions:
    """Capabilities derived from a collaborator permission level."""

    can_create_issues: bool = False
    can_create_labels: bool = False
    can_modify_projects: bool = False
    can_push: bool = False
    can_admin: bool = False

    @classmethod
    def from_level(cls, level: str) -> "RepositoryPermissions":
        """Derive capabilities from a GitHub permission level.

        write/maintain/admin can create issues, create labels and push;
        only maintain/admin can modify projects; only admin administers.
        """
        writer = level in ("admin", "write", "maintain")
        return cls(
            can_create_issues=writer,
            can_create_labels=writer,
            can_modify_projects=level in ("admin", "maintain"),
            can_push=writer,
            can_admin=level == "admin",
        )

    @property
    def missing(self) -> list[str]:
        """Required capabilities that are not granted."""
        missing = []
        if not self.can_create_issues:
            missing.append("create issues")
        if not self.can_create_labels:
            missing.append("create labels")
        if not self.can_modify_projects:
            missing.append("modify projects")
        return missing

    def to_dict(self) -> dict[str, bool]:
        return {
            "can_create_issues": self.can_create_issues,
            "can_create_labels": self.can_create_labels,
            "can_modify_projects": self.can_modify_projects,
            "can_push": self.can_push,
            "can_admin": self.can_admin,
        }


@dataclass(frozen=True)
class PermissionValidationResult(ValidationResult):
    """Permission check outcome with derived capabilities."""

    permissions: RepositoryPermissions | None = None
    """Capabilities (None if the permission level could not be determined)."""

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.permissions is not None:
            result["permissions"] = self.permissions.to_dict()
        return result


@dataclass(frozen=True)
class ProjectValidationResult(ValidationResult):
    """Project access check outcome."""

    project_exists: bool = False
    has_write_access: bool = False

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["project_exists"] = self.project_exists
        result["has_write_access"] = self.has_write_access
        return result


@dataclass(frozen=True)
class MilestoneValidationResult(ValidationResult):
    """Milestone reconciliation outcome."""

    milestones: list[dict[str, Any]] = field(default_factory=list)
    """All milestones after reconciliation (id, title, due_on)."""

    created: list[dict[str, Any]] = field(default_factory=list)
    """Milestones created by this call, in creation order."""

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["milestones"] = self.milestones
        result["created"] = self.created
        return result


@dataclass(frozen=True)
class SetupValidationResult:
    """Aggregate of all checks run by ``validate_github_setup``."""

    is_valid: bool
    repository: ValidationResult
    permissions: PermissionValidationResult
    project: ProjectValidationResult | None = None
    milestones: MilestoneValidationResult | None = None
    summary: list[str] = field(default_factory=list)
    """One ✓/✗ line per check run."""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "is_valid": self.is_valid,
            "repository": self.repository.to_dict(),
            "permissions": self.permissions.to_dict(),
        }
        if self.project is not None:
            result["project"] = self.project.to_dict()
        if self.milestones is not None:
            result["milestones"] = self.milestones.to_dict()
        result["summary"] = self.summary
        return result
