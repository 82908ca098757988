"""Repository validation workflows.

Each workflow returns a result object and never raises.
"""

from .milestones import sprint_due_dates, validate_milestones
from .permissions import validate_permissions, validate_project
from .repository import validate_repository
from .results import (
    MilestoneValidationResult,
    PermissionValidationResult,
    ProjectValidationResult,
    RepositoryPermissions,
    SetupValidationResult,
    ValidationResult,
)
from .setup import validate_github_setup

__all__ = [
    "MilestoneValidationResult",
    "PermissionValidationResult",
    "ProjectValidationResult",
    "RepositoryPermissions",
    "SetupValidationResult",
    "ValidationResult",
    "sprint_due_dates",
    "validate_github_setup",
    "validate_milestones",
    "validate_permissions",
    "validate_project",
    "validate_repository",
]
