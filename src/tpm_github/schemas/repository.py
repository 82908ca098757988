"""Repository identifier helpers."""

import re

_REPO_PATTERN = re.compile(r"^(?P<owner>[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?)/(?P<name>[A-Za-z0-9._-]+)$")


def parse_repo_string(repo: str) -> tuple[str, str]:
    """Split an ``owner/name`` string.

    Args:
        repo: Repository in owner/name format (e.g., "octo-org/hello-world")

    Returns:
        Tuple of (owner, name)

    Raises:
        ValueError: If the string is not in owner/name format
    """
    match = _REPO_PATTERN.match(repo.strip())
    if match is None:
        raise ValueError(f"Repository must be in owner/name format, got {repo!r}")
    return match.group("owner"), match.group("name")


def full_name(owner: str, repo: str) -> str:
    """Join owner and name as ``owner/name``."""
    return f"{owner}/{repo}"
