"""Shared pieces of the CLI: console, output format, repo argument, async runner."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Coroutine
from enum import Enum
from typing import Annotated, Any, TypeVar

import typer
from rich.console import Console

from tpm_github.github.exceptions import GitHubClientError, GitHubRateLimitError
from tpm_github.schemas import parse_repo_string

console = Console()

T = TypeVar("T")


class OutputFormat(str, Enum):
    """How a command renders its result."""

    TEXT = "text"
    """Rich console output."""

    JSON = "json"
    """A single JSON document on stdout."""


# Annotated aliases keep typer's call-in-default options out of signatures (B008)
OutputFormatOption = Annotated[
    OutputFormat,
    typer.Option("--format", "-f", help="Output format (text or json)"),
]

RepoArgument = Annotated[
    str,
    typer.Argument(help="Repository as owner/name, e.g. octo-org/hello-world"),
]


def run_async_command(coro: Coroutine[object, object, T], *, error_prefix: str = "Error") -> T:
    """Run a command's coroutine and turn uncaught errors into exit code 1.

    GitHub errors print their user-facing message (plus the reset time for
    rate limits); anything else prints ``str(error)``. ``typer.Exit`` raised
    inside the coroutine passes through untouched.
    """
    try:
        return asyncio.run(coro)
    except typer.Exit:
        raise
    except GitHubRateLimitError as e:
        console.print(f"[red]{error_prefix}:[/red] {e.message}")
        if e.reset_at is not None:
            console.print(f"  Resets at {e.reset_at:%H:%M:%S UTC}")
        raise typer.Exit(1) from None
    except GitHubClientError as e:
        console.print(f"[red]{error_prefix}:[/red] {e.message}")
        raise typer.Exit(1) from None
    except Exception as e:
        console.print(f"[red]{error_prefix}:[/red] {e}")
        raise typer.Exit(1) from None


def print_json(data: Any) -> None:
    """Emit ``data`` as JSON; datetimes and other objects fall back to ``str``."""
    console.print_json(json.dumps(data, default=str))


def validate_repo(repo: str) -> tuple[str, str]:
    """Split ``owner/name`` or exit with code 1."""
    try:
        return parse_repo_string(repo)
    except ValueError:
        console.print("[red]Error:[/red] Repository must be in owner/name format")
        raise typer.Exit(1) from None
