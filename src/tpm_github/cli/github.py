"""GitHub commands: connectivity, rate limit, setup validation and issue creation."""

from typing import Annotated

import typer
from rich.table import Table

from tpm_github.cli.common import (
    OutputFormat,
    OutputFormatOption,
    RepoArgument,
    console,
    print_json,
    run_async_command,
    validate_repo,
)
from tpm_github.config import get_settings
from tpm_github.github import (
    GitHubAuthenticationError,
    GitHubClient,
    RateLimitStatus,
    create_github_issue,
    validate_github_setup,
)

app = typer.Typer(help="GitHub API commands")


def _require_token() -> None:
    if not get_settings().github_token:
        console.print("[red]Error:[/red] GITHUB_TOKEN (or GITHUB_PAT) not set in environment")
        raise typer.Exit(1)


def _get_status_style(status: RateLimitStatus) -> str:
    """Get rich style for status."""
    match status:
        case RateLimitStatus.HEALTHY:
            return "[green]HEALTHY[/green]"
        case RateLimitStatus.WARNING:
            return "[yellow]WARNING[/yellow]"
        case RateLimitStatus.CRITICAL:
            return "[red]CRITICAL[/red]"
        case RateLimitStatus.EXHAUSTED:
            return "[bold red]EXHAUSTED[/bold red]"
        case _:
            return str(status)


def _format_time_remaining(seconds: int) -> str:
    """Format seconds as human-readable time."""
    if seconds <= 0:
        return "Now"
    if seconds < 60:
        return f"{seconds}s"
    if seconds < 3600:
        return f"{seconds // 60}m {seconds % 60}s"
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    return f"{hours}h {minutes}m"


@app.command("test")
def test_connection() -> None:
    """Test GitHub API connectivity and token validity.

    Examples:
        tpm-github github test
    """
    _require_token()

    async def _test() -> None:
        try:
            async with GitHubClient.from_settings() as client:
                console.print("[bold]Checking authentication...[/bold]")
                user = await client.test_connection()
                console.print(f"  Authenticated as [cyan]{user.login}[/cyan]")

                console.print("[bold]Checking rate limit...[/bold]")
                window = await client.get_rate_limit()
                console.print(
                    f"  Rate limit: {window.remaining}/{window.limit} "
                    f"(resets at {window.reset_at:%H:%M:%S UTC})"
                )
                if window.remaining < 10:
                    console.print("[yellow]Warning:[/yellow] Low rate limit remaining")

                console.print("\n[green]GitHub API connection verified![/green]")
        except GitHubAuthenticationError:
            console.print("[red]Error:[/red] Invalid GitHub token")
            raise typer.Exit(1) from None

    run_async_command(_test(), error_prefix="Connection test failed")


@app.command("rate-limit")
def show_rate_limit(output_format: OutputFormatOption = OutputFormat.TEXT) -> None:
    """Show current GitHub API rate limit status.

    Examples:
        tpm-github github rate-limit
        tpm-github github rate-limit --format json
    """
    _require_token()
    thresholds = get_settings().rate_limit

    async def _check() -> None:
        async with GitHubClient.from_settings() as client:
            window = await client.get_rate_limit()

        status = window.get_status(thresholds.healthy_threshold_pct, thresholds.warning_threshold_pct)

        if output_format == OutputFormat.JSON:
            print_json(
                {
                    "limit": window.limit,
                    "remaining": window.remaining,
                    "used": window.used,
                    "remaining_percent": round(window.remaining_percent, 2),
                    "reset_at": window.reset_at.isoformat(),
                    "status": status.value,
                }
            )
            return

        table = Table(title="GitHub API Rate Limit")
        table.add_column("Status")
        table.add_column("Remaining", justify="right")
        table.add_column("Limit", justify="right")
        table.add_column("Used", justify="right")
        table.add_column("Resets In", justify="right")
        table.add_row(
            _get_status_style(status),
            str(window.remaining),
            str(window.limit),
            str(window.used),
            _format_time_remaining(window.seconds_until_reset),
        )
        console.print(table)

        if status == RateLimitStatus.EXHAUSTED:
            console.print(
                f"\n[red]Rate limit exhausted![/red] "
                f"Wait {_format_time_remaining(window.seconds_until_reset)} before making API calls."
            )
        elif status == RateLimitStatus.CRITICAL:
            console.print(
                "\n[yellow]Recommendation:[/yellow] Rate limit is low. "
                "Consider waiting before making more API calls."
            )

    run_async_command(_check(), error_prefix="Rate limit check failed")


@app.command("validate")
def validate_setup(
    repo: RepoArgument,
    milestones: Annotated[
        list[str] | None,
        typer.Option(
            "--milestone",
            "-m",
            help="Required milestone title (repeatable)",
        ),
    ] = None,
    no_create: Annotated[
        bool,
        typer.Option(
            "--no-create",
            help="Report missing milestones instead of creating them",
        ),
    ] = False,
    sprint_weeks: Annotated[
        int | None,
        typer.Option(
            "--sprint-weeks",
            min=1,
            help="Sprint length in weeks for auto-created milestone due dates",
        ),
    ] = None,
    project_id: Annotated[
        int | None,
        typer.Option(
            "--project-id",
            help="Project number to check write access for",
        ),
    ] = None,
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Validate repository access, permissions, project and milestones.

    Examples:
        tpm-github github validate octo-org/hello-world
        tpm-github github validate octo-org/hello-world -m "Sprint 1" -m "Sprint 2"
        tpm-github github validate octo-org/hello-world --project-id 3 --format json
    """
    owner, name = validate_repo(repo)
    _require_token()
    defaults = get_settings().validation

    async def _validate() -> bool:
        async with GitHubClient.from_settings() as client:
            result = await validate_github_setup(
                client,
                owner,
                name,
                project_id=project_id,
                required_milestones=milestones or [],
                create_missing_milestones=defaults.create_missing_milestones and not no_create,
                sprint_duration_weeks=sprint_weeks or defaults.sprint_duration_weeks,
            )

        if output_format == OutputFormat.JSON:
            print_json(result.to_dict())
        else:
            console.print(f"[bold]Validating {owner}/{name}[/bold]")
            for line in result.summary:
                style = "green" if line.startswith("✓") else "red"
                console.print(f"  [{style}]{line}[/{style}]")
            if result.milestones is not None and result.milestones.created:
                console.print("\n[bold]Created milestones:[/bold]")
                for milestone in result.milestones.created:
                    console.print(f"  - {milestone['title']} (due {milestone['due_on']})")
        return result.is_valid

    if not run_async_command(_validate(), error_prefix="Validation failed"):
        raise typer.Exit(1)


@app.command("create-issue")
def create_issue(
    repo: RepoArgument,
    title: Annotated[str, typer.Option("--title", "-t", help="Issue title")],
    body: Annotated[str | None, typer.Option("--body", "-b", help="Issue body (markdown)")] = None,
    labels: Annotated[
        list[str] | None,
        typer.Option("--label", "-l", help="Label name (repeatable; missing labels are created)"),
    ] = None,
    milestone: Annotated[
        str | None,
        typer.Option("--milestone", "-m", help="Milestone title"),
    ] = None,
    assignees: Annotated[
        list[str] | None,
        typer.Option("--assignee", "-a", help="Assignee username (repeatable)"),
    ] = None,
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Create an issue, creating missing labels and resolving the milestone.

    Examples:
        tpm-github github create-issue octo-org/hello-world -t "Fix login" -l bug
        tpm-github github create-issue octo-org/hello-world -t "Plan" -m "Sprint 1" -a octocat
    """
    owner, name = validate_repo(repo)
    _require_token()

    async def _create() -> bool:
        async with GitHubClient.from_settings() as client:
            result = await create_github_issue(
                client,
                owner,
                name,
                title,
                body,
                labels=labels or [],
                milestone=milestone,
                assignees=assignees or [],
            )

        if output_format == OutputFormat.JSON:
            print_json(result.to_dict())
            return result.success

        if not result.success:
            console.print(f"[red]Error:[/red] {result.error}")
            return False

        assert result.issue is not None
        console.print(f"[green]Created issue #{result.issue.number}:[/green] {result.issue.html_url}")
        for label in result.created_labels:
            console.print(f"  Created label [cyan]{label['name']}[/cyan] (#{label['color']})")
        for warning in result.warnings:
            console.print(f"  [yellow]Warning:[/yellow] {warning}")
        return True

    if not run_async_command(_create(), error_prefix="Issue creation failed"):
        raise typer.Exit(1)
