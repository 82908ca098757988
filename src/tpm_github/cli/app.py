"""Entry point for the ``tpm-github`` command."""

from typing import Annotated

import typer

from tpm_github import __version__
from tpm_github.cli import github as github_cmd
from tpm_github.cli.common import console
from tpm_github.config import get_settings
from tpm_github.logging import setup_logging

app = typer.Typer(
    name="tpm-github",
    help="Validate TPM project repositories on GitHub and file issues against them.",
    add_completion=False,
    no_args_is_help=True,
)
app.add_typer(github_cmd.app, name="github")


def _show_version(value: bool) -> None:
    if not value:
        return
    console.print(f"tpm-github {__version__}")
    raise typer.Exit()


VersionFlag = Annotated[
    bool,
    typer.Option("--version", callback=_show_version, is_eager=True, help="Print the version and exit."),
]
VerboseFlag = Annotated[bool, typer.Option("--verbose", "-v", help="Log at DEBUG level.")]
QuietFlag = Annotated[bool, typer.Option("--quiet", "-q", help="Only log warnings and errors.")]


@app.callback()
def main(
    version: VersionFlag = False,
    verbose: VerboseFlag = False,
    quiet: QuietFlag = False,
) -> None:
    """TPM GitHub client: setup validation, rate limit status and issue creation."""
    settings = get_settings()
    setup_logging(settings.log_level, verbose=verbose, quiet=quiet, log_config=settings.logging)


if __name__ == "__main__":
    app()
