"""Main Typer application — imports and registers all CLI commands.

Entry point: ``jenkins-sync`` (configured via pyproject.toml scripts).

Global options given before the command override every other
configuration source for that invocation.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from jenkins_sync import __version__
from jenkins_sync.cli.commands.build_cmd import build_cmd, watch_cmd
from jenkins_sync.cli.commands.inspect_cmd import list_cmd, log_cmd, status_cmd
from jenkins_sync.cli.commands.sync import pull_cmd, push_cmd

app = typer.Typer(
    name="jenkins-sync",
    help="Sync Jenkins job configuration, trigger builds and tail their logs.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    host: str = typer.Option(None, "--host", help="Jenkins base URL."),
    username: str = typer.Option(None, "--username", "-u", help="Jenkins user name."),
    password: str = typer.Option(None, "--password", "-p", help="Jenkins password or API token."),
    directory: Path = typer.Option(
        None, "--directory", "-d", help="Directory holding <project>.xml files."
    ),
    projects: str = typer.Option(
        None, "--project-list", help="Comma-separated list of projects to manage."
    ),
    default: str = typer.Option(None, "--default", help="Project used when none is given."),
) -> None:
    """Collect global flags; they are applied when a command loads settings."""
    ctx.obj = {
        "host": host,
        "username": username,
        "password": password,
        "directory": directory,
        "projects": projects,
        "default": default,
    }


# Register subcommands
app.command(name="pull", help="Pull jenkins configuration for all projects.")(pull_cmd)
app.command(name="push", help="Push jenkins configuration for all projects.")(push_cmd)
app.command(name="build", help="Trigger build for PROJECT.")(build_cmd)
app.command(name="watch", help="Watch current build for PROJECT.")(watch_cmd)
app.command(name="status", help="Print the current build status of PROJECT.")(status_cmd)
app.command(name="log", help="Print the log of the latest build of PROJECT.")(log_cmd)
app.command(name="list", help="List available projects.")(list_cmd)


@app.command(name="version", help="Output the current version.")
def version_cmd() -> None:
    """Print the installed jenkins-sync version."""
    Console().print(__version__)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
