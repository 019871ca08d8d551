"""``jenkins-sync status`` / ``log`` / ``list`` — one-shot job inspection."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.markup import escape
from rich.text import Text

from jenkins_sync.cli.context import command_settings, connect, reporting_errors
from jenkins_sync.core.status_resolver import resolve_status
from jenkins_sync.monitor.renderer import BULLET, WAIT, WARN

console = Console()

_PROJECT_ARG_HELP = "Project to inspect.  Defaults to the configured default project."


def status_cmd(
    ctx: typer.Context,
    project: str = typer.Argument(None, help=_PROJECT_ARG_HELP),
) -> None:
    """Print the outcome of the most recent build attempt."""
    settings = command_settings(ctx)

    with reporting_errors(), connect(settings) as client:
        name = settings.project_name(project)
        status = resolve_status(client.get_job(name))

    console.print(status.current.value)


def log_cmd(
    ctx: typer.Context,
    project: str = typer.Argument(None, help=_PROJECT_ARG_HELP),
) -> None:
    """Print the full log of the latest build."""
    settings = command_settings(ctx)

    with reporting_errors(), connect(settings) as client:
        name = settings.project_name(project)
        status = resolve_status(client.get_job(name))
        number = status.last or status.build
        if number is None:
            console.print(f"{WARN}    [bold]{escape(name)}[/bold] has no builds yet")
            raise typer.Exit(code=1)

        console.print(f"{WAIT}    Fetching log for build {number} of [bold]{escape(name)}[/bold]")
        log_text = client.get_build_log(name, number)

    console.print(Text(log_text.rstrip("\n")), highlight=False)


def list_cmd(ctx: typer.Context) -> None:
    """List the configured projects."""
    settings = command_settings(ctx)
    for project in settings.projects:
        console.print(f"{BULLET}    {escape(project)}", highlight=False)
