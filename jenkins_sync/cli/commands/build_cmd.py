"""``jenkins-sync build`` / ``jenkins-sync watch`` — trigger and follow builds.

Both commands hand off to ``LiveTail``, which streams the build log to the
terminal until the build stops running, then report the resolved outcome.
``build`` judges the outcome (a non-passing, non-canceled build exits 1);
``watch`` only reports it.
"""

from __future__ import annotations

import typer
from rich.console import Console
from rich.markup import escape

from jenkins_sync.bridge.transport import JenkinsClient
from jenkins_sync.cli.context import command_settings, connect, reporting_errors
from jenkins_sync.config import Settings
from jenkins_sync.core.tail_loop import LiveTail
from jenkins_sync.models.status import BuildOutcome, BuildStatus
from jenkins_sync.monitor.renderer import FAIL, OK, SUCCESS, WAIT, WARN, ConsoleTailSink

console = Console()


def _follow(
    client: JenkinsClient, settings: Settings, project: str, *, already_running: bool
) -> BuildStatus:
    with ConsoleTailSink(console) as sink:
        tail = LiveTail(
            client,
            sink,
            poll_interval=settings.poll_interval,
            idle_after=settings.idle_after,
        )
        return tail.watch(project, already_running=already_running)


def build_cmd(
    ctx: typer.Context,
    project: str = typer.Argument(
        None,
        help="Project to build.  Defaults to the configured default project.",
    ),
    watch: bool = typer.Option(
        None,
        "--watch/--no-watch",
        help="Follow the build log until the build finishes.",
    ),
) -> None:
    """Trigger a build and, unless disabled, follow it to completion."""
    settings = command_settings(ctx)
    follow = settings.watch if watch is None else watch

    with reporting_errors(), connect(settings) as client:
        name = settings.project_name(project)
        console.print(f"{WAIT}    Triggering build on project [bold]{escape(name)}[/bold]")
        queue_id = client.trigger_build(name)
        console.print(
            f"{OK}    Triggered build on project [bold]{escape(name)}[/bold] [grey50]{queue_id}[/grey50]"
        )
        if not follow:
            return

        console.print(f"{WAIT}    Watching current build on project [bold]{escape(name)}[/bold]")
        result = _follow(client, settings, name, already_running=False)

    if result.status == BuildOutcome.PASSING:
        console.print(f"{SUCCESS}    Build for [bold]{escape(name)}[/bold] passed")
    elif result.status == BuildOutcome.CANCELED:
        console.print(f"{WARN}    Build for [bold]{escape(name)}[/bold] was canceled")
    else:
        console.print(
            f"{FAIL}    Build for [bold]{escape(name)}[/bold] failed with status "
            f"[red]{result.status.value}[/red]"
        )
        raise typer.Exit(code=1)


def watch_cmd(
    ctx: typer.Context,
    project: str = typer.Argument(
        None,
        help="Project to watch.  Defaults to the configured default project.",
    ),
) -> None:
    """Follow the currently running build of a project."""
    settings = command_settings(ctx)

    with reporting_errors(), connect(settings) as client:
        name = settings.project_name(project)
        console.print(f"{WAIT}    Watching current build on project [bold]{escape(name)}[/bold]")
        result = _follow(client, settings, name, already_running=True)

    if result.status == BuildOutcome.PASSING:
        console.print(f"{OK}    Build {result.build} passed")
    else:
        console.print(f"{WARN}    Build {result.build} failed")
