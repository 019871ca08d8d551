"""``jenkins-sync pull`` / ``jenkins-sync push`` — sync job configuration.

``pull`` downloads every configured project's ``config.xml`` into the
configured directory as ``<project>.xml``; ``push`` uploads those files
back to Jenkins.
"""

from __future__ import annotations

import typer
from rich.console import Console
from rich.markup import escape

from jenkins_sync.cli.context import command_settings, connect, reporting_errors
from jenkins_sync.core.config_store import JobConfigStore
from jenkins_sync.monitor.renderer import OK, WAIT

console = Console()


def pull_cmd(ctx: typer.Context) -> None:
    """Pull Jenkins configuration for every configured project."""
    settings = command_settings(ctx)
    store = JobConfigStore(settings.directory)

    with reporting_errors(), connect(settings) as client:
        for project in settings.projects:
            console.print(f"{WAIT}    Fetching [bold]{escape(project)}[/bold] config")
            config_xml = client.get_job_config(project)
            console.print(f"{OK}    Fetched [bold]{escape(project)}[/bold] config")

            target = store.path_for(project)
            console.print(
                f"{WAIT}    Writing [bold]{escape(project)}[/bold] config to "
                f"[grey50]{escape(str(target))}[/grey50]"
            )
            store.write(project, config_xml)
            console.print(f"{OK}    Wrote [bold]{escape(project)}[/bold] config")


def push_cmd(ctx: typer.Context) -> None:
    """Push local configuration files for every configured project."""
    settings = command_settings(ctx)
    store = JobConfigStore(settings.directory)

    with reporting_errors(), connect(settings) as client:
        # Read everything first so a missing file aborts before any upload.
        documents: dict[str, str] = {}
        for project in settings.projects:
            source = store.path_for(project)
            console.print(
                f"{WAIT}    Reading [bold]{escape(project)}[/bold] config from "
                f"[grey50]{escape(str(source))}[/grey50]"
            )
            documents[project] = store.read(project)
            console.print(f"{OK}    Read [bold]{escape(project)}[/bold] config")

        for project, config_xml in documents.items():
            console.print(f"{WAIT}    Pushing [bold]{escape(project)}[/bold] config")
            client.update_job_config(project, config_xml)
            console.print(f"{OK}    Pushed [bold]{escape(project)}[/bold] config")
