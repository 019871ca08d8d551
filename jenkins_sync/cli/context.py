"""Shared plumbing for CLI commands: settings, client and error reporting."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from jenkins_sync.bridge.transport import JenkinsClient, TransportError
from jenkins_sync.config import (
    ConfigurationError,
    Settings,
    UnknownProjectError,
    configure_logging,
    load_settings,
)
from jenkins_sync.core.tail_loop import WatchCancelled
from jenkins_sync.monitor.renderer import FAIL, WARN

console = Console()


def command_settings(ctx: typer.Context) -> Settings:
    """Load settings with the global CLI flags applied, and validate them."""
    overrides = ctx.obj or {}
    try:
        settings = load_settings(**overrides)
        configure_logging(settings.log_level)
        settings.require_connection()
    except ConfigurationError as exc:
        for problem in exc.problems:
            console.print(f"{FAIL}    {escape(problem)}", highlight=False)
        raise typer.Exit(code=1)
    except ValidationError as exc:
        for error in exc.errors():
            field = ".".join(str(part) for part in error["loc"]) or "settings"
            console.print(
                f"{FAIL}    Invalid setting [bold]{escape(field)}[/bold]: {escape(error['msg'])}",
                highlight=False,
            )
        raise typer.Exit(code=1)
    return settings


def connect(settings: Settings) -> JenkinsClient:
    """Open a client session for *settings*."""
    return JenkinsClient(
        settings.host or "",
        settings.username or "",
        settings.password or "",
        timeout=settings.timeout,
    )


@contextmanager
def reporting_errors() -> Iterator[None]:
    """Turn the expected failures of a command into messages and exit codes."""
    try:
        yield
    except UnknownProjectError as exc:
        console.print(f"{FAIL}    {escape(str(exc))} [grey50]\\[project][/grey50]", highlight=False)
        raise typer.Exit(code=1)
    except TransportError as exc:
        console.print(f"{FAIL}    [bold red]Jenkins request failed:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1)
    except FileNotFoundError as exc:
        console.print(f"{FAIL}    [bold red]File not found:[/bold red] {exc.filename}")
        raise typer.Exit(code=1)
    except (KeyboardInterrupt, WatchCancelled):
        console.print(f"{WARN}    Interrupted")
        raise typer.Exit(code=130)
