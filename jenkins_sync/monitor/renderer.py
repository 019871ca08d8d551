"""Rich terminal rendering for jenkins-sync.

``ConsoleTailSink`` implements ``TailSink`` on top of a Rich ``Live``
display: log lines are printed above a single status line that is
rewritten in place on every poll.

Icon scheme
-----------
- red ✖    : failure
- yellow ⚠ : warning
- grey ⧗   : waiting / in progress
- grey ⇣   : step completed
- green ✔  : success
"""

from __future__ import annotations

import time

from rich.console import Console
from rich.live import Live
from rich.markup import escape
from rich.text import Text

FAIL = "[red] ✖ [/red]"
WARN = "[yellow] ⚠ [/yellow]"
WAIT = "[grey50] ⧗ [/grey50]"
OK = "[bold grey50] ⇣ [/bold grey50]"
SUCCESS = "[green] ✔ [/green]"
BULLET = "[bold] - [/bold]"

INFINITY = "∞"


def format_eta(eta_ms: float | None, now_ms: float | None = None) -> str:
    """Render an epoch-millisecond ETA relative to *now_ms*.

    Returns ``"∞"`` when the ETA is unknown.
    """
    if eta_ms is None:
        return INFINITY
    if now_ms is None:
        now_ms = time.time() * 1000
    seconds = int((eta_ms - now_ms) / 1000)
    if seconds < 45:
        return "in a few seconds"
    if seconds < 3600:
        minutes = max(1, round(seconds / 60))
        return "in a minute" if minutes == 1 else f"in {minutes} minutes"
    if seconds < 86400:
        hours = round(seconds / 3600)
        return "in an hour" if hours == 1 else f"in {hours} hours"
    days = round(seconds / 86400)
    return "in a day" if days == 1 else f"in {days} days"


class ConsoleTailSink:
    """Renders the live tail on a Rich console.

    Use as a context manager so the status line is torn down cleanly::

        with ConsoleTailSink(console) as sink:
            LiveTail(client, sink).watch("my-job", already_running=True)

    Parameters
    ----------
    console:
        Rich Console instance.  A new one is created if not provided.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        self._live: Live | None = None

    def __enter__(self) -> ConsoleTailSink:
        self._live = Live(Text(""), console=self.console, transient=True, auto_refresh=False)
        self._live.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        if self._live is not None:
            self._live.stop()
            self._live = None

    # ------------------------------------------------------------------
    # Status line
    # ------------------------------------------------------------------

    def _status(self, markup: str) -> None:
        text = Text.from_markup(markup)
        if self._live is None:
            self.console.print(text)
        else:
            self._live.update(text, refresh=True)

    # ------------------------------------------------------------------
    # TailSink
    # ------------------------------------------------------------------

    def log_lines(self, lines: list[str]) -> None:
        for line in lines:
            # Log text is printed verbatim; it may contain markup-like brackets.
            self.console.print(Text(f"     -     {line}"), highlight=False)

    def waiting_for_output(self, frame: str) -> None:
        self._status(f"{WAIT}    Waiting for output from jenkins [grey50]{frame}[/grey50]")

    def truncated(self, line_count: int, frame: str) -> None:
        self._status(
            f"{WARN}    Log truncated at {line_count} lines due to jenkins limits. "
            f"[grey50]{frame}[/grey50]"
        )

    def queued(self, project: str, build: int | None, eta_ms: float | None, frame: str) -> None:
        self._status(
            f"{WAIT}    Waiting for build [bold]{build}[/bold] on [bold]{escape(project)}[/bold] "
            f"to start: [grey50]{format_eta(eta_ms)}[/grey50] [grey50]{frame}[/grey50]"
        )

    def no_active_build(self, project: str) -> None:
        self.console.print(
            f"{WARN}    No currently active build for [bold]{escape(project)}[/bold]"
        )
