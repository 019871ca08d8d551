"""The presentation capability injected into the live tail loop.

The loop decides *what* to show; a sink decides *how*.  Keeping the
rewritable status line behind this Protocol means the loop can run and be
tested without a terminal.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class TailSink(Protocol):
    """Protocol that every tail output sink must implement."""

    def log_lines(self, lines: list[str]) -> None:
        """Emit newly appended build log lines, in order."""
        ...

    def waiting_for_output(self, frame: str) -> None:
        """Show that the build is running but has produced no new output."""
        ...

    def truncated(self, line_count: int, frame: str) -> None:
        """Show that the server stopped returning log lines at *line_count*."""
        ...

    def queued(self, project: str, build: int | None, eta_ms: float | None, frame: str) -> None:
        """Show that *build* is waiting to start.

        *eta_ms* is an epoch-millisecond start estimate, or ``None`` when the
        start time is unknown or already overdue.
        """
        ...

    def no_active_build(self, project: str) -> None:
        """Report that there is no running build to watch."""
        ...
