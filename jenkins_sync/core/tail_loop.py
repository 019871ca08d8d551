"""Live tail loop — follows a build's log until the build stops running.

``LiveTail.watch`` polls the job on a fixed delay.  Each poll resolves a
fresh ``BuildStatus`` and, depending on it, either streams the new part of
the build log, shows the queue ETA, or reports that nothing is running.
The loop stops when the job is no longer running, or once a second build
number has been observed (the tracked build finished and another began).
It then resolves the status one last time and returns it.

All loop state lives in a ``TailState`` owned by a single ``watch`` call.
Time and sleeping come from an injected ``Clock`` so tests can simulate
elapsed time, and an optional ``threading.Event`` cancels the loop without
waiting out the current delay.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field

from jenkins_sync.core.status_resolver import resolve_status
from jenkins_sync.models.job import JobSnapshot
from jenkins_sync.models.status import ETA_UNKNOWN, BuildStatus
from jenkins_sync.monitor.sink import TailSink

logger = logging.getLogger(__name__)

# Jenkins stops returning console text after this many lines.
LOG_LINE_LIMIT = 10000

ELLIPSIS_FRAMES: tuple[str, ...] = (".", "..", "...")


class WatchCancelled(RuntimeError):
    """Raised when a watch is aborted through its cancel event."""


# ---------------------------------------------------------------------------
# Collaborator protocols
# ---------------------------------------------------------------------------


@runtime_checkable
class JobSource(Protocol):
    """Anything that can report job metadata and build logs.

    ``JenkinsClient`` satisfies this protocol.
    """

    def get_job(self, name: str) -> JobSnapshot:
        ...

    def get_build_log(self, name: str, number: int) -> str:
        ...


@runtime_checkable
class Clock(Protocol):
    """Time source and sleeper for the poll loop."""

    def monotonic(self) -> float:
        """Seconds on a monotonic scale, for measuring idle time."""
        ...

    def time(self) -> float:
        """Seconds since the epoch, for comparing against queue ETAs."""
        ...

    def sleep(self, seconds: float) -> None:
        """Wait *seconds* before the next poll."""
        ...


class SystemClock:
    """Wall-clock implementation of ``Clock``.

    Sleeping waits on *cancel* so that setting the event wakes the loop
    immediately.
    """

    def __init__(self, cancel: threading.Event | None = None) -> None:
        self._cancel = cancel or threading.Event()

    def monotonic(self) -> float:
        return time.monotonic()

    def time(self) -> float:
        return time.time()

    def sleep(self, seconds: float) -> None:
        self._cancel.wait(seconds)


# ---------------------------------------------------------------------------
# Loop state
# ---------------------------------------------------------------------------


class TailState(BaseModel):
    """Mutable state of one ``watch`` call.  Never shared or persisted."""

    printed_line_count: int = 0
    poll_count: int = 0
    last_output_change: float = 0.0
    observed_build_ids: list[int] = Field(default_factory=list)
    idle_reported: bool = False
    truncation_reported: bool = False

    def observe(self, build: int | None) -> None:
        """Record *build* if it differs from the most recently observed id."""
        if build is None:
            return
        if not self.observed_build_ids or self.observed_build_ids[-1] != build:
            self.observed_build_ids.append(build)

    @property
    def handed_off(self) -> bool:
        """Whether a second distinct build has been observed."""
        return len(self.observed_build_ids) >= 2

    @property
    def frame(self) -> str:
        return ELLIPSIS_FRAMES[self.poll_count % len(ELLIPSIS_FRAMES)]


def split_log(text: str, *, include_partial: bool = False) -> tuple[list[str], int]:
    """Split log *text* into its complete lines and its total line count.

    A trailing line without a newline may still be being written, so it is
    counted but not returned unless *include_partial* is set; a later poll
    picks it up once it is finished.
    """
    lines = text.split("\n")
    partial = lines.pop()
    total = len(lines) + (1 if partial else 0)
    if partial and include_partial:
        lines.append(partial)
    return lines, total


# ---------------------------------------------------------------------------
# LiveTail
# ---------------------------------------------------------------------------


class LiveTail:
    """Polls a job and tails its running build to a ``TailSink``.

    Parameters
    ----------
    source:
        Where job snapshots and build logs come from.
    sink:
        Where log lines and status indicators go.
    clock:
        Time source.  Defaults to a ``SystemClock`` bound to *cancel*.
    cancel:
        Optional event; once set, the loop raises ``WatchCancelled`` at its
        next check instead of polling again.
    poll_interval:
        Seconds between polls.
    idle_after:
        Seconds without new output before the idle indicator is shown.
    """

    def __init__(
        self,
        source: JobSource,
        sink: TailSink,
        *,
        clock: Clock | None = None,
        cancel: threading.Event | None = None,
        poll_interval: float = 1.0,
        idle_after: float = 3.0,
    ) -> None:
        self._source = source
        self._sink = sink
        self._cancel = cancel or threading.Event()
        self._clock = clock or SystemClock(self._cancel)
        self._poll_interval = poll_interval
        self._idle_after = idle_after

    def watch(self, project: str, *, already_running: bool) -> BuildStatus:
        """Follow *project* until its build stops running.

        Parameters
        ----------
        project:
            The Jenkins job name.
        already_running:
            ``True`` to attach to a build that is already running, ``False``
            right after triggering a new one.

        Returns
        -------
        BuildStatus
            The status resolved after the loop ends.  Its ``build`` falls back
            to the last observed build number, then to ``last``.

        Raises
        ------
        WatchCancelled
            If the cancel event was set.
        TransportError
            If any snapshot or log fetch fails.  Nothing is retried.
        """
        state = TailState(last_output_change=self._clock.monotonic())

        while True:
            self._check_cancelled()
            status = self._poll(project, state, already_running=already_running)
            if not status.running or state.handed_off:
                break
            self._clock.sleep(self._poll_interval)

        self._check_cancelled()
        final = resolve_status(self._source.get_job(project), already_running=already_running)
        if final.build is None:
            fallback = state.observed_build_ids[-1] if state.observed_build_ids else final.last
            final = final.model_copy(update={"build": fallback})
        logger.info(
            "Watch of %s finished: build=%s status=%s current=%s",
            project,
            final.build,
            final.status.value,
            final.current.value,
        )
        return final

    # ------------------------------------------------------------------
    # One iteration
    # ------------------------------------------------------------------

    def _poll(self, project: str, state: TailState, *, already_running: bool) -> BuildStatus:
        status = resolve_status(self._source.get_job(project), already_running=already_running)
        state.poll_count += 1
        state.observe(status.build)

        if state.handed_off:
            logger.debug(
                "Build ids %s observed for %s; stopping tail",
                state.observed_build_ids,
                project,
            )
            return status

        if status.running and (already_running or not status.queued):
            self._tail(project, status, state)
        elif status.queued:
            self._sink.queued(project, status.build, self._visible_eta(status), state.frame)
        elif already_running and not status.running:
            self._sink.no_active_build(project)
        return status

    def _tail(self, project: str, status: BuildStatus, state: TailState) -> None:
        if status.build is None:
            return
        text = self._source.get_build_log(project, status.build)
        lines, total = split_log(text)
        if total == LOG_LINE_LIMIT:
            # A capped log never grows, so its trailing line is final.
            lines, total = split_log(text, include_partial=True)
        fresh = lines[state.printed_line_count:]
        now = self._clock.monotonic()
        if fresh:
            self._sink.log_lines(fresh)
            state.printed_line_count += len(fresh)
            state.last_output_change = now
            state.idle_reported = False

        if total == LOG_LINE_LIMIT:
            if not state.truncation_reported:
                logger.debug("Log of %s #%s truncated at %d lines", project, status.build, total)
                state.truncation_reported = True
            self._sink.truncated(total, state.frame)
        elif now - state.last_output_change > self._idle_after and not state.idle_reported:
            logger.debug("No output from %s #%s for %.1fs", project, status.build, self._idle_after)
            self._sink.waiting_for_output(state.frame)
            state.idle_reported = True

    def _visible_eta(self, status: BuildStatus) -> float | None:
        """Return the ETA to display, or ``None`` if unknown or overdue."""
        if status.eta == ETA_UNKNOWN or status.eta < self._clock.time() * 1000:
            return None
        return status.eta

    def _check_cancelled(self) -> None:
        if self._cancel.is_set():
            raise WatchCancelled("watch cancelled")
