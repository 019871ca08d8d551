"""Status resolver — turns a raw ``JobSnapshot`` into a ``BuildStatus``.

Jenkins reports a job as a handful of "last X build" references.  Which
outcome applies to a given build number is decided by comparing it, in a
fixed order, against the successful, failed and unsuccessful references.
The first match wins, so a build that is both "failed" and "unsuccessful"
classifies as failing.

This module is pure: no I/O, no state, and it never raises for a
well-formed snapshot.
"""

from __future__ import annotations

from typing import TypeVar

from jenkins_sync.models.job import JobSnapshot
from jenkins_sync.models.status import (
    ETA_UNKNOWN,
    BuildOutcome,
    BuildStatus,
    CurrentOutcome,
)

_E = TypeVar("_E", BuildOutcome, CurrentOutcome)

# Tie-break order for classification: (snapshot reference, outcome value).
_OUTCOME_ORDER: tuple[tuple[str, str], ...] = (
    ("last_successful_build", "passing"),
    ("last_failed_build", "failing"),
    ("last_unsuccessful_build", "canceled"),
)


def _classify(
    snapshot: JobSnapshot,
    number: int | None,
    outcome_type: type[_E],
    fallback: _E,
) -> _E:
    """Return the first outcome whose reference equals *number*."""
    if number is None:
        return fallback
    for field_name, value in _OUTCOME_ORDER:
        if snapshot.number_of(field_name) == number:
            return outcome_type(value)
    return fallback


def resolve_status(snapshot: JobSnapshot, *, already_running: bool = False) -> BuildStatus:
    """Resolve *snapshot* into a ``BuildStatus``.

    Parameters
    ----------
    snapshot:
        The job metadata as reported by Jenkins.
    already_running:
        ``True`` when the caller is watching a build that was already
        running; ``False`` when it has just triggered one.  Only affects
        which number is predicted for a queued build.
    """
    completed = snapshot.number_of("last_completed_build")
    last = snapshot.number_of("last_build")

    if completed is None:
        status = BuildOutcome.UNKNOWN
        current = CurrentOutcome.UNKNOWN
    else:
        status = _classify(snapshot, completed, BuildOutcome, BuildOutcome.UNKNOWN)
        current = _classify(snapshot, last, CurrentOutcome, CurrentOutcome.RUNNING)

    # A job that has never finished a build counts as build 0 completed.
    behind = last is not None and (completed or 0) < last

    if snapshot.in_queue:
        if already_running:
            build = last
        else:
            build = (last or 0) + 1
    elif behind:
        build = (completed or 0) + 1
    else:
        build = None

    if snapshot.in_queue:
        start = snapshot.queue_item.buildable_start_ms if snapshot.queue_item else None
        eta = start if start else ETA_UNKNOWN
    else:
        eta = 0

    return BuildStatus(
        running=snapshot.in_queue or behind,
        queued=snapshot.in_queue,
        current=current,
        status=status,
        last=last,
        build=build,
        eta=eta,
    )
