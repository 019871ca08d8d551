"""Build status models.  A ``BuildStatus`` is the resolved form of a job snapshot."""

from __future__ import annotations

import math
from enum import Enum

from pydantic import BaseModel, ConfigDict

# Sentinel ETA for a queued build whose start time Jenkins cannot estimate.
ETA_UNKNOWN: float = math.inf


class BuildOutcome(str, Enum):
    """Outcome of the last *completed* build."""

    UNKNOWN = "unknown"
    PASSING = "passing"
    FAILING = "failing"
    CANCELED = "canceled"


class CurrentOutcome(str, Enum):
    """Outcome of the most recent build attempt, which may still be in flight."""

    UNKNOWN = "unknown"
    PASSING = "passing"
    FAILING = "failing"
    CANCELED = "canceled"
    RUNNING = "running"


class BuildStatus(BaseModel):
    """Resolved status of a job, recomputed on every poll.

    ``status`` only ever reflects a finished build.  ``current`` tracks the
    latest attempt and reads ``running`` while that attempt is in flight.
    ``eta`` is an epoch-millisecond timestamp, ``0`` when nothing is queued,
    or ``ETA_UNKNOWN`` when queued without an estimate.
    """

    model_config = ConfigDict(frozen=True)

    running: bool = False
    queued: bool = False
    current: CurrentOutcome = CurrentOutcome.UNKNOWN
    status: BuildOutcome = BuildOutcome.UNKNOWN
    last: int | None = None
    build: int | None = None
    eta: float = 0

    @property
    def eta_known(self) -> bool:
        """Whether Jenkins supplied a start estimate for the queued build."""
        return self.eta != ETA_UNKNOWN
