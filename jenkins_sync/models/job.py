"""Job snapshot models: the read-only view Jenkins reports for a job."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class BuildRef(BaseModel):
    """A reference to a numbered build, as embedded in the job payload."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    number: int


class QueueItem(BaseModel):
    """The queue entry of a job that is waiting for an executor."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    buildable_start_ms: float | None = Field(
        default=None, alias="buildableStartMilliseconds"
    )


class JobSnapshot(BaseModel):
    """Point-in-time job metadata from ``/job/<name>/api/json``.

    Every ``last_*`` reference is ``None`` when the job has never produced
    a build of that kind.  Unknown keys in the Jenkins payload are ignored.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    last_completed_build: BuildRef | None = Field(default=None, alias="lastCompletedBuild")
    last_successful_build: BuildRef | None = Field(default=None, alias="lastSuccessfulBuild")
    last_failed_build: BuildRef | None = Field(default=None, alias="lastFailedBuild")
    last_unsuccessful_build: BuildRef | None = Field(
        default=None, alias="lastUnsuccessfulBuild"
    )
    last_build: BuildRef | None = Field(default=None, alias="lastBuild")
    in_queue: bool = Field(default=False, alias="inQueue")
    queue_item: QueueItem | None = Field(default=None, alias="queueItem")

    def number_of(self, field_name: str) -> int | None:
        """Return the build number behind a ``last_*`` reference, or ``None``."""
        ref: BuildRef | None = getattr(self, field_name)
        return ref.number if ref is not None else None
