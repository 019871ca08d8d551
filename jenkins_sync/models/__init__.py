"""Jenkins-sync data models — pydantic v2, frozen where immutable."""

from jenkins_sync.models.job import BuildRef, JobSnapshot, QueueItem
from jenkins_sync.models.status import (
    ETA_UNKNOWN,
    BuildOutcome,
    BuildStatus,
    CurrentOutcome,
)

__all__ = [
    "BuildRef",
    "JobSnapshot",
    "QueueItem",
    "ETA_UNKNOWN",
    "BuildOutcome",
    "BuildStatus",
    "CurrentOutcome",
]
