"""Shared test fixtures for jenkins-sync."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from jenkins_sync.models.job import JobSnapshot


# ---------------------------------------------------------------------------
# Fakes for the live tail loop
# ---------------------------------------------------------------------------


class FakeClock:
    """Deterministic ``Clock``: sleeping just advances time."""

    def __init__(self, start: float = 1_000.0, epoch: float = 1_700_000_000.0) -> None:
        self.now = start
        self.epoch = epoch
        self.sleeps: list[float] = []

    def monotonic(self) -> float:
        return self.now

    def time(self) -> float:
        return self.epoch + self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class RecordingSink:
    """``TailSink`` that records every call as ``(event, *args)``."""

    def __init__(self) -> None:
        self.events: list[tuple[Any, ...]] = []

    def log_lines(self, lines: list[str]) -> None:
        self.events.append(("log_lines", list(lines)))

    def waiting_for_output(self, frame: str) -> None:
        self.events.append(("waiting_for_output", frame))

    def truncated(self, line_count: int, frame: str) -> None:
        self.events.append(("truncated", line_count, frame))

    def queued(self, project: str, build: int | None, eta_ms: float | None, frame: str) -> None:
        self.events.append(("queued", project, build, eta_ms, frame))

    def no_active_build(self, project: str) -> None:
        self.events.append(("no_active_build", project))

    def of(self, event: str) -> list[tuple[Any, ...]]:
        return [e for e in self.events if e[0] == event]

    @property
    def printed(self) -> list[str]:
        return [line for e in self.of("log_lines") for line in e[1]]


class ScriptedSource:
    """``JobSource`` that replays scripted snapshots and logs.

    ``get_job`` returns the next snapshot on each call and repeats the last
    one once the script runs out.  ``logs`` works the same way per call to
    ``get_build_log``.
    """

    def __init__(self, snapshots: list[JobSnapshot], logs: list[str] | None = None) -> None:
        self._snapshots = list(snapshots)
        self._logs = list(logs or [""])
        self.job_calls = 0
        self.log_calls: list[int] = []

    def get_job(self, name: str) -> JobSnapshot:
        index = min(self.job_calls, len(self._snapshots) - 1)
        self.job_calls += 1
        return self._snapshots[index]

    def get_build_log(self, name: str, number: int) -> str:
        index = min(len(self.log_calls), len(self._logs) - 1)
        self.log_calls.append(number)
        return self._logs[index]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def make_snapshot() -> Callable[..., JobSnapshot]:
    """Factory fixture: build a JobSnapshot from plain build numbers."""

    def _factory(
        completed: int | None = None,
        successful: int | None = None,
        failed: int | None = None,
        unsuccessful: int | None = None,
        last: int | None = None,
        in_queue: bool = False,
        eta: float | None = None,
    ) -> JobSnapshot:
        def ref(number: int | None) -> dict[str, int] | None:
            return {"number": number} if number is not None else None

        payload: dict[str, Any] = {
            "lastCompletedBuild": ref(completed),
            "lastSuccessfulBuild": ref(successful),
            "lastFailedBuild": ref(failed),
            "lastUnsuccessfulBuild": ref(unsuccessful),
            "lastBuild": ref(last),
            "inQueue": in_queue,
        }
        if eta is not None:
            payload["queueItem"] = {"buildableStartMilliseconds": eta}
        return JobSnapshot.model_validate(payload)

    return _factory


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def jenkins_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Run in an empty directory with a complete JENKINS_* environment."""
    monkeypatch.chdir(tmp_path)
    for key in ("HOST", "USERNAME", "PASSWORD", "PROJECTS", "DEFAULT", "DIRECTORY", "WATCH"):
        monkeypatch.delenv(f"JENKINS_{key}", raising=False)
    monkeypatch.setenv("JENKINS_HOST", "https://ci.example.com")
    monkeypatch.setenv("JENKINS_USERNAME", "deploy")
    monkeypatch.setenv("JENKINS_PASSWORD", "s3cret")
    monkeypatch.setenv("JENKINS_PROJECTS", "web,api")
    monkeypatch.setenv("JENKINS_DEFAULT", "web")


@pytest.fixture
def make_source() -> Callable[..., ScriptedSource]:
    """Factory fixture: build a ScriptedSource from snapshots and logs."""
    return ScriptedSource
