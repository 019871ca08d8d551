"""Unit tests for the CLI — command registration and end-to-end behavior.

The Jenkins client is replaced by an in-memory fake, and the poll interval
is set to zero so watched builds finish instantly.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from jenkins_sync import __version__
from jenkins_sync.bridge.transport import TransportError
from jenkins_sync.cli.app import app

runner = CliRunner()


class FakeJenkins:
    """Stands in for ``JenkinsClient``; all instances share one scenario."""

    snapshots: list = []
    logs: list[str] = [""]
    configs: dict[str, str] = {}
    pushed: dict[str, str] = {}
    triggered: list[str] = []
    fail_with: Exception | None = None

    def __init__(self, host, username, password, *, timeout=30.0) -> None:
        self.host = host
        self._job_calls = 0
        self._log_calls = 0

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return None

    def get_job(self, name):
        if self.fail_with is not None:
            raise self.fail_with
        index = min(self._job_calls, len(self.snapshots) - 1)
        self._job_calls += 1
        return self.snapshots[index]

    def get_build_log(self, name, number):
        index = min(self._log_calls, len(self.logs) - 1)
        self._log_calls += 1
        return self.logs[index]

    def trigger_build(self, name):
        self.triggered.append(name)
        return 77

    def get_job_config(self, name):
        return self.configs[name]

    def update_job_config(self, name, config_xml):
        self.pushed[name] = config_xml


@pytest.fixture
def fake_jenkins(monkeypatch, jenkins_env):
    monkeypatch.setenv("JENKINS_POLL_INTERVAL", "0")
    monkeypatch.setenv("COLUMNS", "200")

    class _Fake(FakeJenkins):
        snapshots = []
        logs = [""]
        configs = {}
        pushed = {}
        triggered = []
        fail_with = None

    monkeypatch.setattr("jenkins_sync.cli.context.JenkinsClient", _Fake)
    return _Fake


# ---------------------------------------------------------------------------
# Test: CLI help and registration
# ---------------------------------------------------------------------------


class TestCliApp:
    """The CLI must register all expected commands and show help."""

    def test_no_args_shows_help(self):
        result = runner.invoke(app, [])
        # Typer's no_args_is_help may exit with 0 or 2 depending on version
        assert result.exit_code in (0, 2)
        assert "usage" in result.output.lower()

    def test_help_flag(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("pull", "push", "build", "watch", "status", "log", "list", "version"):
            assert command in result.output

    @pytest.mark.parametrize("command", ["pull", "push", "build", "watch", "status", "log", "list"])
    def test_command_help(self, command):
        result = runner.invoke(app, [command, "--help"])
        assert result.exit_code == 0

    def test_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert __version__ in result.output


# ---------------------------------------------------------------------------
# Test: Configuration problems
# ---------------------------------------------------------------------------


class TestConfigurationErrors:
    def test_missing_everything(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("COLUMNS", "200")
        for key in ("HOST", "USERNAME", "PASSWORD", "PROJECTS", "DEFAULT"):
            monkeypatch.delenv(f"JENKINS_{key}", raising=False)

        result = runner.invoke(app, ["list"])

        assert result.exit_code == 1
        assert "Missing credentials" in result.output
        assert "Missing host" in result.output
        assert "Missing projects" in result.output

    def test_flags_supply_configuration(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        for key in ("HOST", "USERNAME", "PASSWORD", "PROJECTS", "DEFAULT"):
            monkeypatch.delenv(f"JENKINS_{key}", raising=False)

        result = runner.invoke(
            app,
            ["--host", "https://ci", "-u", "me", "-p", "pw", "--project-list", "a,b", "list"],
        )

        assert result.exit_code == 0
        assert "a" in result.output
        assert "b" in result.output

    def test_unknown_project(self, fake_jenkins, make_snapshot):
        fake_jenkins.snapshots = [make_snapshot()]
        result = runner.invoke(app, ["status", "docs"])
        assert result.exit_code == 1
        assert "not available" in result.output

    @pytest.mark.parametrize(
        ("variable", "value", "field"),
        [("JENKINS_WATCH", "maybe", "watch"), ("JENKINS_TIMEOUT", "soon", "timeout")],
    )
    def test_invalid_setting_value(self, fake_jenkins, monkeypatch, variable, value, field):
        monkeypatch.setenv(variable, value)
        result = runner.invoke(app, ["list"])
        assert result.exit_code == 1
        assert f"Invalid setting {field}" in result.output
        assert not isinstance(result.exception, ValueError)


# ---------------------------------------------------------------------------
# Test: One-shot commands
# ---------------------------------------------------------------------------


class TestInspect:
    def test_list(self, fake_jenkins):
        result = runner.invoke(app, ["list"])
        assert result.exit_code == 0
        assert "web" in result.output
        assert "api" in result.output

    def test_list_prints_bracketed_names_verbatim(self, fake_jenkins, monkeypatch):
        monkeypatch.setenv("JENKINS_PROJECTS", "web[red],api[/bold]")
        result = runner.invoke(app, ["list"])
        assert result.exit_code == 0
        assert "web[red]" in result.output
        assert "api[/bold]" in result.output

    def test_status_prints_current(self, fake_jenkins, make_snapshot):
        fake_jenkins.snapshots = [make_snapshot(completed=3, failed=3, last=3)]
        result = runner.invoke(app, ["status"])
        assert result.exit_code == 0
        assert result.output.strip() == "failing"

    def test_log(self, fake_jenkins, make_snapshot):
        fake_jenkins.snapshots = [make_snapshot(completed=3, successful=3, last=3)]
        fake_jenkins.logs = ["Started by user\nFinished: SUCCESS\n"]
        result = runner.invoke(app, ["log", "api"])
        assert result.exit_code == 0
        assert "Fetching log for build 3" in result.output
        assert "Finished: SUCCESS" in result.output

    def test_log_without_builds(self, fake_jenkins, make_snapshot):
        fake_jenkins.snapshots = [make_snapshot()]
        result = runner.invoke(app, ["log"])
        assert result.exit_code == 1
        assert "no builds yet" in result.output

    def test_transport_error(self, fake_jenkins):
        fake_jenkins.fail_with = TransportError("GET /job/web/api/json failed with HTTP 401")
        result = runner.invoke(app, ["status"])
        assert result.exit_code == 1
        assert "Jenkins request failed" in result.output


# ---------------------------------------------------------------------------
# Test: build / watch
# ---------------------------------------------------------------------------


class TestBuild:
    def _script(self, fake, make_snapshot, final):
        fake.snapshots = [
            make_snapshot(completed=4, successful=4, last=4, in_queue=True),
            make_snapshot(completed=4, successful=4, last=5),
            final,
        ]
        fake.logs = ["compiling\n", "compiling\ntesting\n"]

    def test_build_passes(self, fake_jenkins, make_snapshot):
        self._script(fake_jenkins, make_snapshot, make_snapshot(completed=5, successful=5, last=5))
        result = runner.invoke(app, ["build"])
        assert result.exit_code == 0, result.output
        assert fake_jenkins.triggered == ["web"]
        assert "compiling" in result.output
        assert "passed" in result.output

    def test_build_fails(self, fake_jenkins, make_snapshot):
        self._script(
            fake_jenkins, make_snapshot, make_snapshot(completed=5, successful=4, failed=5, last=5)
        )
        result = runner.invoke(app, ["build", "web"])
        assert result.exit_code == 1
        assert "failed with status" in result.output
        assert "failing" in result.output

    def test_build_canceled(self, fake_jenkins, make_snapshot):
        self._script(
            fake_jenkins,
            make_snapshot,
            make_snapshot(completed=5, successful=4, failed=3, unsuccessful=5, last=5),
        )
        result = runner.invoke(app, ["build"])
        assert result.exit_code == 0
        assert "was canceled" in result.output

    def test_build_without_watch(self, fake_jenkins, make_snapshot):
        result = runner.invoke(app, ["build", "--no-watch"])
        assert result.exit_code == 0
        assert fake_jenkins.triggered == ["web"]
        assert "Triggered build" in result.output
        assert "Watching" not in result.output

    def test_watch_setting_disables_follow(self, fake_jenkins, monkeypatch):
        monkeypatch.setenv("JENKINS_WATCH", "false")
        result = runner.invoke(app, ["build"])
        assert result.exit_code == 0
        assert "Watching" not in result.output


class TestWatch:
    def test_watch_running_build(self, fake_jenkins, make_snapshot):
        fake_jenkins.snapshots = [
            make_snapshot(completed=8, successful=8, last=9),
            make_snapshot(completed=9, successful=9, last=9),
        ]
        fake_jenkins.logs = ["step one\n"]
        result = runner.invoke(app, ["watch"])
        assert result.exit_code == 0
        assert "step one" in result.output
        assert "Build 9 passed" in result.output

    def test_watch_without_active_build(self, fake_jenkins, make_snapshot):
        fake_jenkins.snapshots = [make_snapshot(completed=5, failed=5, last=5)]
        result = runner.invoke(app, ["watch", "api"])
        assert result.exit_code == 0
        assert "No currently active build" in result.output
        assert "Build 5 failed" in result.output


# ---------------------------------------------------------------------------
# Test: pull / push
# ---------------------------------------------------------------------------


class TestSync:
    def test_pull_writes_files(self, fake_jenkins, tmp_path):
        fake_jenkins.configs = {"web": "<web/>", "api": "<api/>"}
        result = runner.invoke(app, ["--directory", "jobs", "pull"])
        assert result.exit_code == 0, result.output
        assert (tmp_path / "jobs" / "web.xml").read_text(encoding="utf-8") == "<web/>"
        assert (tmp_path / "jobs" / "api.xml").read_text(encoding="utf-8") == "<api/>"

    def test_push_uploads_files(self, fake_jenkins, tmp_path):
        for name in ("web", "api"):
            (tmp_path / f"{name}.xml").write_text(f"<{name}/>", encoding="utf-8")
        result = runner.invoke(app, ["push"])
        assert result.exit_code == 0, result.output
        assert fake_jenkins.pushed == {"web": "<web/>", "api": "<api/>"}

    def test_push_missing_file_uploads_nothing(self, fake_jenkins, tmp_path):
        (tmp_path / "web.xml").write_text("<web/>", encoding="utf-8")
        result = runner.invoke(app, ["push"])
        assert result.exit_code == 1
        assert "File not found" in result.output
        assert fake_jenkins.pushed == {}
