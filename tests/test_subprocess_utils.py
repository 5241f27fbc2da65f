"""Tests for run_command."""

import logging
import subprocess

import pytest

from runtimepilot.utils.subprocess_utils import run_command


@pytest.fixture
def fake_run(monkeypatch):
    """Replace subprocess.run; set .result or .error before calling run_command."""
    class FakeRun:
        def __init__(self):
            self.result = None
            self.error = None
            self.calls = []

        def __call__(self, cmd, **kwargs):
            self.calls.append((cmd, kwargs))
            if self.error is not None:
                raise self.error
            return self.result

    fake = FakeRun()
    monkeypatch.setattr(subprocess, "run", fake)
    return fake


class TestRunCommand:
    """Test that every failure collapses to None."""

    def test_success_strips_text(self, fake_run):
        fake_run.result = subprocess.CompletedProcess(["go", "version"], 0, stdout="go1.22.1\n", stderr="")

        assert run_command(["go", "version"]) == "go1.22.1"
        cmd, kwargs = fake_run.calls[0]
        assert cmd == ["go", "version"]
        assert kwargs["capture_output"] is True
        assert kwargs["text"] is True

    def test_raw_bytes_when_not_text(self, fake_run):
        plist = b"<?xml version=\"1.0\"?>\n<plist/>\n"
        fake_run.result = subprocess.CompletedProcess(["java_home", "-X"], 0, stdout=plist, stderr=b"")

        assert run_command(["java_home", "-X"], text=False) == plist
        assert fake_run.calls[0][1]["text"] is False

    def test_non_zero_exit(self, fake_run, caplog):
        fake_run.result = subprocess.CompletedProcess(["brew", "--prefix"], 1, stdout="partial\n", stderr="boom")

        with caplog.at_level(logging.DEBUG, logger="runtimepilot.utils.subprocess_utils"):
            assert run_command(["brew", "--prefix"]) is None
        assert "exited with 1" in caplog.text

    def test_timeout(self, fake_run, caplog):
        fake_run.error = subprocess.TimeoutExpired(["node", "--version"], 5)

        with caplog.at_level(logging.WARNING, logger="runtimepilot.utils.subprocess_utils"):
            assert run_command(["node", "--version"], timeout=5) is None
        assert "timed out" in caplog.text
        assert fake_run.calls[0][1]["timeout"] == 5

    @pytest.mark.parametrize("error", [FileNotFoundError("go"), PermissionError("go")])
    def test_cannot_start(self, fake_run, error):
        fake_run.error = error

        assert run_command(["go", "version"]) is None

    def test_env_merged_over_environment(self, fake_run, monkeypatch):
        monkeypatch.setenv("RUNTIMEPILOT_BASE", "kept")
        fake_run.result = subprocess.CompletedProcess(["go", "env"], 0, stdout="", stderr="")

        run_command(["go", "env"], env={"GOFLAGS": "-mod=mod"})

        env = fake_run.calls[0][1]["env"]
        assert env["RUNTIMEPILOT_BASE"] == "kept"
        assert env["GOFLAGS"] == "-mod=mod"
