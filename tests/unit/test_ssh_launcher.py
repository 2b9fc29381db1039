"""Unit tests for the subprocess-backed ssh launcher."""

from __future__ import annotations

import subprocess
import sys
from typing import Any

import pytest

from sshcopyid.cli import ssh_launcher
from sshcopyid.cli.ssh_launcher import SubprocessLauncher


def test_launch_inherits_terminal_streams(monkeypatch: pytest.MonkeyPatch) -> None:
    """The child process should share stdin/stdout/stderr with the caller."""

    captured: dict[str, Any] = {}

    def fake_run(argv: list[str], **kwargs: Any) -> subprocess.CompletedProcess[bytes]:
        captured["argv"] = argv
        captured["kwargs"] = kwargs
        return subprocess.CompletedProcess(argv, 0)

    monkeypatch.setattr(ssh_launcher.subprocess, "run", fake_run)

    assert SubprocessLauncher().launch(("/usr/bin/ssh", "host", "cmd")) == 0
    assert captured["argv"] == ["/usr/bin/ssh", "host", "cmd"]
    assert captured["kwargs"] == {"check": False}


def test_launch_returns_exit_code(monkeypatch: pytest.MonkeyPatch) -> None:
    """Non-zero exit codes are passed through unchanged."""

    monkeypatch.setattr(
        ssh_launcher.subprocess,
        "run",
        lambda argv, **_: subprocess.CompletedProcess(argv, 255),
    )

    assert SubprocessLauncher().launch(["ssh"]) == 255


def test_normalize_returncode_for_signals() -> None:
    """Signal termination should map to the conventional 128+signal code."""

    assert ssh_launcher._normalize_returncode(-9) == 137
    assert ssh_launcher._normalize_returncode(-2) == 130


def test_normalize_returncode_passthrough() -> None:
    """Regular exit codes are returned as-is."""

    assert ssh_launcher._normalize_returncode(0) == 0
    assert ssh_launcher._normalize_returncode(42) == 42


def test_launch_propagates_os_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    """Process creation failures surface as OSError for the installer to map."""

    def fake_run(argv: list[str], **_: Any) -> subprocess.CompletedProcess[bytes]:
        raise FileNotFoundError(2, "No such file or directory", argv[0])

    monkeypatch.setattr(ssh_launcher.subprocess, "run", fake_run)

    with pytest.raises(OSError):
        SubprocessLauncher().launch(["/missing/ssh"])


def test_launch_runs_real_process() -> None:
    """A real child process exit status is reported."""

    code = SubprocessLauncher().launch([sys.executable, "-c", "raise SystemExit(3)"])

    assert code == 3
