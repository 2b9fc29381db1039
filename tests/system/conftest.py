"""Fixtures supporting CLI system tests."""

from __future__ import annotations

import os
import stat
import subprocess
import sys
import textwrap
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

import pytest

RunCli = Callable[
    [Sequence[str] | None, Mapping[str, str] | None],
    subprocess.CompletedProcess[str],
]

# Records its arguments, then runs the last one as the remote command with the
# fake remote home as working directory.
_FAKE_SSH = textwrap.dedent(
    """\
    #!/bin/sh
    for arg in "$@"; do printf '%s\\n' "$arg" >> "$FAKE_SSH_LOG"; done
    printf '%s\\n' '----' >> "$FAKE_SSH_LOG"
    for last in "$@"; do :; done
    cd "$FAKE_REMOTE_HOME" || exit 255
    exec sh -c "$last"
    """
)


@dataclass
class SystemPaths:
    """Filesystem locations shared by a single system test."""

    local_home: Path
    remote_home: Path
    data_dir: Path
    bin_dir: Path
    ssh_log: Path

    @property
    def authorized_keys(self) -> Path:
        return self.remote_home / ".ssh" / "authorized_keys"

    def ssh_invocations(self) -> list[list[str]]:
        """Return the argv (without argv[0]) of every fake ssh call."""

        if not self.ssh_log.exists():
            return []
        calls: list[list[str]] = [[]]
        for line in self.ssh_log.read_text(encoding="utf-8").splitlines():
            if line == "----":
                calls.append([])
            else:
                calls[-1].append(line)
        return [call for call in calls if call]


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return the repository root."""

    return Path(__file__).resolve().parents[2]


@pytest.fixture
def system_paths(tmp_path: Path) -> SystemPaths:
    """Create a local home, a remote home and a directory holding a fake ssh."""

    if sys.platform == "win32":
        pytest.skip("the fake ssh client is a POSIX shell script")

    paths = SystemPaths(
        local_home=tmp_path / "local",
        remote_home=tmp_path / "remote",
        data_dir=tmp_path / "data",
        bin_dir=tmp_path / "bin",
        ssh_log=tmp_path / "ssh.log",
    )
    (paths.local_home / ".ssh").mkdir(parents=True)
    paths.remote_home.mkdir()
    paths.bin_dir.mkdir()
    fake_ssh = paths.bin_dir / "ssh"
    fake_ssh.write_text(_FAKE_SSH, encoding="utf-8")
    fake_ssh.chmod(fake_ssh.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return paths


@pytest.fixture
def system_environment(system_paths: SystemPaths, project_root: Path) -> dict[str, str]:
    """Provide an isolated environment for invoking the CLI as a subprocess."""

    env = os.environ.copy()
    env["HOME"] = str(system_paths.local_home)
    env["SSHCOPYID_DATA_DIR"] = str(system_paths.data_dir)
    env["FAKE_REMOTE_HOME"] = str(system_paths.remote_home)
    env["FAKE_SSH_LOG"] = str(system_paths.ssh_log)
    env["PATH"] = os.pathsep.join([str(system_paths.bin_dir), env.get("PATH", "")])

    existing_path = env.get("PYTHONPATH")
    components = [str(project_root)]
    if existing_path:
        components.append(existing_path)
    env["PYTHONPATH"] = os.pathsep.join(components)
    return env


@pytest.fixture
def run_cli(system_environment: dict[str, str], project_root: Path) -> RunCli:
    """Return a helper that executes the CLI via ``python -m sshcopyid``."""

    def _run(
        args: Sequence[str] | None,
        extra_env: Mapping[str, str] | None = None,
    ) -> subprocess.CompletedProcess[str]:
        command = [sys.executable, "-m", "sshcopyid"]
        if args:
            command.extend(args)

        env = system_environment.copy()
        if extra_env:
            env.update(extra_env)

        return subprocess.run(
            command,
            cwd=project_root,
            env=env,
            stdin=subprocess.DEVNULL,
            text=True,
            capture_output=True,
            check=False,
        )

    return _run
