"""Build and run the remote ``authorized_keys`` installation."""

from __future__ import annotations

import logging
import shlex
import shutil
import signal
from collections.abc import Sequence

from sshcopyid.config import DEFAULT_SSH_COMMAND
from sshcopyid.core.destination import DEFAULT_PORT, Destination
from sshcopyid.core.errors import (
    Interrupted,
    RemoteInstallFailed,
    SpawnFailed,
    SshClientNotFound,
)
from sshcopyid.core.interfaces import ExecutableLookup, ProcessLauncher
from sshcopyid.core.keys import PublicKeyMaterial

__all__ = [
    "AUTHORIZED_KEYS",
    "RemoteInstaller",
    "build_remote_command",
    "build_remote_script",
    "build_ssh_argv",
    "quote_key",
]

logger = logging.getLogger(__name__)

AUTHORIZED_KEYS = ".ssh/authorized_keys"

_INTERRUPTED_STATUS = 128 + int(signal.SIGINT)


def quote_key(text: str) -> str:
    """Return ``text`` as a single POSIX shell word that expands to itself."""

    return shlex.quote(text)


def build_remote_script(key_line: str) -> str:
    """Return the POSIX shell script that installs ``key_line``.

    Paths are relative to the login directory. The key is appended only when
    no identical line exists, and a missing trailing newline in the existing
    file is repaired first so the new entry never merges into the last one.
    """

    target = AUTHORIZED_KEYS
    steps = [
        "umask 077",
        (
            f"mkdir -p .ssh && chmod 700 .ssh && touch {target} && chmod 600 {target} "
            "|| exit 1"
        ),
        f"key={quote_key(key_line)}",
        f'grep -qxF -- "$key" {target}',
        "case $? in 0) exit 0 ;; 1) ;; *) exit 1 ;; esac",
        (
            f'if [ -s {target} ] && [ -n "$(tail -c 1 {target})" ]; '
            f"then echo >> {target} || exit 1; fi"
        ),
        f"printf '%s\\n' \"$key\" >> {target} || exit 1",
    ]
    return "; ".join(steps)


def build_remote_command(key: PublicKeyMaterial) -> str:
    """Return the remote command string for ``key``.

    The script runs under ``sh`` when the login shell is POSIX-compatible or
    csh; fish parses the quoted script differently and is not supported.
    """

    return f"exec sh -c {shlex.quote(build_remote_script(key.line))}"


def build_ssh_argv(
    ssh_path: str,
    destination: Destination,
    remote_command: str,
    *,
    options: Sequence[str] = (),
) -> list[str]:
    """Construct the argv list for invoking the ssh client.

    Client options come before the destination so none of them can end up in
    the remote command.
    """

    argv: list[str] = [ssh_path]
    for option in options:
        argv.extend(["-o", option])
    if destination.port != DEFAULT_PORT:
        argv.extend(["-p", str(destination.port)])
    argv.extend([destination.target, remote_command])
    return argv


class RemoteInstaller:
    """Append a public key to a remote account through the ssh client."""

    def __init__(
        self,
        launcher: ProcessLauncher,
        *,
        ssh_command: str = DEFAULT_SSH_COMMAND,
        which: ExecutableLookup = shutil.which,
    ) -> None:
        self._launcher = launcher
        self._ssh_command = ssh_command
        self._which = which

    def resolve_client(self) -> str:
        """Return the absolute path of the ssh client executable."""

        ssh_path = self._which(self._ssh_command)
        if ssh_path is None:
            raise SshClientNotFound(self._ssh_command)
        return ssh_path

    def prepare(
        self,
        key: PublicKeyMaterial,
        destination: Destination,
        *,
        options: Sequence[str] = (),
    ) -> list[str]:
        """Return the full argv that :meth:`install` would run."""

        return build_ssh_argv(
            self.resolve_client(),
            destination,
            build_remote_command(key),
            options=options,
        )

    def install(
        self,
        key: PublicKeyMaterial,
        destination: Destination,
        *,
        options: Sequence[str] = (),
    ) -> None:
        """Run the installation and raise when the ssh client reports failure."""

        argv = self.prepare(key, destination, options=options)
        logger.debug("Executing: %s", shlex.join(argv))
        try:
            status = self._launcher.launch(argv)
        except KeyboardInterrupt as exc:
            raise Interrupted() from exc
        except OSError as exc:
            raise SpawnFailed(argv[0], exc.strerror or str(exc)) from exc

        logger.debug("ssh exited with status %d", status)
        if status == 0:
            return
        if status == _INTERRUPTED_STATUS:
            raise Interrupted()
        raise RemoteInstallFailed(status)
