"""Failure types raised while resolving and installing a public key.

Every error carries a stable ``exit_code`` used by the CLI:

====  ===========================
code  meaning
====  ===========================
0     success
2     usage error / bad destination
3     :class:`NoHomeDirectory`
4     :class:`NoKeyFound`
5     :class:`UnreadableFile`
6     :class:`InvalidKeyFormat`
7     :class:`SshClientNotFound`
8     :class:`SpawnFailed`
9     :class:`RemoteInstallFailed`
130   :class:`Interrupted`
====  ===========================
"""

from __future__ import annotations

from pathlib import Path

__all__ = [
    "SshCopyIdError",
    "InvalidDestination",
    "ResolutionError",
    "NoHomeDirectory",
    "NoKeyFound",
    "UnreadableFile",
    "InvalidKeyFormat",
    "InstallError",
    "SshClientNotFound",
    "SpawnFailed",
    "RemoteInstallFailed",
    "Interrupted",
]


class SshCopyIdError(Exception):
    """Base exception type for all sshcopyid failures."""

    exit_code = 1


class InvalidDestination(SshCopyIdError, ValueError):
    """Raised when a ``[user@]host`` destination cannot be used."""

    exit_code = 2


class ResolutionError(SshCopyIdError):
    """Base class for failures while locating the local public key."""


class NoHomeDirectory(ResolutionError):
    """Raised when the user's home directory cannot be determined."""

    exit_code = 3

    def __init__(self) -> None:
        super().__init__("Could not determine the home directory. Please specify a key with -i.")


class NoKeyFound(ResolutionError):
    """Raised when auto-discovery finds none of the canonical key files."""

    exit_code = 4

    def __init__(self, ssh_dir: Path, candidates: tuple[str, ...]) -> None:
        self.ssh_dir = ssh_dir
        self.candidates = candidates
        names = ", ".join(candidates)
        super().__init__(
            f"No identity file found in {ssh_dir} (looked for {names}). "
            "Please specify one with -i."
        )


class UnreadableFile(ResolutionError):
    """Raised when a key file is missing or cannot be read."""

    exit_code = 5

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read identity file {path}: {reason}")


class InvalidKeyFormat(ResolutionError):
    """Raised when a file does not contain a single SSH public key record."""

    exit_code = 6

    def __init__(self, path: Path | None, reason: str) -> None:
        self.path = path
        self.reason = reason
        source = f"'{path}'" if path is not None else "The key"
        super().__init__(f"{source} does not look like an SSH public key: {reason}")


class InstallError(SshCopyIdError):
    """Base class for failures while running the remote installation."""


class SshClientNotFound(InstallError):
    """Raised when the ssh client executable is not on the search path."""

    exit_code = 7

    def __init__(self, command: str) -> None:
        self.command = command
        super().__init__(f"ssh command not found: '{command}'. Make sure it is on your PATH.")


class SpawnFailed(InstallError):
    """Raised when the operating system refuses to start the ssh client."""

    exit_code = 8

    def __init__(self, argv0: str, reason: str) -> None:
        self.argv0 = argv0
        self.reason = reason
        super().__init__(f"Failed to start {argv0}: {reason}")


class RemoteInstallFailed(InstallError):
    """Raised when the ssh client exits non-zero.

    A failed connection, a rejected login and a failing remote command all end
    in the same client exit status, so ``code`` is reported as-is.
    """

    exit_code = 9

    def __init__(self, code: int) -> None:
        self.code = code
        super().__init__(
            f"ssh exited with status {code}; the key may not have been installed "
            "(connection, authentication or remote command failure)."
        )


class Interrupted(InstallError):
    """Raised when the user interrupts the ssh session."""

    exit_code = 130

    def __init__(self) -> None:
        super().__init__("Interrupted.")
