"""Parsing of ``[user@]host`` destinations."""

from __future__ import annotations

from dataclasses import dataclass

from sshcopyid.core.errors import InvalidDestination

__all__ = ["DEFAULT_PORT", "Destination", "split_target"]

DEFAULT_PORT = 22


def split_target(target: str) -> tuple[str, str | None]:
    """Split a target string into hostname and optional username parts.

    The last ``@`` separates the user from the host so that user names which
    themselves contain ``@`` (common with directory-backed accounts) survive.
    """

    if "@" not in target:
        return target, None

    username, _, hostname = target.rpartition("@")
    return hostname, username or None


@dataclass(frozen=True, slots=True)
class Destination:
    """The remote account to install the key for."""

    hostname: str
    username: str | None = None
    port: int = DEFAULT_PORT

    def __post_init__(self) -> None:
        if not self.hostname:
            msg = "A host value must be supplied."
            raise InvalidDestination(msg)
        if self.hostname.startswith("-") or (self.username or "").startswith("-"):
            msg = f"Destination must not start with '-': {self.target}"
            raise InvalidDestination(msg)
        if any(char.isspace() for char in self.hostname):
            msg = f"Host must not contain whitespace: {self.hostname!r}"
            raise InvalidDestination(msg)
        if not 1 <= self.port <= 65535:
            msg = f"Port must be between 1 and 65535, got {self.port}."
            raise InvalidDestination(msg)

    @classmethod
    def parse(cls, target: str, port: int | None = None) -> Destination:
        """Build a destination from ``[user@]host`` and an optional port."""

        hostname, username = split_target(target.strip())
        return cls(
            hostname=hostname,
            username=username,
            port=DEFAULT_PORT if port is None else port,
        )

    @property
    def target(self) -> str:
        """Return the ``[user@]host`` form passed to the ssh client."""

        if self.username:
            return f"{self.username}@{self.hostname}"
        return self.hostname
