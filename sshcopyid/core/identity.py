"""Locate the public key to install."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from pathlib import Path

from sshcopyid.config import DEFAULT_IDENTITY_CANDIDATES
from sshcopyid.core.errors import InvalidKeyFormat, NoHomeDirectory, NoKeyFound, UnreadableFile
from sshcopyid.core.keys import PublicKeyMaterial, parse_public_key
from sshcopyid.paths import home_dir, ssh_dir

__all__ = ["IdentityResolver"]

logger = logging.getLogger(__name__)

_PUBLIC_SUFFIX = ".pub"


def _stat_check(path: Path, check: Callable[[Path], bool]) -> bool:
    """Run a stat-based ``check`` on ``path``, reporting access errors as unreadable."""

    try:
        return check(path)
    except OSError as exc:
        raise UnreadableFile(path, exc.strerror or str(exc)) from exc


class IdentityResolver:
    """Resolve an explicit or auto-discovered identity into key material.

    An explicit path that does not end in ``.pub`` is treated as a private key
    path when ``<path>.pub`` exists next to it, and the sibling is used
    instead. A private key without such a sibling is rejected with
    :class:`InvalidKeyFormat`.
    """

    def __init__(
        self,
        home: Path | None,
        *,
        ssh_directory: Path | None = None,
        candidates: Sequence[str] = DEFAULT_IDENTITY_CANDIDATES,
    ) -> None:
        self._home = home
        self._ssh_directory = ssh_directory
        self._candidates = tuple(candidates)

    @classmethod
    def from_environment(
        cls, candidates: Sequence[str] = DEFAULT_IDENTITY_CANDIDATES
    ) -> IdentityResolver:
        """Build a resolver rooted at the current user's home directory."""

        return cls(home_dir(), candidates=candidates)

    @property
    def candidates(self) -> tuple[str, ...]:
        """Expose the ordered list of canonical file names."""

        return self._candidates

    @property
    def ssh_directory(self) -> Path:
        """Return the SSH configuration directory that auto-discovery searches."""

        if self._ssh_directory is not None:
            return self._ssh_directory
        if self._home is None:
            raise NoHomeDirectory()
        return ssh_dir(self._home)

    def resolve(self, identity: str | Path | None = None) -> PublicKeyMaterial:
        """Return validated key material for ``identity``.

        ``None`` triggers auto-discovery in :attr:`ssh_directory`.
        """

        if identity is None:
            path = self.discover()
        else:
            path = self.locate(identity)
        logger.debug("Using identity file %s", path)
        return self._load(path)

    def locate(self, identity: str | Path) -> Path:
        """Map an explicit identity argument onto the public key file to read."""

        path = self._expand_home(str(identity))
        sibling = path.with_name(path.name + _PUBLIC_SUFFIX)
        if path.name.endswith(_PUBLIC_SUFFIX):
            if _stat_check(path, Path.exists):
                return path
        elif _stat_check(sibling, Path.is_file):
            logger.debug("Using public key %s for %s", sibling, path)
            return sibling
        elif _stat_check(path, Path.exists):
            return path
        raise UnreadableFile(path, "no such file")

    def discover(self) -> Path:
        """Return the first canonical key file present in the SSH directory."""

        directory = self.ssh_directory
        unreadable: UnreadableFile | None = None
        for name in self._candidates:
            candidate = directory / name
            if not _stat_check(candidate, Path.is_file):
                logger.debug("Skipping %s: not present", candidate)
                continue
            try:
                with candidate.open("rb"):
                    pass
            except OSError as exc:
                logger.warning("Skipping unreadable identity file %s: %s", candidate, exc)
                if unreadable is None:
                    unreadable = UnreadableFile(candidate, exc.strerror or str(exc))
                continue
            return candidate
        if unreadable is not None:
            raise unreadable
        raise NoKeyFound(directory, self._candidates)

    def _expand_home(self, raw: str) -> Path:
        if raw == "~" or raw.startswith(("~/", "~\\")):
            if self._home is None:
                raise NoHomeDirectory()
            return self._home / raw[2:]
        return Path(raw)

    def _load(self, path: Path) -> PublicKeyMaterial:
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidKeyFormat(path, "the file is not text") from exc
        except OSError as exc:
            raise UnreadableFile(path, exc.strerror or str(exc)) from exc
        return parse_public_key(text, source=path)
