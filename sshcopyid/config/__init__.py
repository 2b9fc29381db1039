"""Configuration models and persistence helpers for sshcopyid."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from sshcopyid.paths import data_dir

__all__ = [
    "AppConfig",
    "ConfigStore",
    "DEFAULT_IDENTITY_CANDIDATES",
    "DEFAULT_SSH_COMMAND",
    "default_config_path",
]

_DEFAULT_CONFIG_FILENAME = "config.json"

DEFAULT_SSH_COMMAND = "ssh"

# Checked in order during auto-discovery; the first existing file wins.
DEFAULT_IDENTITY_CANDIDATES: tuple[str, ...] = (
    "id_rsa.pub",
    "id_ed25519.pub",
    "id_ecdsa.pub",
    "id_ecdsa_sk.pub",
    "id_ed25519_sk.pub",
    "id_dsa.pub",
    "identity.pub",
)


def _normalize_candidates(raw: Any) -> list[str]:
    """Keep non-empty, unique, path-free file names in their original order."""

    names: list[str] = []
    if not isinstance(raw, list):
        return names
    for item in raw:
        if not isinstance(item, str):
            continue
        normalized = item.strip()
        if not normalized or "/" in normalized or "\\" in normalized:
            continue
        if normalized not in names:
            names.append(normalized)
    return names


@dataclass(slots=True)
class AppConfig:
    """Top-level application configuration settings."""

    ssh_command: str = DEFAULT_SSH_COMMAND
    identity_candidates: list[str] = field(default_factory=list)

    @property
    def effective_identity_candidates(self) -> tuple[str, ...]:
        """Return the configured candidate names, or the built-in defaults."""

        if self.identity_candidates:
            return tuple(self.identity_candidates)
        return DEFAULT_IDENTITY_CANDIDATES

    def to_payload(self) -> dict[str, Any]:
        """Serialize the configuration into a JSON-compatible structure."""

        return {
            "ssh_command": self.ssh_command,
            "identity_candidates": list(self.identity_candidates),
        }

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> AppConfig:
        """Create a configuration instance from serialized data."""

        raw_command = payload.get("ssh_command")
        command = DEFAULT_SSH_COMMAND
        if isinstance(raw_command, str) and raw_command.strip():
            command = raw_command.strip()
        candidates = _normalize_candidates(payload.get("identity_candidates", []))
        return cls(ssh_command=command, identity_candidates=candidates)

    def set_ssh_command(self, command: str) -> None:
        """Replace the ssh client executable used for installation."""

        normalized = command.strip()
        if not normalized:
            msg = "ssh command must not be empty."
            raise ValueError(msg)
        self.ssh_command = normalized

    def set_identity_candidates(self, names: list[str]) -> None:
        """Replace the ordered list of key file names checked by auto-discovery."""

        for name in names:
            if "/" in name or "\\" in name:
                msg = f"Identity candidate must be a file name, not a path: {name}"
                raise ValueError(msg)
        normalized = _normalize_candidates(list(names))
        if not normalized:
            msg = "At least one identity candidate is required."
            raise ValueError(msg)
        self.identity_candidates = normalized


def default_config_path() -> Path:
    """Return the default location for the application's configuration file."""

    return data_dir() / _DEFAULT_CONFIG_FILENAME


class ConfigStore:
    """Manage persistence of the application configuration file."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path if path is not None else default_config_path()

    @property
    def path(self) -> Path:
        """Expose the backing configuration file path."""

        return self._path

    def load(self) -> AppConfig:
        """Load configuration from disk, returning defaults when absent."""

        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError:
            return AppConfig()
        if not raw.strip():
            return AppConfig()
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError:
            return AppConfig()
        if not isinstance(payload, dict):
            return AppConfig()
        return AppConfig.from_payload(payload)

    def save(self, config: AppConfig) -> None:
        """Persist the provided configuration to disk atomically."""

        self._path.parent.mkdir(parents=True, exist_ok=True)
        data = json.dumps(config.to_payload(), indent=2, sort_keys=True)
        tmp_path = self._path.with_suffix(".tmp")
        tmp_path.write_text(data, encoding="utf-8")
        tmp_path.replace(self._path)

    def reset(self) -> None:
        """Remove the configuration file so defaults apply again."""

        self._path.unlink(missing_ok=True)
