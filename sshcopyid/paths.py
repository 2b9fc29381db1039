"""Utilities for resolving filesystem locations used by sshcopyid."""

from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_data_path

__all__ = ["data_dir", "home_dir", "ssh_dir"]


def data_dir() -> Path:
    """Return the base directory for mutable application data.

    The path defaults to the platform-specific user data directory exposed by
    :mod:`platformdirs`. When the ``SSHCOPYID_DATA_DIR`` environment variable
    is set the value is treated as an override, allowing tests or alternative
    deployments to isolate their state.

    The directory is not created here; writers create it on first save.
    """

    override = os.getenv("SSHCOPYID_DATA_DIR")
    return Path(override).expanduser() if override else user_data_path("sshcopyid")


def home_dir() -> Path | None:
    """Return the current user's home directory, or ``None`` when unknown."""

    try:
        return Path.home()
    except (RuntimeError, KeyError):
        return None


def ssh_dir(home: Path) -> Path:
    """Return the SSH configuration directory under ``home``."""

    return home / ".ssh"
