"""Helpers for launching the ssh client from CLI interactions."""

from __future__ import annotations

import subprocess
from collections.abc import Sequence

__all__ = ["SubprocessLauncher"]


def _normalize_returncode(returncode: int) -> int:
    """Convert negative signal return codes to the conventional ``128 + N``."""

    if returncode < 0:
        return 128 - returncode
    return returncode


class SubprocessLauncher:
    """Run a program in the foreground, sharing the caller's terminal.

    Standard streams are inherited so ssh can prompt for passwords and
    passphrases directly.
    """

    def launch(self, argv: Sequence[str]) -> int:
        """Spawn ``argv`` and block until it exits."""

        completed = subprocess.run(list(argv), check=False)
        return _normalize_returncode(completed.returncode)
