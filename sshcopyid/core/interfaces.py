"""Protocol definitions for sshcopyid core services."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol


class ProcessLauncher(Protocol):
    """Runs an external program attached to the caller's terminal."""

    def launch(self, argv: Sequence[str]) -> int:
        """Spawn ``argv``, wait for it to exit and return its exit code.

        Implementations inherit stdin, stdout and stderr so interactive
        prompts reach the user unchanged. Exit by signal ``N`` is reported
        as ``128 + N``. ``OSError`` propagates when the process cannot be
        started and ``KeyboardInterrupt`` when the wait is interrupted.
        """


class ExecutableLookup(Protocol):
    """Resolves a command name against the executable search path."""

    def __call__(self, cmd: str) -> str | None: ...
