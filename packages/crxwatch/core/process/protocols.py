"""Protocol for running external tools (unzip, prettier, diff)."""

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from .models import ExitOutcome


class ProcessRunner(Protocol):
    """Runs a program to completion and captures its output."""

    async def run(self, args: Sequence[str], *, cwd: Path | None = None) -> ExitOutcome:
        """
        Run ``args[0]`` with the remaining arguments.

        Raises:
            ProcessSpawnError: If the process cannot be started
        """
        ...
