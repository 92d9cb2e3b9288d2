"""Process runner backed by asyncio subprocesses."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from pathlib import Path

from crxwatch.core.errors import ProcessSpawnError

from .models import ExitOutcome

logger = logging.getLogger(__name__)


class AsyncProcessRunner:
    """
    Runs external programs with ``asyncio.create_subprocess_exec``.

    Only the awaiting coroutine is suspended while the program runs.
    """

    async def run(self, args: Sequence[str], *, cwd: Path | None = None) -> ExitOutcome:
        """Run a program and capture stdout and stderr."""
        if not args:
            raise ValueError("args must name a program")

        logger.debug(f"running {' '.join(args)} (cwd={cwd})")
        try:
            proc = await asyncio.create_subprocess_exec(
                *args,
                cwd=cwd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise ProcessSpawnError(args[0], e) from e

        stdout, stderr = await proc.communicate()
        returncode = proc.returncode if proc.returncode is not None else -1

        return ExitOutcome(
            returncode=returncode,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
        )
