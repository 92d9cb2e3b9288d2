"""Scriptable process runner for tests.

Records every invocation and delegates the result to a handler, so tests can
simulate tool output and failures without spawning processes.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from .models import ExitOutcome

Handler = Callable[[list[str], Path | None], ExitOutcome | Awaitable[ExitOutcome]]


@dataclass(frozen=True)
class ProcessCall:
    """A recorded invocation."""

    args: list[str]
    cwd: Path | None

    @property
    def program(self) -> str:
        return self.args[0]


class FakeProcessRunner:
    """
    In-memory process runner.

    The handler receives the argument list and working directory and returns
    an ``ExitOutcome`` (or an awaitable of one). It may raise, e.g.
    ``ProcessSpawnError``, to simulate a missing binary.
    """

    def __init__(self, handler: Handler | None = None) -> None:
        self.handler = handler
        self.calls: list[ProcessCall] = []

    async def run(self, args: Sequence[str], *, cwd: Path | None = None) -> ExitOutcome:
        argv = list(args)
        self.calls.append(ProcessCall(args=argv, cwd=cwd))
        if self.handler is None:
            return ExitOutcome(returncode=0)

        result = self.handler(argv, cwd)
        if isinstance(result, ExitOutcome):
            return result
        return await result

    def calls_to(self, program: str) -> list[ProcessCall]:
        """Return recorded calls whose program is ``program``."""
        return [call for call in self.calls if call.program == program]
