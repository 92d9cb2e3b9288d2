"""Unified diffs between two unpacked releases."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from crxwatch.core.artifacts.models import release_dirname
from crxwatch.core.config.models import DiffToolConfig
from crxwatch.core.errors import (
    DiffToolInvocationError,
    DiffToolStderrError,
    ProcessSpawnError,
)
from crxwatch.core.process import ProcessRunner

logger = logging.getLogger(__name__)

# "--- ./a/file.js\t2021-09-14 10:22:00.000000000 -0700"
_TIMESTAMP_RE = re.compile(r"\t\d\d\d\d-\d.*")
_TIMESTAMP_LINE_RE = re.compile(r"^\t\d\d\d\d-\d.*$")


def strip_timestamps(text: str) -> str:
    """Remove file timestamp annotations from unified diff output.

    A line holding nothing but an annotation is dropped entirely; elsewhere
    the annotation is cut from the line and the rest kept.

    Example:
        >>> strip_timestamps("--- ./a/x.js\\t2021-09-14 10:22:00.000000000 -0700\\n")
        '--- ./a/x.js\\n'
    """
    lines = text.splitlines(keepends=True)
    out: list[str] = []
    for line in lines:
        body = line.rstrip("\r\n")
        ending = line[len(body) :]
        if _TIMESTAMP_LINE_RE.match(body):
            continue
        out.append(_TIMESTAMP_RE.sub("", body) + ending)
    return "".join(out)


class DiffEngine:
    """Runs the diff tool inside ``crx_dir`` and sanitises its output.

    Args:
        runner: Process runner for the diff tool
        crx_dir: Directory holding the unpacked releases
        config: Diff tool settings
    """

    def __init__(
        self,
        runner: ProcessRunner,
        crx_dir: Path,
        config: DiffToolConfig | None = None,
    ) -> None:
        self.runner = runner
        self.crx_dir = crx_dir
        self.config = config or DiffToolConfig()

    async def diff(self, name: str, prev_version: str | None, cur_version: str) -> str | None:
        """Diff ``<name>-<prev_version>`` against ``<name>-<cur_version>``.

        Returns:
            Sanitised diff text (empty for identical trees), or None when
            there is no previous version

        Raises:
            DiffToolInvocationError: If the diff tool could not be spawned
            DiffToolStderrError: If the diff tool wrote to stderr
        """
        if prev_version is None:
            return None

        args = [
            self.config.command,
            "-U",
            str(self.config.context_lines),
            "-r",
            f"./{release_dirname(name, prev_version)}",
            f"./{release_dirname(name, cur_version)}",
        ]
        try:
            outcome = await self.runner.run(args, cwd=self.crx_dir)
        except ProcessSpawnError as e:
            raise DiffToolInvocationError(str(e)) from e

        stderr = outcome.stderr.strip()
        if stderr:
            raise DiffToolStderrError(
                f"{self.config.command} exited with status {outcome.returncode}: {stderr}",
                stderr=stderr,
            )

        logger.debug(f"{name}: diff {prev_version} -> {cur_version} is {len(outcome.stdout)} chars")
        return strip_timestamps(outcome.stdout)
