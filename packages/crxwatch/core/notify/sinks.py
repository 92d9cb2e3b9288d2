"""Destinations for the results of a check run."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from rich.console import Console
from rich.table import Table
from rich.text import Text

from crxwatch.core.io import AbsolutePath, FileSystem
from crxwatch.core.watch.models import OutcomeStatus, PackageOutcome

logger = logging.getLogger(__name__)


class NotificationSink(Protocol):
    """Receives the outcomes and summary message of a run.

    Sinks must not raise for delivery failures; they log them instead.
    """

    async def deliver(self, outcomes: Sequence[PackageOutcome], message: str) -> None: ...


def diff_filename(outcome: PackageOutcome) -> str:
    """Return ``<name>-<prev>-<cur>.diff`` for an updated package."""
    if outcome.update is None:
        raise ValueError(f"{outcome.package} has no update")
    update = outcome.update
    return f"{outcome.package.name}-{update.prev_label}-{update.cur_version}.diff"


class DiffArchiveSink:
    """Writes every generated diff to ``diff_dir``.

    Args:
        fs: Filesystem implementation
        diff_dir: Directory receiving ``.diff`` files
    """

    def __init__(self, fs: FileSystem, diff_dir: AbsolutePath) -> None:
        self.fs = fs
        self.diff_dir = diff_dir

    async def deliver(self, outcomes: Sequence[PackageOutcome], message: str) -> None:
        for outcome in outcomes:
            if outcome.update is None or outcome.update.diff_text is None:
                continue

            filename = diff_filename(outcome)
            try:
                path = self.fs.join(self.diff_dir, filename)
                await self.fs.write_text(path, outcome.update.diff_text)
            except (OSError, ValueError) as e:
                logger.error(f"failed to write diff file {filename}: {e}")
                continue
            logger.debug(f"wrote {path}")


_STATUS_STYLE = {
    OutcomeStatus.NO_CHANGE: "[dim]no update[/dim]",
    OutcomeStatus.UPDATED: "[green]updated[/green]",
    OutcomeStatus.ERROR: "[red]error[/red]",
}


class ConsoleSink:
    """Prints a per-package table and the summary message with rich."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    async def deliver(self, outcomes: Sequence[PackageOutcome], message: str) -> None:
        table = Table(title="Extension check")
        table.add_column("Extension")
        table.add_column("Status")
        table.add_column("Details", overflow="fold")

        for outcome in outcomes:
            if outcome.update is not None:
                details = f"{outcome.update.prev_label} -> {outcome.update.cur_version}"
            elif outcome.is_error:
                details = f"{outcome.failed_stage}: {outcome.error}"
            else:
                details = ""
            # names and tool stderr may contain brackets; keep them literal
            table.add_row(
                Text(outcome.package.display_name), _STATUS_STYLE[outcome.status], Text(details)
            )

        self.console.print(table)
        if message:
            self.console.print(message, markup=False, highlight=False)
        else:
            self.console.print("no updates or errors")
