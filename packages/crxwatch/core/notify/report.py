"""Human-readable summary of a check run."""

from __future__ import annotations

import os
from collections.abc import Sequence

from crxwatch.core.utils.version import __version__
from crxwatch.core.watch.models import OutcomeStatus, PackageOutcome

REPORT_TITLE = "**__Extension Updates__**"
DIFF_NOTE = " (diff automatically generated)"


def format_update_line(outcome: PackageOutcome) -> str:
    """Return the report line for an updated package."""
    update = outcome.update
    if update is None:
        raise ValueError(f"{outcome.package} has no update")
    note = DIFF_NOTE if update.diff_text is not None else ""
    return (
        f"- {outcome.package.display_name}: `{update.prev_label}` -> `{update.cur_version}`{note}"
    )


def format_error_line(outcome: PackageOutcome, cwd: str | None = None) -> str:
    """Return the report line for a failed package, with ``cwd`` shown as $PWD."""
    line = f"- {outcome.package.display_name}: {outcome.error}"
    if cwd:
        line = line.replace(cwd, "$PWD")
    return line


def build_update_message(
    outcomes: Sequence[PackageOutcome],
    *,
    cwd: str | None = None,
    version: str = __version__,
) -> str:
    """Build the summary message for a run.

    Returns an empty string when there are neither updates nor errors.

    Args:
        outcomes: Per-package outcomes of the run
        cwd: Directory replaced by ``$PWD`` in error text (default: os.getcwd())
        version: Version shown in the footer
    """
    if cwd is None:
        cwd = os.getcwd()

    updates = [format_update_line(o) for o in outcomes if o.status is OutcomeStatus.UPDATED]
    errors = [format_error_line(o, cwd) for o in outcomes if o.status is OutcomeStatus.ERROR]

    if not updates and not errors:
        return ""

    sections: list[str] = []
    if updates:
        sections.append("\n".join(updates))
    if errors:
        sections.append("The following errors occurred:\n\n" + "\n".join(errors))

    body = "\n\n".join(sections)
    return f"{REPORT_TITLE}\n\n{body}\n\n> *Automated by crxwatch {version}.*"
