"""One complete check cycle: ledger in, packages checked, ledger and reports out."""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence

import httpx
from pydantic import BaseModel, ConfigDict, Field

from crxwatch.core.config.loader import resolve_packages
from crxwatch.core.config.models import PackageDescriptor, WatcherConfig
from crxwatch.core.formatting.prettierrc import (
    provision_formatter_config,
    remove_formatter_config,
)
from crxwatch.core.io import FileSystem
from crxwatch.core.ledger import LedgerStore, VersionLedger
from crxwatch.core.notify.report import build_update_message
from crxwatch.core.notify.sinks import DiffArchiveSink, NotificationSink
from crxwatch.core.process import ProcessRunner
from crxwatch.core.session import WatcherSession
from crxwatch.core.watch.models import OutcomeStatus, PackageOutcome
from crxwatch.core.watch.orchestrator import PackageOrchestrator

logger = logging.getLogger(__name__)


class WatchReport(BaseModel):
    """Summary of a check run."""

    outcomes: list[PackageOutcome] = Field(default_factory=list)
    message: str = Field(default="", description="Summary message (empty if nothing to report)")
    versions: dict[str, str] = Field(default_factory=dict, description="Ledger as saved")
    duration_ms: float = Field(default=0.0, ge=0.0)

    model_config = ConfigDict(frozen=True)

    @property
    def updated(self) -> list[PackageOutcome]:
        return [o for o in self.outcomes if o.status is OutcomeStatus.UPDATED]

    @property
    def errors(self) -> list[PackageOutcome]:
        return [o for o in self.outcomes if o.status is OutcomeStatus.ERROR]

    @property
    def exit_code(self) -> int:
        return 1 if self.errors else 0


def log_outcomes(outcomes: Sequence[PackageOutcome]) -> None:
    for outcome in outcomes:
        name = outcome.package.display_name
        if outcome.update is not None:
            logger.info(f"{name}: {outcome.update.prev_label} -> {outcome.update.cur_version}")
        elif outcome.is_error:
            logger.error(
                f"{name}: {outcome.failed_stage} failed: {outcome.error} ({outcome.error_type})"
            )
        else:
            logger.info(f"{name}: no update")


async def run_check(
    config: WatcherConfig,
    *,
    packages: Sequence[PackageDescriptor] | None = None,
    fs: FileSystem | None = None,
    runner: ProcessRunner | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    sinks: Sequence[NotificationSink] | None = None,
) -> WatchReport:
    """Run one check cycle over every configured package.

    Args:
        config: Watcher configuration
        packages: Packages to check (default: resolved from ``config``)
        fs: Filesystem implementation (default: RealFileSystem)
        runner: Process runner (default: AsyncProcessRunner)
        transport: Optional HTTPX transport (useful for testing)
        sinks: Report destinations (default: a DiffArchiveSink under ``diff_dir``)

    Returns:
        WatchReport with one outcome per package

    Raises:
        LedgerFormatError: If the persisted ledger is unreadable
        OSError: If work directories or the ledger cannot be written
    """
    start = time.perf_counter()
    if packages is None:
        packages = resolve_packages(config)

    async with WatcherSession(config, fs=fs, runner=runner, transport=transport) as session:
        await session.fs.mkdirs(session.crx_dir)
        await session.fs.mkdirs(session.diff_dir)

        store = LedgerStore(session.fs, session.versions_path)
        ledger = VersionLedger(await store.load())

        rc_path = session.formatter_config_path
        provisioned = await provision_formatter_config(session.fs, rc_path)
        try:
            logger.info(f"checking {len(packages)} extensions")
            orchestrator = PackageOrchestrator(
                session, ledger, force_diff_override=config.force_diff_override
            )
            outcomes = await orchestrator.check_all(packages)
            log_outcomes(outcomes)
        finally:
            if provisioned:
                await remove_formatter_config(session.fs, rc_path)

        versions = await ledger.snapshot()
        await store.save(versions)

        message = build_update_message(outcomes)
        if sinks is None:
            sinks = [DiffArchiveSink(session.fs, session.diff_dir)]
        for sink in sinks:
            await sink.deliver(outcomes, message)

    return WatchReport(
        outcomes=outcomes,
        message=message,
        versions=versions,
        duration_ms=(time.perf_counter() - start) * 1000,
    )
