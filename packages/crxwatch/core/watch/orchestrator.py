"""Runs the check pipeline for every package concurrently."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from crxwatch.core.config.models import PackageDescriptor
from crxwatch.core.ledger import VersionLedger
from crxwatch.core.pipeline import (
    ExecutionPattern,
    PipelineContext,
    PipelineDefinition,
    PipelineExecutor,
    PipelineResult,
    StageDefinition,
)
from crxwatch.core.session import WatcherSession
from crxwatch.core.watch.models import DiffResult, PackageOutcome, Reconciliation
from crxwatch.core.watch.stages import (
    CHANGED_STATE,
    HAS_PREVIOUS_STATE,
    DiffStage,
    FetchStage,
    NormalizeStage,
    ReconcileStage,
    ResolveStage,
)

logger = logging.getLogger(__name__)


def _changed(ctx: PipelineContext) -> bool:
    return bool(ctx.get_state(CHANGED_STATE, False))


def _should_normalize(ctx: PipelineContext) -> bool:
    return _changed(ctx) and ctx.diff_enabled


def _should_diff(ctx: PipelineContext) -> bool:
    return _should_normalize(ctx) and bool(ctx.get_state(HAS_PREVIOUS_STATE, False))


def build_package_pipeline(package: PackageDescriptor) -> PipelineDefinition:
    """Return the five-stage check pipeline for ``package``."""
    return PipelineDefinition(
        name=package.name,
        description=f"Check {package.display_name} for a new release",
        fail_fast=True,
        stages=[
            StageDefinition("resolve", ResolveStage(), description="Resolve published version"),
            StageDefinition(
                "reconcile",
                ReconcileStage(),
                inputs=["resolve"],
                description="Swap version into ledger",
            ),
            StageDefinition(
                "fetch",
                FetchStage(),
                pattern=ExecutionPattern.CONDITIONAL,
                inputs=["reconcile"],
                condition=_changed,
                description="Download and unpack release",
            ),
            StageDefinition(
                "normalize",
                NormalizeStage(),
                pattern=ExecutionPattern.CONDITIONAL,
                inputs=["fetch"],
                condition=_should_normalize,
                critical=False,
                description="Format release files",
            ),
            StageDefinition(
                "diff",
                DiffStage(),
                pattern=ExecutionPattern.CONDITIONAL,
                inputs=["reconcile", "normalize"],
                condition=_should_diff,
                description="Diff against previous release",
            ),
        ],
    )


class PackageOrchestrator:
    """Checks packages end to end and collects one outcome per package.

    Args:
        session: Services shared by the run
        ledger: Shared version ledger
        force_diff_override: Global diff override (None defers to packages)

    Example:
        >>> orchestrator = PackageOrchestrator(session, ledger)
        >>> outcomes = await orchestrator.check_all(packages)
    """

    def __init__(
        self,
        session: WatcherSession,
        ledger: VersionLedger,
        *,
        force_diff_override: bool | None = None,
        executor: PipelineExecutor | None = None,
    ) -> None:
        self.session = session
        self.ledger = ledger
        self.force_diff_override = force_diff_override
        self.executor = executor or PipelineExecutor()

    async def check_package(self, package: PackageDescriptor) -> PackageOutcome:
        """Run the check pipeline for a single package."""
        context = PipelineContext(
            session=self.session,
            ledger=self.ledger,
            package=package,
            diff_enabled=package.effective_diff_enabled(self.force_diff_override),
        )
        result = await self.executor.execute(build_package_pipeline(package), package, context)
        return self._to_outcome(package, result)

    async def check_all(self, packages: Sequence[PackageDescriptor]) -> list[PackageOutcome]:
        """Check every package concurrently.

        One failing package never affects the others; an exception escaping
        a pipeline becomes that package's error outcome.

        Returns:
            Outcomes in the order of ``packages``
        """
        results = await asyncio.gather(
            *(self.check_package(package) for package in packages),
            return_exceptions=True,
        )

        outcomes: list[PackageOutcome] = []
        for package, result in zip(packages, results, strict=True):
            if isinstance(result, PackageOutcome):
                outcomes.append(result)
            elif isinstance(result, Exception):
                logger.error(f"{package}: check raised unexpectedly", exc_info=result)
                outcomes.append(
                    PackageOutcome.failed(
                        package,
                        stage="pipeline",
                        error=str(result),
                        error_type=type(result).__name__,
                    )
                )
            else:
                raise result
        return outcomes

    @staticmethod
    def _to_outcome(package: PackageDescriptor, result: PipelineResult) -> PackageOutcome:
        if not result.success:
            stage_id, stage_result = result.first_failure()
            return PackageOutcome.failed(
                package,
                stage=stage_id,
                error=(stage_result.error if stage_result else None) or "unknown error",
                error_type=stage_result.error_type if stage_result else None,
            )

        reconciliation: Reconciliation = result.get_output("reconcile")
        if not reconciliation.changed:
            return PackageOutcome.no_change(package)

        return PackageOutcome.updated(
            package,
            DiffResult(
                prev_version=reconciliation.prev_version,
                cur_version=reconciliation.cur_version,
                diff_text=result.outputs.get("diff"),
            ),
        )
