"""Stages of the per-package check pipeline.

resolve -> reconcile -> fetch -> normalize -> diff. Every stage after
reconcile runs only when the package changed; normalize and diff further
require diffing to be enabled, and diff a previously seen version.
"""

from __future__ import annotations

import logging
from typing import Any

from crxwatch.core.artifacts.models import UnpackedRelease
from crxwatch.core.config.models import PackageDescriptor
from crxwatch.core.errors import WatcherError
from crxwatch.core.formatting.models import BatchOutcome
from crxwatch.core.pipeline import (
    PipelineContext,
    StageResult,
    exception_result,
    resolve_typed_input,
    success_result,
)
from crxwatch.core.resolvers.models import ResolvedVersion
from crxwatch.core.watch.models import Reconciliation

logger = logging.getLogger(__name__)

CHANGED_STATE = "changed"
HAS_PREVIOUS_STATE = "has_previous"


def _failed(stage: str, context: PipelineContext, exc: Exception) -> StageResult[Any]:
    if isinstance(exc, WatcherError):
        logger.debug(f"{context.package}: {stage} failed: {exc}")
    else:
        logger.exception(f"{context.package}: {stage} raised unexpectedly", exc_info=exc)
    return exception_result(exc, stage_name=stage)


class ResolveStage:
    """Stage: look up the published version.

    Input: PackageDescriptor
    Output: ResolvedVersion
    """

    @property
    def name(self) -> str:
        return "resolve"

    async def execute(
        self, input: PackageDescriptor, context: PipelineContext
    ) -> StageResult[ResolvedVersion]:
        try:
            resolved = await context.session.resolver.resolve(input)
        except Exception as e:
            return _failed(self.name, context, e)

        logger.debug(f"{input}: published version is {resolved.version}")
        return success_result(resolved, stage_name=self.name)


class ReconcileStage:
    """Stage: swap the resolved version into the shared ledger.

    Input: ResolvedVersion
    Output: Reconciliation
    """

    @property
    def name(self) -> str:
        return "reconcile"

    async def execute(
        self, input: ResolvedVersion, context: PipelineContext
    ) -> StageResult[Reconciliation]:
        try:
            resolved, _ = resolve_typed_input(input, ResolvedVersion)
            previous = await context.ledger.reconcile(context.package.name, resolved.version)
        except Exception as e:
            return _failed(self.name, context, e)

        reconciliation = Reconciliation(
            prev_version=previous,
            cur_version=resolved.version,
            artifact_url=resolved.artifact_url,
        )
        context.set_state(CHANGED_STATE, reconciliation.changed)
        context.set_state(HAS_PREVIOUS_STATE, reconciliation.has_previous)
        return success_result(reconciliation, stage_name=self.name)


class FetchStage:
    """Stage: download and unpack the new release.

    Input: Reconciliation
    Output: UnpackedRelease
    """

    @property
    def name(self) -> str:
        return "fetch"

    async def execute(
        self, input: Reconciliation, context: PipelineContext
    ) -> StageResult[UnpackedRelease]:
        try:
            reconciliation, _ = resolve_typed_input(input, Reconciliation)
            release = await context.session.fetcher.fetch_and_unpack(
                context.package.name,
                reconciliation.cur_version,
                reconciliation.artifact_url,
            )
        except Exception as e:
            return _failed(self.name, context, e)

        return success_result(release, stage_name=self.name)


class NormalizeStage:
    """Stage: run the formatter over the unpacked release.

    Best-effort: formatter failures are reported in the output, never as a
    stage failure.

    Input: UnpackedRelease
    Output: list[BatchOutcome]
    """

    @property
    def name(self) -> str:
        return "normalize"

    async def execute(
        self, input: UnpackedRelease, context: PipelineContext
    ) -> StageResult[list[BatchOutcome]]:
        try:
            release, _ = resolve_typed_input(input, UnpackedRelease)
            outcomes = await context.session.scheduler.normalize(release.path)
        except Exception as e:
            return _failed(self.name, context, e)

        failed = sum(1 for outcome in outcomes if not outcome.ok)
        context.add_metric("format_batches", len(outcomes))
        context.add_metric("format_batches_failed", failed)
        return success_result(outcomes, stage_name=self.name)


class DiffStage:
    """Stage: diff the previous release against the new one.

    Input: {"reconcile": Reconciliation, "normalize": ...}
    Output: str (diff text)
    """

    @property
    def name(self) -> str:
        return "diff"

    async def execute(self, input: dict[str, Any], context: PipelineContext) -> StageResult[str]:
        try:
            reconciliation, _ = resolve_typed_input(input, Reconciliation, "reconcile")
            diff_text = await context.session.diff_engine.diff(
                context.package.name,
                reconciliation.prev_version,
                reconciliation.cur_version,
            )
        except Exception as e:
            return _failed(self.name, context, e)

        return success_result(diff_text, stage_name=self.name)
