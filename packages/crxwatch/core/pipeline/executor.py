"""Runs a PipelineDefinition wave by wave.

Stages of a wave run concurrently; a wave starts once the previous one has
settled. Every stage runs at most once.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

from crxwatch.core.pipeline.context import PipelineContext
from crxwatch.core.pipeline.definition import PipelineDefinition, StageDefinition
from crxwatch.core.pipeline.result import (
    PipelineResult,
    StageResult,
    exception_result,
    failure_result,
    skipped_result,
)

logger = logging.getLogger(__name__)


class PipelineExecutor:
    """Executes package pipelines.

    A critical failure stops the pipeline when ``fail_fast`` is set and
    always makes the result unsuccessful. Non-critical failures are logged
    and recorded while downstream stages receive None for that input.

    Example:
        >>> result = await PipelineExecutor().execute(pipeline, descriptor, context)
        >>> result.success, result.failed_stages
        (True, [])
    """

    async def execute(
        self,
        pipeline: PipelineDefinition,
        initial_input: Any,
        context: PipelineContext,
    ) -> PipelineResult:
        """Run ``pipeline`` with ``initial_input`` fed to its entry stages."""
        start = time.perf_counter()

        errors = pipeline.validate_pipeline()
        if errors:
            logger.error(f"{pipeline.name}: invalid pipeline: {errors}")
            return PipelineResult(
                success=False,
                failed_stages=["validation"],
                metadata={"validation_errors": errors},
            )

        waves = pipeline.waves()
        logger.debug(f"{pipeline.name}: {len(pipeline.stages)} stages in {len(waves)} waves")

        outputs: dict[str, Any] = {}
        stage_results: dict[str, StageResult[Any]] = {}
        failed: list[str] = []
        critical_failed = False

        def finish(success: bool, metadata: dict[str, Any]) -> PipelineResult:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.debug(
                f"{pipeline.name}: {'done' if success else 'failed'} in {duration_ms:.0f}ms"
            )
            return PipelineResult(
                success=success,
                outputs=outputs,
                stage_results=stage_results,
                failed_stages=failed,
                total_duration_ms=duration_ms,
                metadata=metadata,
            )

        for number, wave in enumerate(waves, start=1):
            logger.debug(f"{pipeline.name}: wave {number}: {[s.id for s in wave]}")
            results = await asyncio.gather(
                *(self._run_stage(s, s.gather_input(initial_input, outputs), context) for s in wave)
            )

            for stage_def, result in zip(wave, results, strict=True):
                stage_results[stage_def.id] = result
                if result.success:
                    outputs[stage_def.id] = result.output
                    continue

                failed.append(stage_def.id)
                if not stage_def.critical:
                    logger.warning(
                        f"{pipeline.name}: non-critical stage '{stage_def.id}' failed: "
                        f"{result.error}"
                    )
                    continue

                critical_failed = True
                logger.debug(f"{pipeline.name}: stage '{stage_def.id}' failed: {result.error}")
                if pipeline.fail_fast:
                    return finish(False, {"fail_fast": True, "failed_stage": stage_def.id})

        return finish(not critical_failed, dict(context.metrics))

    async def _run_stage(
        self,
        stage_def: StageDefinition,
        stage_input: Any,
        context: PipelineContext,
    ) -> StageResult[Any]:
        stage_name = stage_def.stage.name

        # checked here, after upstream stages have updated context state
        if not stage_def.should_execute(context):
            logger.debug(f"{context.package.name}: skipping '{stage_def.id}'")
            return skipped_result(stage_name=stage_name)

        started = time.perf_counter()
        try:
            result = await stage_def.stage.execute(stage_input, context)
        except Exception as e:
            logger.exception(f"{context.package.name}: stage '{stage_def.id}' raised")
            return exception_result(e, stage_name=stage_name)
        finally:
            context.add_metric(
                f"{stage_def.id}_duration_ms", (time.perf_counter() - started) * 1000
            )

        if not isinstance(result, StageResult):
            return failure_result(
                f"Stage returned {type(result).__name__}, not StageResult",
                stage_name=stage_name,
            )
        return result
