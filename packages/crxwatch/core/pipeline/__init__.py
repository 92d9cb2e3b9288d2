"""Pipeline orchestration framework for crxwatch.

Provides declarative pipeline definition with automatic dependency
resolution, concurrent execution of independent stages, and error capture.

Core concepts:
- PipelineStage: Unit of work (resolve, reconcile, fetch, normalize, diff)
- PipelineDefinition: Declarative stage dependencies and execution config
- PipelineExecutor: Orchestrates execution with dep tracking
- PipelineContext: Shared state and dependencies across stages

Example:
    >>> from crxwatch.core.pipeline import (
    ...     PipelineDefinition,
    ...     PipelineExecutor,
    ...     PipelineContext,
    ...     StageDefinition,
    ... )
    >>> pipeline = PipelineDefinition(
    ...     name="classroom",
    ...     stages=[
    ...         StageDefinition("resolve", ResolveStage()),
    ...         StageDefinition("reconcile", ReconcileStage(), inputs=["resolve"]),
    ...     ],
    ... )
    >>> ctx = PipelineContext(session=session, ledger=ledger, package=descriptor)
    >>> result = await PipelineExecutor().execute(pipeline, descriptor, ctx)
"""

from crxwatch.core.pipeline.context import PipelineContext
from crxwatch.core.pipeline.definition import (
    ExecutionPattern,
    PipelineDefinition,
    StageDefinition,
)
from crxwatch.core.pipeline.executor import PipelineExecutor
from crxwatch.core.pipeline.result import (
    PipelineResult,
    StageResult,
    exception_result,
    failure_result,
    skipped_result,
    success_result,
)
from crxwatch.core.pipeline.stage import PipelineStage, resolve_typed_input

__all__ = [
    "ExecutionPattern",
    "PipelineContext",
    "PipelineDefinition",
    "PipelineExecutor",
    "PipelineResult",
    "PipelineStage",
    "StageDefinition",
    "StageResult",
    "exception_result",
    "failure_result",
    "resolve_typed_input",
    "skipped_result",
    "success_result",
]
