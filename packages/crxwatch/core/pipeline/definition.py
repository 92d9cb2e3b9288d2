"""Declarative description of a package pipeline.

Stages name the stages they consume; ``PipelineDefinition.waves`` turns
those edges into groups that can run together.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from graphlib import CycleError, TopologicalSorter
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from crxwatch.core.pipeline.context import PipelineContext


class ExecutionPattern(str, Enum):
    """How a stage is scheduled once its inputs are ready."""

    SEQUENTIAL = "sequential"
    CONDITIONAL = "conditional"


@dataclass
class StageDefinition:
    """One stage of a pipeline.

    Attributes:
        id: Unique stage identifier
        stage: Object implementing the PipelineStage protocol
        pattern: SEQUENTIAL (always) or CONDITIONAL (guarded by ``condition``)
        inputs: IDs of the stages whose outputs feed this one
        condition: Guard checked when the stage is reached
        critical: A failure here fails the package
        description: Shown in debug logs

    Example:
        >>> StageDefinition(
        ...     "fetch",
        ...     FetchStage(),
        ...     pattern=ExecutionPattern.CONDITIONAL,
        ...     inputs=["reconcile"],
        ...     condition=lambda ctx: ctx.get_state("changed", False),
        ... )
    """

    id: str
    stage: Any  # PipelineStage; Protocols do not validate as dataclass fields
    pattern: ExecutionPattern = ExecutionPattern.SEQUENTIAL
    inputs: list[str] = field(default_factory=list)
    condition: Callable[[PipelineContext], bool] | None = None
    critical: bool = True
    description: str | None = None

    def should_execute(self, context: PipelineContext) -> bool:
        if self.pattern is not ExecutionPattern.CONDITIONAL or self.condition is None:
            return True
        return bool(self.condition(context))

    def gather_input(self, initial_input: Any, outputs: dict[str, Any]) -> Any:
        """Build this stage's input from upstream outputs.

        Entry stages get the pipeline input, single-input stages the upstream
        output itself, and multi-input stages a dict keyed by stage ID.
        """
        if not self.inputs:
            return initial_input
        if len(self.inputs) == 1:
            return outputs.get(self.inputs[0])
        return {input_id: outputs.get(input_id) for input_id in self.inputs}


class PipelineDefinition(BaseModel):
    """A named set of stages plus their dependency edges."""

    name: str
    stages: list[StageDefinition]
    description: str | None = None
    fail_fast: bool = Field(default=True, description="Stop at the first critical failure")

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    def validate_pipeline(self) -> list[str]:
        """Return every structural problem found; empty when runnable."""
        errors: list[str] = []

        counts = Counter(s.id for s in self.stages)
        duplicates = sorted(sid for sid, n in counts.items() if n > 1)
        if duplicates:
            errors.append(f"Duplicate stage IDs: {duplicates}")

        for stage_def in self.stages:
            errors.extend(
                f"Stage '{stage_def.id}' depends on unknown stage '{input_id}'"
                for input_id in stage_def.inputs
                if input_id not in counts
            )

        try:
            self._sorter().prepare()
        except CycleError as e:
            cycle = " -> ".join(e.args[1])
            errors.append(f"Circular dependency detected: {cycle}")

        if self.stages and all(s.inputs for s in self.stages):
            errors.append("Pipeline has no entry points (all stages have dependencies)")

        return errors

    def waves(self) -> list[list[StageDefinition]]:
        """Group stages so that every wave depends only on earlier waves.

        Raises:
            graphlib.CycleError: If the stages form a cycle
        """
        sorter = self._sorter()
        sorter.prepare()

        waves: list[list[StageDefinition]] = []
        while sorter.is_active():
            ready = sorter.get_ready()
            # keep declaration order inside a wave
            waves.append([s for s in self.stages if s.id in ready])
            sorter.done(*ready)
        return waves

    def get_stage(self, stage_id: str) -> StageDefinition | None:
        return next((s for s in self.stages if s.id == stage_id), None)

    def _sorter(self) -> TopologicalSorter[str]:
        known = {s.id for s in self.stages}
        sorter: TopologicalSorter[str] = TopologicalSorter()
        for stage_def in self.stages:
            sorter.add(stage_def.id, *(i for i in stage_def.inputs if i in known))
        return sorter
