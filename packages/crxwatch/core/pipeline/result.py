"""Stage and pipeline results.

Stages never raise to the executor: a failure is a ``StageResult`` with
``success=False`` and the message (and exception type, when there was one)
recorded on it.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

TOutput = TypeVar("TOutput")


class StageResult(BaseModel, Generic[TOutput]):
    """Outcome of running one stage once.

    Example:
        >>> result = success_result(resolved, stage_name="resolve")
        >>> failure_result("no version in manifest", stage_name="resolve").success
        False
    """

    success: bool
    stage_name: str
    output: TOutput | None = None
    error: str | None = None
    error_type: str | None = None
    skipped: bool = False
    metadata: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)


# Module-level constructors; generic pydantic models and classmethods mix poorly.


def success_result(
    output: TOutput,
    stage_name: str = "unknown",
    metadata: dict[str, Any] | None = None,
) -> StageResult[TOutput]:
    return StageResult(success=True, output=output, stage_name=stage_name, metadata=metadata or {})


def failure_result(
    error: str,
    stage_name: str = "unknown",
    metadata: dict[str, Any] | None = None,
    error_type: str | None = None,
) -> StageResult[Any]:
    """Build a failed result.

    Args:
        error: Message reported for the package
        stage_name: Stage that failed
        metadata: Extra details for logs
        error_type: Exception class name, when the failure came from one
    """
    return StageResult(
        success=False,
        error=error,
        error_type=error_type,
        stage_name=stage_name,
        metadata=metadata or {},
    )


def exception_result(exc: BaseException, stage_name: str = "unknown") -> StageResult[Any]:
    """Build a failed result carrying the exception's message and class name."""
    return failure_result(str(exc), stage_name=stage_name, error_type=type(exc).__name__)


def skipped_result(stage_name: str = "unknown", reason: str = "Condition not met") -> StageResult[Any]:
    """Result for a conditional stage whose guard was false. Counts as success."""
    return StageResult(
        success=True,
        skipped=True,
        stage_name=stage_name,
        metadata={"skip_reason": reason},
    )


class PipelineResult(BaseModel):
    """Everything one package pipeline produced.

    ``outputs`` only holds stages that succeeded; a skipped stage maps to
    None. ``failed_stages`` lists failures in the order they happened,
    non-critical ones included.
    """

    success: bool
    outputs: dict[str, Any] = Field(default_factory=dict)
    stage_results: dict[str, StageResult[Any]] = Field(default_factory=dict)
    failed_stages: list[str] = Field(default_factory=list)
    total_duration_ms: float = 0.0
    metadata: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True, extra="forbid")

    def get_output(self, stage_id: str) -> Any:
        """Output of a successful stage.

        Raises:
            KeyError: If the stage did not run or did not succeed
        """
        if stage_id not in self.outputs:
            raise KeyError(f"Stage '{stage_id}' not found in outputs")
        return self.outputs[stage_id]

    def get_result(self, stage_id: str) -> StageResult[Any]:
        if stage_id not in self.stage_results:
            raise KeyError(f"Stage '{stage_id}' not found in results")
        return self.stage_results[stage_id]

    def first_failure(self) -> tuple[str, StageResult[Any] | None]:
        """Stage ID (and its result) that made the pipeline fail.

        Prefers the critical stage recorded by fail-fast, then the first
        failure seen. Validation failures have no stage result.
        """
        stage_id = self.metadata.get("failed_stage") or (
            self.failed_stages[0] if self.failed_stages else "pipeline"
        )
        return stage_id, self.stage_results.get(stage_id)
