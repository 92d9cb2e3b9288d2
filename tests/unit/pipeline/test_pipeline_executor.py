"""Unit tests for pipeline framework."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any
from unittest.mock import MagicMock

import pytest

from crxwatch.core.ledger import VersionLedger
from crxwatch.core.pipeline import (
    ExecutionPattern,
    PipelineContext,
    PipelineDefinition,
    PipelineExecutor,
    StageDefinition,
    failure_result,
    success_result,
)
from crxwatch.core.pipeline.stage import resolve_typed_input

if TYPE_CHECKING:
    from crxwatch.core.pipeline import StageResult

# ============================================================================
# Mock Stages
# ============================================================================


class MockStage:
    """Mock stage for testing."""

    def __init__(self, stage_name: str, output: Any, should_fail: bool = False):
        self._name = stage_name
        self._output = output
        self._should_fail = should_fail
        self.execution_count = 0
        self.received: list[Any] = []

    @property
    def name(self) -> str:
        return self._name

    async def execute(
        self,
        input: Any,
        context: PipelineContext,
    ) -> StageResult[Any]:
        self.execution_count += 1
        self.received.append(input)

        if self._should_fail:
            return failure_result(f"Mock failure in {self._name}", stage_name=self._name)

        # Simulate async work
        await asyncio.sleep(0.01)

        return success_result(self._output, stage_name=self._name)


class RaisingStage:
    """Stage that raises instead of returning a failure result."""

    name = "boom"

    async def execute(self, input: Any, context: PipelineContext) -> StageResult[Any]:
        raise RuntimeError("kaboom")


class StateSettingStage(MockStage):
    """Stage that records a state flag for downstream conditions."""

    def __init__(self, stage_name: str, output: Any, flag: bool):
        super().__init__(stage_name, output)
        self._flag = flag

    async def execute(self, input: Any, context: PipelineContext) -> StageResult[Any]:
        context.set_state("changed", self._flag)
        return await super().execute(input, context)


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def mock_context(make_package) -> PipelineContext:
    """Create pipeline context with mocked session."""
    mock_session = MagicMock()
    mock_session.session_id = "test_session_123"
    return PipelineContext(
        session=mock_session,
        ledger=VersionLedger(),
        package=make_package(),
    )


# ============================================================================
# Tests: Pipeline Definition
# ============================================================================


def test_pipeline_definition_validation():
    """Test pipeline definition validation."""
    pipeline = PipelineDefinition(
        name="test",
        stages=[
            StageDefinition("a", MockStage("a", "output_a")),
            StageDefinition("b", MockStage("b", "output_b"), inputs=["a"]),
        ],
    )

    assert pipeline.validate_pipeline() == []


def test_pipeline_validation_duplicate_ids():
    """Test validation catches duplicate stage IDs."""
    pipeline = PipelineDefinition(
        name="test",
        stages=[
            StageDefinition("a", MockStage("a", "output_a")),
            StageDefinition("a", MockStage("a", "output_a")),  # Duplicate!
        ],
    )

    errors = pipeline.validate_pipeline()
    assert any("Duplicate" in e for e in errors)


def test_pipeline_validation_unknown_input():
    """Test validation catches references to missing stages."""
    pipeline = PipelineDefinition(
        name="test",
        stages=[StageDefinition("a", MockStage("a", 1), inputs=["missing"])],
    )

    errors = pipeline.validate_pipeline()
    assert any("unknown stage 'missing'" in e for e in errors)


def test_pipeline_validation_cycle():
    """Test validation catches circular dependencies."""
    pipeline = PipelineDefinition(
        name="test",
        stages=[
            StageDefinition("root", MockStage("root", 0)),
            StageDefinition("a", MockStage("a", 1), inputs=["root", "b"]),
            StageDefinition("b", MockStage("b", 2), inputs=["a"]),
        ],
    )

    errors = pipeline.validate_pipeline()
    assert any("Circular dependency" in e for e in errors)


def test_get_stage():
    stage_def = StageDefinition("a", MockStage("a", 1))
    pipeline = PipelineDefinition(name="test", stages=[stage_def])

    assert pipeline.get_stage("a") is stage_def
    assert pipeline.get_stage("b") is None


# ============================================================================
# Tests: Execution
# ============================================================================


class TestExecutor:
    """Tests for PipelineExecutor.execute."""

    async def test_linear_pipeline_passes_outputs(self, mock_context):
        """Test each stage receives its upstream output."""
        a = MockStage("a", "output_a")
        b = MockStage("b", "output_b")
        pipeline = PipelineDefinition(
            name="test",
            stages=[StageDefinition("a", a), StageDefinition("b", b, inputs=["a"])],
        )

        result = await PipelineExecutor().execute(pipeline, "seed", mock_context)

        assert result.success
        assert a.received == ["seed"]
        assert b.received == ["output_a"]
        assert result.get_output("b") == "output_b"
        assert "a_duration_ms" in result.metadata

    async def test_multi_input_receives_dict(self, mock_context):
        """Test a stage with several inputs gets a dict keyed by stage ID."""
        c = MockStage("c", "output_c")
        pipeline = PipelineDefinition(
            name="test",
            stages=[
                StageDefinition("a", MockStage("a", 1)),
                StageDefinition("b", MockStage("b", 2)),
                StageDefinition("c", c, inputs=["a", "b"]),
            ],
        )

        await PipelineExecutor().execute(pipeline, None, mock_context)

        assert c.received == [{"a": 1, "b": 2}]

    async def test_critical_failure_stops_pipeline(self, mock_context):
        """Test fail-fast halts on a critical failure and names the stage."""
        downstream = MockStage("b", "output_b")
        pipeline = PipelineDefinition(
            name="test",
            stages=[
                StageDefinition("a", MockStage("a", None, should_fail=True)),
                StageDefinition("b", downstream, inputs=["a"]),
            ],
        )

        result = await PipelineExecutor().execute(pipeline, None, mock_context)

        assert not result.success
        assert result.failed_stages == ["a"]
        assert result.metadata["failed_stage"] == "a"
        assert downstream.execution_count == 0
        assert result.get_result("a").error == "Mock failure in a"

    async def test_non_critical_failure_continues(self, mock_context):
        """Test a non-critical failure is recorded but the pipeline succeeds."""
        downstream = MockStage("c", "output_c")
        pipeline = PipelineDefinition(
            name="test",
            stages=[
                StageDefinition("a", MockStage("a", 1)),
                StageDefinition(
                    "b",
                    MockStage("b", None, should_fail=True),
                    inputs=["a"],
                    critical=False,
                ),
                StageDefinition("c", downstream, inputs=["a", "b"]),
            ],
        )

        result = await PipelineExecutor().execute(pipeline, None, mock_context)

        assert result.success
        assert result.failed_stages == ["b"]
        assert downstream.received == [{"a": 1, "b": None}]

    async def test_exception_becomes_failure(self, mock_context):
        """Test a raising stage is captured with its exception type."""
        pipeline = PipelineDefinition(
            name="test",
            stages=[StageDefinition("boom", RaisingStage())],
        )

        result = await PipelineExecutor().execute(pipeline, None, mock_context)

        assert not result.success
        stage_result = result.get_result("boom")
        assert stage_result.error == "kaboom"
        assert stage_result.error_type == "RuntimeError"

    @pytest.mark.parametrize("flag", [True, False])
    async def test_condition_evaluated_after_dependencies(self, mock_context, flag):
        """Test a conditional stage sees state set by its upstream stage."""
        conditional = MockStage("b", "output_b")
        pipeline = PipelineDefinition(
            name="test",
            stages=[
                StageDefinition("a", StateSettingStage("a", 1, flag)),
                StageDefinition(
                    "b",
                    conditional,
                    pattern=ExecutionPattern.CONDITIONAL,
                    inputs=["a"],
                    condition=lambda ctx: ctx.get_state("changed", False),
                ),
            ],
        )

        result = await PipelineExecutor().execute(pipeline, None, mock_context)

        assert result.success
        assert conditional.execution_count == (1 if flag else 0)
        assert result.get_result("b").skipped is (not flag)

    async def test_invalid_pipeline_not_executed(self, mock_context):
        stage = MockStage("a", 1)
        pipeline = PipelineDefinition(
            name="test",
            stages=[StageDefinition("a", stage, inputs=["a"])],
        )

        result = await PipelineExecutor().execute(pipeline, None, mock_context)

        assert not result.success
        assert result.failed_stages == ["validation"]
        assert stage.execution_count == 0


# ============================================================================
# Tests: Helpers
# ============================================================================


class TestResolveTypedInput:
    def test_direct_value(self):
        assert resolve_typed_input(5, int) == (5, {})

    def test_dict_value(self):
        value, extras = resolve_typed_input({"a": 5, "b": "x"}, int, "a")
        assert value == 5
        assert extras == {"b": "x"}

    def test_wrong_type(self):
        with pytest.raises(TypeError):
            resolve_typed_input("x", int)


def test_context_state_and_metrics(mock_context):
    mock_context.set_state("changed", True)
    mock_context.add_metric("format_batches", 5)

    assert mock_context.get_state("changed") is True
    assert mock_context.get_state("missing", "default") == "default"
    assert mock_context.metrics == {"format_batches": 5}
