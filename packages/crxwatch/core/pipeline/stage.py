"""Stage protocol and the input-unpacking helper stages share."""

from __future__ import annotations

from typing import Any, Protocol, TypeVar

from crxwatch.core.pipeline.context import PipelineContext
from crxwatch.core.pipeline.result import StageResult

T = TypeVar("T")


class PipelineStage(Protocol):
    """A unit of a package check (resolve, reconcile, fetch, normalize, diff).

    Implementations report failures through ``failure_result`` rather than
    raising; the executor still converts a stray exception into a failure.

    Example:
        >>> class ResolveStage:
        ...     name = "resolve"
        ...
        ...     async def execute(self, input, context):
        ...         resolved = await context.session.resolver.resolve(input)
        ...         return success_result(resolved, stage_name=self.name)
    """

    @property
    def name(self) -> str: ...

    async def execute(
        self,
        input: Any,  # Any keeps the Protocol invariant across stage input types
        context: PipelineContext,
    ) -> StageResult[Any]: ...


def resolve_typed_input(
    input: Any,
    model_type: type[T],
    dict_key: str | None = None,
) -> tuple[T, dict[str, Any]]:
    """Pull a ``model_type`` value out of a stage input.

    Single-input stages receive the upstream output itself; multi-input
    stages receive ``{stage_id: output}`` and name the key they need.

    Returns:
        ``(value, extras)`` where ``extras`` are the other dict entries

    Raises:
        TypeError: If no ``model_type`` value can be found

    Example:
        >>> reconciliation, extras = resolve_typed_input(input, Reconciliation, "reconcile")
    """
    if isinstance(input, model_type):
        return input, {}

    if isinstance(input, dict) and dict_key is not None:
        extras = dict(input)
        value = extras.pop(dict_key, None)
        if isinstance(value, model_type):
            return value, extras
        raise TypeError(f"Input '{dict_key}' is not a {model_type.__name__}")

    wanted = model_type.__name__ + (f" or dict with key '{dict_key}'" if dict_key else "")
    raise TypeError(f"Expected {wanted}, got {type(input).__name__}")
