"""Pipeline context for shared state and dependencies.

Provides dependency injection and state management across pipeline stages.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from crxwatch.core.config.models import PackageDescriptor, WatcherConfig
from crxwatch.core.ledger import VersionLedger
from crxwatch.core.session import WatcherSession


@dataclass
class PipelineContext:
    """Shared context across the stages of one package's pipeline.

    Mutable to allow state updates during pipeline execution. The session and
    the ledger are shared with every other package pipeline of the run; the
    state and metrics dictionaries belong to this pipeline only.

    Attributes:
        session: Services shared by the run (resolver, fetcher, ...)
        ledger: Shared version ledger
        package: Package this pipeline checks
        diff_enabled: Effective diff setting after the global override
        state: Mutable state dictionary for sharing data between stages
        metrics: Mutable metrics dictionary (timing, sizes, etc.)

    Example:
        >>> context = PipelineContext(
        ...     session=session,
        ...     ledger=ledger,
        ...     package=descriptor,
        ...     diff_enabled=True,
        ... )
        >>> # Access in stage
        >>> async def execute(self, input, context):
        ...     previous = await context.ledger.reconcile(context.package.name, input.version)
        ...     context.set_state("changed", previous != input.version)
    """

    session: WatcherSession
    ledger: VersionLedger
    package: PackageDescriptor
    diff_enabled: bool = True

    # Mutable state
    state: dict[str, Any] = field(default_factory=dict)
    metrics: dict[str, Any] = field(default_factory=dict)

    @property
    def config(self) -> WatcherConfig:
        """Get watcher configuration of the session."""
        return self.session.config

    def add_metric(self, key: str, value: Any) -> None:
        """Add or update metric."""
        self.metrics[key] = value

    def get_state(self, key: str, default: Any = None) -> Any:
        """Get state value with optional default.

        Args:
            key: State key
            default: Default value if key not found

        Returns:
            State value or default
        """
        return self.state.get(key, default)

    def set_state(self, key: str, value: Any) -> None:
        """Set state value."""
        self.state[key] = value
