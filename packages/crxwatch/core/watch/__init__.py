"""Per-package check pipelines and their orchestration.

The run sequence lives in :mod:`crxwatch.core.watch.run`.
"""

from crxwatch.core.watch.models import (
    DiffResult,
    OutcomeStatus,
    PackageOutcome,
    Reconciliation,
)
from crxwatch.core.watch.orchestrator import PackageOrchestrator, build_package_pipeline

__all__ = [
    "PackageOrchestrator",
    "build_package_pipeline",
    "PackageOutcome",
    "OutcomeStatus",
    "DiffResult",
    "Reconciliation",
]
