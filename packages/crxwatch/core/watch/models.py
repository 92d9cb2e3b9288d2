"""Per-package results of a check run."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from crxwatch.core.config.models import PackageDescriptor


class Reconciliation(BaseModel):
    """Outcome of reconciling a resolved version against the ledger.

    ``prev_version`` is None when the package was never seen before.
    """

    prev_version: str | None = None
    cur_version: str
    artifact_url: str

    model_config = ConfigDict(frozen=True)

    @property
    def changed(self) -> bool:
        """Exact string comparison; a never-seen package always counts as changed."""
        return self.prev_version != self.cur_version

    @property
    def has_previous(self) -> bool:
        return self.prev_version is not None


class DiffResult(BaseModel):
    """A detected update and, when generated, its diff."""

    prev_version: str | None = None
    cur_version: str
    diff_text: str | None = Field(
        default=None,
        description="Unified diff; None when there was no previous version or diffing is off",
    )

    model_config = ConfigDict(frozen=True)

    @property
    def prev_label(self) -> str:
        return self.prev_version if self.prev_version is not None else "None"


class OutcomeStatus(str, Enum):
    NO_CHANGE = "no_change"
    UPDATED = "updated"
    ERROR = "error"


class PackageOutcome(BaseModel):
    """Exactly one per package per run."""

    package: PackageDescriptor
    status: OutcomeStatus
    update: DiffResult | None = None
    failed_stage: str | None = None
    error: str | None = None
    error_type: str | None = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def no_change(cls, package: PackageDescriptor) -> PackageOutcome:
        return cls(package=package, status=OutcomeStatus.NO_CHANGE)

    @classmethod
    def updated(cls, package: PackageDescriptor, update: DiffResult) -> PackageOutcome:
        return cls(package=package, status=OutcomeStatus.UPDATED, update=update)

    @classmethod
    def failed(
        cls,
        package: PackageDescriptor,
        *,
        stage: str,
        error: str,
        error_type: str | None = None,
    ) -> PackageOutcome:
        return cls(
            package=package,
            status=OutcomeStatus.ERROR,
            failed_stage=stage,
            error=error,
            error_type=error_type,
        )

    @property
    def is_error(self) -> bool:
        return self.status is OutcomeStatus.ERROR
