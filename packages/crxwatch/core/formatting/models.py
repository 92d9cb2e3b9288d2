"""Models for formatter batching."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class FileEntry(BaseModel):
    """A regular file of an unpacked release and its size in bytes."""

    path: Path
    size: int = Field(ge=0)

    model_config = ConfigDict(frozen=True)


class FormatBatch(BaseModel):
    """Files handed to one formatter invocation.

    Batches are balanced on ``total_size``, not on file count.
    """

    files: list[FileEntry] = Field(default_factory=list)
    total_size: int = Field(default=0, ge=0)

    def add(self, entry: FileEntry) -> None:
        self.files.append(entry)
        self.total_size += entry.size


class BatchOutcome(BaseModel):
    """Result of one formatter invocation.

    ``returncode`` is None when the formatter could not be started.
    """

    batch_index: int
    file_count: int
    total_size: int
    returncode: int | None = None
    error: str | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def ok(self) -> bool:
        return self.error is None
