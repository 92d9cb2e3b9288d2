"""Path and result types shared by the filesystem implementations."""

from pathlib import Path
from typing import NewType

from pydantic import BaseModel, ConfigDict, Field

# Resolved, absolute. Build with absolute_path() so symlinked work dirs
# compare equal to the paths the tools report.
AbsolutePath = NewType("AbsolutePath", Path)


def absolute_path(path: str | Path) -> AbsolutePath:
    """Resolve ``path`` (relative to the cwd) into an AbsolutePath.

    Example:
        >>> absolute_path("work/diff").is_absolute()
        True
    """
    return AbsolutePath(Path(path).resolve())


class WriteResult(BaseModel):
    """What a ``write_text`` call put on disk."""

    model_config = ConfigDict(frozen=True)

    path: str
    bytes_written: int = Field(ge=0)
    duration_ms: float = Field(default=0.0, ge=0.0)
