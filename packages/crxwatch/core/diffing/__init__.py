"""Release tree diffing."""

from crxwatch.core.diffing.engine import DiffEngine, strip_timestamps

__all__ = ["DiffEngine", "strip_timestamps"]
