"""File enumeration and size-balanced batch partitioning."""

from __future__ import annotations

import asyncio
import os
import stat
from collections.abc import Iterable
from pathlib import Path

from crxwatch.core.formatting.models import FileEntry, FormatBatch


def _walk_regular_files(root: Path) -> list[FileEntry]:
    entries: list[FileEntry] = []
    for dirpath, _dirnames, filenames in os.walk(root):
        for filename in filenames:
            path = Path(dirpath) / filename
            st = path.lstat()
            if stat.S_ISREG(st.st_mode):
                entries.append(FileEntry(path=path, size=st.st_size))
    return entries


async def collect_files(root: Path) -> list[FileEntry]:
    """Enumerate every regular file under ``root`` with its byte size.

    Runs in a worker thread; symlinks are not followed.
    """
    return await asyncio.to_thread(_walk_regular_files, root)


def partition_batches(files: Iterable[FileEntry], worker_count: int) -> list[FormatBatch]:
    """Distribute files over at most ``worker_count`` size-balanced batches.

    Files are taken largest first (stable for equal sizes) and each one is
    placed in the batch with the smallest byte total so far, the lowest
    index winning ties. Empty batches are dropped from the result.

    Example:
        >>> sizes = [100, 50, 40, 30]
        >>> batches = partition_batches(
        ...     [FileEntry(path=Path(f"f{i}"), size=s) for i, s in enumerate(sizes)], 2
        ... )
        >>> [b.total_size for b in batches]
        [100, 120]

    Raises:
        ValueError: If worker_count < 1
    """
    if worker_count < 1:
        raise ValueError(f"worker_count must be >= 1, got {worker_count}")

    ordered = sorted(files, key=lambda entry: entry.size, reverse=True)
    batches = [FormatBatch() for _ in range(worker_count)]

    for start in range(0, len(ordered), worker_count):
        for entry in ordered[start : start + worker_count]:
            target = min(range(worker_count), key=lambda i: batches[i].total_size)
            batches[target].add(entry)

    return [batch for batch in batches if batch.files]
