"""Filesystem abstraction layer for crxwatch.

Provides safe, testable, async-first filesystem operations.

Example:
    >>> from crxwatch.core.io import RealFileSystem, absolute_path
    >>> fs = RealFileSystem()
    >>> path = fs.join(absolute_path("/tmp"), "crxwatch", "versions.yaml")
    >>> await fs.write_text(path, "classroom: '1.2.3'\\n")
    >>> content = await fs.read_text(path)
"""

from .impl_fake import FakeFileSystem
from .impl_real import RealFileSystem
from .models import AbsolutePath, WriteResult, absolute_path
from .protocols import FileSystem

__all__ = [
    "AbsolutePath",
    "absolute_path",
    "WriteResult",
    "FileSystem",
    "RealFileSystem",
    "FakeFileSystem",
]
