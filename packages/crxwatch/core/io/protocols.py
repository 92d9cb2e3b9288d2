"""Filesystem capability used for the ledger, diff archive and formatter config.

Async so that ledger saves and diff writes share the event loop with the
package pipelines. Release extraction is not routed through here: unzip
and the formatter work on real directories.
"""

from typing import Protocol

from .models import AbsolutePath, WriteResult


class FileSystem(Protocol):
    """Async filesystem operations over absolute paths.

    ``write_text`` must be atomic: a reader sees the old file or the new
    one, never a partial write. This is what keeps the versions file
    intact when a run is interrupted mid-save.
    """

    def join(self, base: AbsolutePath, *parts: str) -> AbsolutePath:
        """Join ``parts`` under ``base``; ValueError if the result escapes it."""
        ...

    async def exists(self, path: AbsolutePath) -> bool: ...

    async def is_file(self, path: AbsolutePath) -> bool: ...

    async def is_dir(self, path: AbsolutePath) -> bool: ...

    async def read_text(self, path: AbsolutePath, encoding: str = "utf-8") -> str:
        """Raises FileNotFoundError when missing."""
        ...

    async def write_text(
        self,
        path: AbsolutePath,
        content: str,
        encoding: str = "utf-8",
    ) -> WriteResult:
        """Replace ``path`` atomically, creating parent directories."""
        ...

    async def mkdirs(self, path: AbsolutePath, exist_ok: bool = True) -> None: ...

    async def remove(self, path: AbsolutePath) -> None:
        """Raises FileNotFoundError when missing."""
        ...
