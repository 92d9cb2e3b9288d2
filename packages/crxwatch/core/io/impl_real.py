"""Disk-backed FileSystem on aiofiles."""

import asyncio
import contextlib
import os
import tempfile
import time
from pathlib import Path

import aiofiles  # type: ignore[import-untyped]
import aiofiles.os  # type: ignore[import-untyped]

from .models import AbsolutePath, WriteResult


def _reserve_temp(target: Path) -> str:
    """Create an empty temp file beside ``target`` and return its name."""
    fd, name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
    os.close(fd)
    return name


class RealFileSystem:
    """FileSystem writing to local disk.

    Writes go to a hidden temp file in the target's directory and are
    moved into place with ``os.replace``, so the versions file is either
    the previous save or the new one.
    """

    def join(self, base: AbsolutePath, *parts: str) -> AbsolutePath:
        root = Path(base).resolve()
        joined = root.joinpath(*parts).resolve()
        if not joined.is_relative_to(root):
            raise ValueError(f"Path traversal detected: {joined} escapes {base}")
        return AbsolutePath(joined)

    async def exists(self, path: AbsolutePath) -> bool:
        return bool(await aiofiles.os.path.exists(path))

    async def is_file(self, path: AbsolutePath) -> bool:
        return bool(await aiofiles.os.path.isfile(path))

    async def is_dir(self, path: AbsolutePath) -> bool:
        return bool(await aiofiles.os.path.isdir(path))

    async def read_text(self, path: AbsolutePath, encoding: str = "utf-8") -> str:
        async with aiofiles.open(path, encoding=encoding) as f:
            return str(await f.read())

    async def write_text(
        self,
        path: AbsolutePath,
        content: str,
        encoding: str = "utf-8",
    ) -> WriteResult:
        started = time.perf_counter()
        target = Path(path)
        data = content.encode(encoding)

        await aiofiles.os.makedirs(target.parent, exist_ok=True)
        tmp_name = await asyncio.to_thread(_reserve_temp, target)
        try:
            async with aiofiles.open(tmp_name, mode="wb") as f:
                await f.write(data)
            await aiofiles.os.replace(tmp_name, target)
        except BaseException:
            with contextlib.suppress(OSError):
                await aiofiles.os.unlink(tmp_name)
            raise

        return WriteResult(
            path=str(path),
            bytes_written=len(data),
            duration_ms=(time.perf_counter() - started) * 1000,
        )

    async def mkdirs(self, path: AbsolutePath, exist_ok: bool = True) -> None:
        await aiofiles.os.makedirs(path, exist_ok=exist_ok)

    async def remove(self, path: AbsolutePath) -> None:
        await aiofiles.os.unlink(path)
