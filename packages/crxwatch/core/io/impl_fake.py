"""In-memory FileSystem for ledger, sink and formatter-config tests."""

from pathlib import Path, PurePosixPath

from .models import AbsolutePath, WriteResult


class FakeFileSystem:
    """Dict-backed FileSystem. One instance per test.

    Paths are kept as given; there is no symlink resolution and no
    traversal check, so tests can use fixed roots such as ``/work``.
    """

    def __init__(self) -> None:
        self.files: dict[PurePosixPath, str] = {}
        self.dirs: set[PurePosixPath] = {PurePosixPath("/")}

    @staticmethod
    def _key(path: Path) -> PurePosixPath:
        return PurePosixPath("/", path)

    def _add_dirs(self, path: PurePosixPath) -> None:
        self.dirs.add(path)
        self.dirs.update(path.parents)

    def join(self, base: AbsolutePath, *parts: str) -> AbsolutePath:
        return AbsolutePath(Path(self._key(Path(base).joinpath(*parts))))

    async def exists(self, path: AbsolutePath) -> bool:
        key = self._key(path)
        return key in self.files or key in self.dirs

    async def is_file(self, path: AbsolutePath) -> bool:
        return self._key(path) in self.files

    async def is_dir(self, path: AbsolutePath) -> bool:
        return self._key(path) in self.dirs

    async def read_text(self, path: AbsolutePath, encoding: str = "utf-8") -> str:
        try:
            return self.files[self._key(path)]
        except KeyError:
            raise FileNotFoundError(f"File not found: {path}") from None

    async def write_text(
        self,
        path: AbsolutePath,
        content: str,
        encoding: str = "utf-8",
    ) -> WriteResult:
        key = self._key(path)
        self._add_dirs(key.parent)
        self.files[key] = content
        return WriteResult(path=str(path), bytes_written=len(content.encode(encoding)))

    async def mkdirs(self, path: AbsolutePath, exist_ok: bool = True) -> None:
        key = self._key(path)
        if key in self.dirs and not exist_ok:
            raise FileExistsError(f"Directory exists: {path}")
        self._add_dirs(key)

    async def remove(self, path: AbsolutePath) -> None:
        key = self._key(path)
        if key not in self.files:
            raise FileNotFoundError(f"File not found: {path}")
        del self.files[key]
