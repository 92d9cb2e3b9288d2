"""Downloads release archives and unpacks them with an external tool."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from crxwatch.core.api.http import ApiError, AsyncApiClient
from crxwatch.core.artifacts.models import UnpackedRelease, release_dirname
from crxwatch.core.config.models import ExtractorConfig
from crxwatch.core.errors import (
    ArtifactFilesystemError,
    DownloadError,
    ExtractionError,
    ProcessSpawnError,
)
from crxwatch.core.process import ProcessRunner

logger = logging.getLogger(__name__)


class ArtifactFetcher:
    """Fetches a release archive into ``crx_dir`` and unpacks it.

    Args:
        client: HTTP client used for the download
        runner: Process runner used for the extraction tool
        crx_dir: Directory holding archives and unpacked releases
        config: Extraction tool settings
    """

    def __init__(
        self,
        client: AsyncApiClient,
        runner: ProcessRunner,
        crx_dir: Path,
        config: ExtractorConfig | None = None,
    ) -> None:
        self.client = client
        self.runner = runner
        self.crx_dir = crx_dir
        self.config = config or ExtractorConfig()

    async def fetch_and_unpack(self, name: str, version: str, url: str) -> UnpackedRelease:
        """Download ``url`` and extract it to ``<crx_dir>/<name>-<version>``.

        The downloaded archive is deleted once extraction succeeded.

        Raises:
            DownloadError: If the download failed
            ExtractionError: If the extraction tool failed
            ArtifactFilesystemError: If files or directories could not be written
        """
        stem = release_dirname(name, version)
        archive = self.crx_dir / f"{stem}.crx"
        release_dir = self.crx_dir / stem

        logger.info(f"downloading {name} {version} from {url}")
        try:
            size = await self.client.download(url, archive)
        except ApiError as e:
            raise DownloadError(f"couldn't download {url}: {e}") from e
        except OSError as e:
            raise ArtifactFilesystemError(f"couldn't write {archive}: {e}") from e
        logger.debug(f"downloaded {size} bytes to {archive}")

        try:
            await asyncio.to_thread(release_dir.mkdir, parents=True, exist_ok=True)
        except OSError as e:
            raise ArtifactFilesystemError(f"couldn't create {release_dir}: {e}") from e

        await self._extract(archive, release_dir)

        try:
            await asyncio.to_thread(archive.unlink)
        except OSError as e:
            raise ArtifactFilesystemError(f"couldn't delete {archive}: {e}") from e

        return UnpackedRelease(name=name, version=version, path=release_dir)

    async def _extract(self, archive: Path, release_dir: Path) -> None:
        args = [self.config.command, "-u", f"../{archive.name}"]
        try:
            outcome = await self.runner.run(args, cwd=release_dir)
        except ProcessSpawnError as e:
            raise ExtractionError(str(e)) from e

        if outcome.stdout.strip():
            logger.debug(outcome.stdout.rstrip())
        if outcome.returncode not in self.config.success_exit_codes:
            raise ExtractionError(
                f"{self.config.command} exited with status {outcome.returncode}: "
                f"{outcome.stderr.strip()}",
                returncode=outcome.returncode,
            )
