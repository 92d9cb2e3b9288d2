"""Watcher session: shared services for every package pipeline of a run.

The session owns the HTTP client and process runner and builds the
resolver, fetcher, formatter scheduler and diff engine from the watcher
configuration. Services are created lazily on first access.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any
from uuid import uuid4

import httpx

from crxwatch.core.api.http import AsyncApiClient, HttpClientConfig
from crxwatch.core.artifacts import ArtifactFetcher
from crxwatch.core.config.models import WatcherConfig
from crxwatch.core.diffing import DiffEngine
from crxwatch.core.formatting import FormatScheduler
from crxwatch.core.io import AbsolutePath, FileSystem, RealFileSystem, absolute_path
from crxwatch.core.process import AsyncProcessRunner, ProcessRunner
from crxwatch.core.resolvers import MetadataResolver

logger = logging.getLogger(__name__)


class WatcherSession:
    """Session coordinator for a check run.

    Args:
        config: WatcherConfig instance, path, or None (uses default path)
        fs: Filesystem implementation (default: RealFileSystem)
        runner: Process runner (default: AsyncProcessRunner)
        transport: Optional HTTPX transport (useful for testing)
        session_id: Optional session ID. If None, generates a new UUID.

    Example:
        >>> async with WatcherSession(config) as session:
        ...     resolved = await session.resolver.resolve(descriptor)
    """

    def __init__(
        self,
        config: WatcherConfig | Path | str | None = None,
        *,
        fs: FileSystem | None = None,
        runner: ProcessRunner | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        session_id: str | None = None,
    ) -> None:
        self.config: WatcherConfig = self._resolve_config(config)
        self.fs: FileSystem = fs or RealFileSystem()
        self.runner: ProcessRunner = runner or AsyncProcessRunner()
        self.session_id = session_id or str(uuid4())
        self._transport = transport

        self.work_dir: AbsolutePath = absolute_path(self.config.work_dir)
        self.crx_dir: AbsolutePath = absolute_path(self.config.crx_dir)
        self.diff_dir: AbsolutePath = absolute_path(self.config.diff_dir)

        logger.debug(f"Session {self.session_id} initialized: work_dir={self.work_dir}")

    @staticmethod
    def _resolve_config(value: Any) -> WatcherConfig:
        """Resolve config from value, path, or default.

        Raises:
            TypeError: If value is wrong type
            ValidationError: If config is invalid
        """
        if value is None:
            return WatcherConfig.load_or_default()
        elif isinstance(value, (Path, str)):
            return WatcherConfig.load_or_default(Path(value))
        elif isinstance(value, WatcherConfig):
            return value
        else:
            raise TypeError(
                f"Expected WatcherConfig, Path, str, or None; got {type(value).__name__}"
            )

    @property
    def versions_path(self) -> AbsolutePath:
        return absolute_path(self.config.versions_path)

    @property
    def formatter_config_path(self) -> AbsolutePath:
        return absolute_path(self.config.formatter_config_path)

    @property
    def http_client(self) -> AsyncApiClient:
        """HTTP client shared by every pipeline (lazy-loaded)."""
        if not hasattr(self, "_http_client"):
            http = self.config.http
            client_config = HttpClientConfig(
                timeout=httpx.Timeout(http.timeout_s, connect=http.connect_timeout_s),
                user_agent=http.user_agent,
            )
            self._http_client = AsyncApiClient(client_config, transport=self._transport)
        return self._http_client

    @property
    def resolver(self) -> MetadataResolver:
        """Metadata resolver (lazy-loaded)."""
        if not hasattr(self, "_resolver"):
            self._resolver = MetadataResolver(self.http_client)
        return self._resolver

    @property
    def fetcher(self) -> ArtifactFetcher:
        """Artifact fetcher (lazy-loaded)."""
        if not hasattr(self, "_fetcher"):
            self._fetcher = ArtifactFetcher(
                self.http_client, self.runner, Path(self.crx_dir), self.config.extractor
            )
        return self._fetcher

    @property
    def scheduler(self) -> FormatScheduler:
        """Formatter scheduler (lazy-loaded)."""
        if not hasattr(self, "_scheduler"):
            self._scheduler = FormatScheduler(
                self.runner, self.config.formatter, Path(self.formatter_config_path)
            )
        return self._scheduler

    @property
    def diff_engine(self) -> DiffEngine:
        """Diff engine (lazy-loaded)."""
        if not hasattr(self, "_diff_engine"):
            self._diff_engine = DiffEngine(self.runner, Path(self.crx_dir), self.config.diff)
        return self._diff_engine

    async def aclose(self) -> None:
        """Release the HTTP client if it was created."""
        if hasattr(self, "_http_client"):
            await self._http_client.aclose()
            del self._http_client

    async def __aenter__(self) -> WatcherSession:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
