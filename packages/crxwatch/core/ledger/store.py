"""Persistence of the version ledger as a YAML document."""

from __future__ import annotations

import logging
from collections.abc import Mapping

import yaml

from crxwatch.core.io import AbsolutePath, FileSystem

logger = logging.getLogger(__name__)

VERSIONS_HEADER = """\
# versions file for crxwatch
# this file tracks the previously downloaded extension versions. you should not modify it
# to reset the previously downloaded extension versions, delete this file

"""


class LedgerFormatError(ValueError):
    """Persisted ledger exists but is not a mapping of names to version strings."""


class LedgerStore:
    """Loads and saves the ledger contents through a :class:`FileSystem`.

    Args:
        fs: Filesystem implementation
        path: Ledger file location
    """

    def __init__(self, fs: FileSystem, path: AbsolutePath) -> None:
        self.fs = fs
        self.path = path

    async def load(self) -> dict[str, str]:
        """Read the persisted ledger.

        A missing file is not an error: the ledger starts empty.

        Raises:
            LedgerFormatError: If the file is not a valid YAML mapping
        """
        if not await self.fs.exists(self.path):
            logger.warning(f"{self.path} not found, versions will be empty")
            return {}

        text = await self.fs.read_text(self.path)
        try:
            raw = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise LedgerFormatError(f"Invalid YAML in {self.path}: {e}") from e

        if raw is None:
            return {}
        if not isinstance(raw, dict):
            raise LedgerFormatError(f"{self.path} must contain a mapping")

        versions = {str(name): str(version) for name, version in raw.items() if version is not None}
        logger.debug(f"loaded {len(versions)} versions from {self.path}")
        return versions

    async def save(self, versions: Mapping[str, str]) -> None:
        """Atomically write the ledger, sorted by package name."""
        body = yaml.safe_dump(
            {name: versions[name] for name in sorted(versions)},
            default_flow_style=False,
            allow_unicode=True,
        )
        await self.fs.write_text(self.path, VERSIONS_HEADER + body)
        logger.debug(f"saved {len(versions)} versions to {self.path}")
