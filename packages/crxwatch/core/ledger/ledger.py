"""Shared last-seen-version ledger.

One ``VersionLedger`` instance is shared by every package pipeline of a run.
All access goes through a single ``asyncio.Lock`` so a reconcile is one
indivisible take-then-replace step.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Final

logger = logging.getLogger(__name__)

NEVER_SEEN: Final = None
"""Sentinel returned by :meth:`VersionLedger.reconcile` for unseen packages."""


class VersionLedger:
    """Concurrency-safe mapping from package name to last observed version.

    Example:
        >>> ledger = VersionLedger({"classroom": "1.0"})
        >>> await ledger.reconcile("classroom", "1.1")
        '1.0'
        >>> await ledger.reconcile("blocksi", "2.0") is NEVER_SEEN
        True
    """

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._versions: dict[str, str] = dict(initial or {})
        self._lock = asyncio.Lock()

    async def reconcile(self, name: str, new_version: str) -> str | None:
        """Record ``new_version`` for ``name`` and return the version it replaced.

        The previous entry is removed and the new one inserted under the lock,
        so the ledger reflects the version just observed even if a later stage
        of the pipeline fails.

        Args:
            name: Package name (ledger key)
            new_version: Version resolved during this run

        Returns:
            The previously recorded version, or ``NEVER_SEEN`` when the
            package has no (or an empty) recorded version
        """
        async with self._lock:
            previous = self._versions.pop(name, None)
            self._versions[name] = new_version

        if not previous:
            return NEVER_SEEN
        return previous

    def get(self, name: str) -> str | None:
        """Return the recorded version for ``name`` without modifying the ledger."""
        return self._versions.get(name) or NEVER_SEEN

    async def snapshot(self) -> dict[str, str]:
        """Return a copy of the ledger contents, taken under the lock."""
        async with self._lock:
            return dict(self._versions)

    def __len__(self) -> int:
        return len(self._versions)

    def __contains__(self, name: object) -> bool:
        return name in self._versions
