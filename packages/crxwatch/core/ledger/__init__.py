"""Version ledger: last-seen version per package, shared across pipelines."""

from crxwatch.core.ledger.ledger import NEVER_SEEN, VersionLedger
from crxwatch.core.ledger.store import LedgerFormatError, LedgerStore

__all__ = [
    "NEVER_SEEN",
    "VersionLedger",
    "LedgerStore",
    "LedgerFormatError",
]
