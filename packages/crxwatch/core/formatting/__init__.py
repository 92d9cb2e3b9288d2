"""Formatter scheduling: balanced batches of files run through prettier."""

from crxwatch.core.formatting.batching import collect_files, partition_batches
from crxwatch.core.formatting.models import BatchOutcome, FileEntry, FormatBatch
from crxwatch.core.formatting.prettierrc import (
    DEFAULT_PRETTIERRC,
    provision_formatter_config,
    remove_formatter_config,
)
from crxwatch.core.formatting.scheduler import FormatScheduler

__all__ = [
    "FormatScheduler",
    "FileEntry",
    "FormatBatch",
    "BatchOutcome",
    "collect_files",
    "partition_batches",
    "DEFAULT_PRETTIERRC",
    "provision_formatter_config",
    "remove_formatter_config",
]
