"""Run reports and their delivery."""

from crxwatch.core.notify.report import build_update_message
from crxwatch.core.notify.sinks import (
    ConsoleSink,
    DiffArchiveSink,
    NotificationSink,
    diff_filename,
)

__all__ = [
    "build_update_message",
    "NotificationSink",
    "DiffArchiveSink",
    "ConsoleSink",
    "diff_filename",
]
