"""Root logger setup for the crxwatch CLI.

Plain text by default; ``structured=True`` switches to one JSON object per
line for cron runs whose output is shipped somewhere else.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

DEFAULT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

# Logged by every request; only their errors matter for a check run.
QUIET_LOGGERS = ("httpx", "httpcore", "asyncio")

_RESERVED = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {
    "message",
    "asctime",
    "taskName",
}


class StructuredJSONFormatter(logging.Formatter):
    """Render a record as ``{"level", "message", "timestamp", "context"}``.

    ``context`` carries the logger name, call site, exception details and
    any ``extra={...}`` fields, e.g. the stage of a failing package.
    """

    def format(self, record: logging.LogRecord) -> str:
        context: dict[str, Any] = {
            "logger_name": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            exc_type, exc, _ = record.exc_info
            context["error_type"] = exc_type.__name__ if exc_type else None
            context["error_message"] = str(exc) if exc else None
            context["stack_trace"] = record.exc_text or self.formatException(record.exc_info)

        context.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _RESERVED and not key.startswith("_")
        )

        return json.dumps(
            {
                "level": record.levelname,
                "message": record.getMessage(),
                "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
                "context": context,
            },
            default=str,
        )


def configure_logging(
    level: str = "INFO",
    format_string: str | None = None,
    filename: str | None = None,
    structured: bool = False,
) -> None:
    """Replace the root logger's handlers.

    Safe to call again (e.g. after ``--log-level`` is applied).

    Args:
        level: Level name, case-insensitive
        format_string: Text format; ignored when ``structured``
        filename: Append to this file instead of stdout
        structured: Emit JSON lines

    Example:
        >>> configure_logging(level="DEBUG", structured=True, filename="crxwatch.jsonl")
    """
    handler: logging.Handler = (
        logging.FileHandler(filename) if filename else logging.StreamHandler(sys.stdout)
    )
    handler.setFormatter(
        StructuredJSONFormatter() if structured else logging.Formatter(format_string or DEFAULT_FORMAT)
    )

    logging.basicConfig(level=level.upper(), handlers=[handler], force=True)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.ERROR)
