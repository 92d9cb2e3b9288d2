"""Tests for logging configuration."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import pytest

from crxwatch.core.utils.logging import StructuredJSONFormatter, configure_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Put the root logger back as pytest configured it."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestConfigureLogging:
    def test_level_and_noisy_loggers(self):
        configure_logging(level="debug")

        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.ERROR

    def test_plain_file_output(self, tmp_path: Path):
        log_file = tmp_path / "crxwatch.log"
        configure_logging(
            level="INFO", filename=str(log_file), format_string="%(levelname)s %(message)s"
        )

        logging.getLogger("crxwatch.test").info("checking 15 extensions")
        logging.getLogger().handlers[0].flush()

        assert log_file.read_text() == "INFO checking 15 extensions\n"

    def test_structured_file_output(self, tmp_path: Path):
        """Test structured mode writes one JSON object per record."""
        log_file = tmp_path / "crxwatch.jsonl"
        configure_logging(level="INFO", filename=str(log_file), structured=True)

        logging.getLogger("crxwatch.test").warning(
            "blocksi: fetch failed", extra={"stage": "fetch"}
        )
        logging.getLogger().handlers[0].flush()

        entry = json.loads(log_file.read_text().splitlines()[0])
        assert entry["level"] == "WARNING"
        assert entry["message"] == "blocksi: fetch failed"
        assert entry["context"]["logger_name"] == "crxwatch.test"
        assert entry["context"]["stage"] == "fetch"


class TestStructuredJSONFormatter:
    def test_exception_details(self):
        """Test exception info is serialised into the context."""
        try:
            raise RuntimeError("unzip vanished")
        except RuntimeError:
            record = logging.LogRecord(
                "crxwatch.test", logging.ERROR, __file__, 1, "failed", (), sys.exc_info()
            )

        entry = json.loads(StructuredJSONFormatter().format(record))

        assert entry["context"]["error_type"] == "RuntimeError"
        assert entry["context"]["error_message"] == "unzip vanished"
        assert "Traceback" in entry["context"]["stack_trace"]
