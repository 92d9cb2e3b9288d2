"""Tests for report sinks."""

from __future__ import annotations

import io

import pytest
from rich.console import Console

from crxwatch.core.io import absolute_path
from crxwatch.core.notify import ConsoleSink, DiffArchiveSink, diff_filename
from crxwatch.core.watch.models import DiffResult, PackageOutcome

DIFF_DIR = absolute_path("/work/diff")


@pytest.fixture
def updated(make_package):
    return PackageOutcome.updated(
        make_package("blocksi"),
        DiffResult(prev_version="3.2.0", cur_version="3.2.1", diff_text="+new\n"),
    )


def test_diff_filename(updated, make_package):
    assert diff_filename(updated) == "blocksi-3.2.0-3.2.1.diff"

    first = PackageOutcome.updated(make_package("iboss"), DiffResult(cur_version="1.0"))
    assert diff_filename(first) == "iboss-None-1.0.diff"


class TestDiffArchiveSink:
    """Tests for DiffArchiveSink."""

    async def test_writes_generated_diffs(self, fake_fs, updated, make_package):
        """Test only outcomes carrying diff text are archived."""
        outcomes = [
            updated,
            PackageOutcome.updated(make_package("iboss"), DiffResult(cur_version="1.0")),
            PackageOutcome.no_change(make_package("lightspeed")),
        ]

        await DiffArchiveSink(fake_fs, DIFF_DIR).deliver(outcomes, "message")

        assert await fake_fs.read_text(absolute_path("/work/diff/blocksi-3.2.0-3.2.1.diff")) == "+new\n"
        assert not await fake_fs.exists(absolute_path("/work/diff/iboss-None-1.0.diff"))

    async def test_empty_diff_still_written(self, fake_fs, make_package):
        outcome = PackageOutcome.updated(
            make_package("blocksi"),
            DiffResult(prev_version="1", cur_version="2", diff_text=""),
        )

        await DiffArchiveSink(fake_fs, DIFF_DIR).deliver([outcome], "")

        assert await fake_fs.read_text(absolute_path("/work/diff/blocksi-1-2.diff")) == ""

    async def test_write_failure_logged(self, fake_fs, updated, caplog):
        """Test a failing write is logged instead of raised."""

        async def broken_write(path, content, encoding="utf-8"):
            raise PermissionError("read-only filesystem")

        fake_fs.write_text = broken_write

        with caplog.at_level("ERROR"):
            await DiffArchiveSink(fake_fs, DIFF_DIR).deliver([updated], "")

        assert "failed to write diff file blocksi-3.2.0-3.2.1.diff" in caplog.text


class TestConsoleSink:
    async def test_table_and_message(self, updated, make_package):
        buffer = io.StringIO()
        console = Console(file=buffer, width=120, color_system=None)
        failed = PackageOutcome.failed(
            make_package("hapara"), stage="resolve", error="boom", error_type="MetadataFetchError"
        )

        await ConsoleSink(console).deliver([updated, failed], "**summary**")

        text = buffer.getvalue()
        assert "3.2.0 -> 3.2.1" in text
        assert "resolve: boom" in text
        assert "**summary**" in text

    async def test_nothing_to_report(self, make_package):
        buffer = io.StringIO()
        console = Console(file=buffer, width=120, color_system=None)

        await ConsoleSink(console).deliver([PackageOutcome.no_change(make_package())], "")

        assert "no updates or errors" in buffer.getvalue()

    async def test_brackets_printed_literally(self, make_package):
        """Test bracketed names and tool errors are not parsed as markup."""
        buffer = io.StringIO()
        console = Console(file=buffer, width=200, color_system=None)
        failed = PackageOutcome.failed(
            make_package("xtool", display_name="X [beta]"),
            stage="fetch",
            error="unzip: cannot open [/tmp/crx/x-1.crx]",
        )

        await ConsoleSink(console).deliver([failed], "x: fetch failed")

        text = buffer.getvalue()
        assert "X [beta]" in text
        assert "fetch: unzip: cannot open [/tmp/crx/x-1.crx]" in text
