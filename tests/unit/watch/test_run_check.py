"""End-to-end tests for a full check cycle."""

from __future__ import annotations

from pathlib import Path

import pytest

from crxwatch.core.io import FakeFileSystem, absolute_path
from crxwatch.core.ledger import LedgerFormatError
from crxwatch.core.notify.report import REPORT_TITLE
from crxwatch.core.process import FakeProcessRunner
from crxwatch.core.watch.models import OutcomeStatus
from crxwatch.core.watch.run import run_check

DIFF = "--- ./a-1.0/background.js\n+++ ./a-1.1/background.js\n@@ -1 +1 @@\n-1\n+2\n"


class RecordingSink:
    def __init__(self) -> None:
        self.deliveries: list[tuple[list, str]] = []

    async def deliver(self, outcomes, message):
        self.deliveries.append((list(outcomes), message))


class TestRunCheck:
    """Tests for run_check against the real filesystem under tmp_path."""

    async def test_full_cycle(self, watcher_config, make_package, fake_store, make_tool_handler):
        """Test versions are persisted and diffs archived."""
        tmp = watcher_config.work_dir
        (tmp / "versions.yaml").write_text("a: '1.0'\nb: '5.0'\n")
        fake_store.versions.update({"a-id": "1.1", "b-id": "5.0", "c-id": "0.1"})
        runner = FakeProcessRunner(make_tool_handler(diff_text=DIFF))

        report = await run_check(
            watcher_config,
            packages=[make_package("a"), make_package("b"), make_package("c")],
            runner=runner,
            transport=fake_store.transport,
        )

        assert [o.status for o in report.outcomes] == [
            OutcomeStatus.UPDATED,
            OutcomeStatus.NO_CHANGE,
            OutcomeStatus.UPDATED,
        ]
        assert report.versions == {"a": "1.1", "b": "5.0", "c": "0.1"}
        assert report.exit_code == 0
        assert report.message.startswith(REPORT_TITLE)

        saved = (tmp / "versions.yaml").read_text()
        assert saved.startswith("# versions file for crxwatch")
        assert "a: '1.1'" in saved

        assert (tmp / "diff" / "a-1.0-1.1.diff").read_text() == DIFF
        assert not (tmp / "diff" / "c-None-0.1.diff").exists()

    async def test_formatter_config_removed(self, watcher_config, make_package, fake_store, make_tool_handler):
        """Test a provisioned formatter config exists only during the run."""
        rc_path = watcher_config.formatter_config_path
        seen: list[bool] = []
        tools = make_tool_handler()

        def handler(args, cwd):
            if args[0] == "prettier":
                seen.append(Path(args[2]) == rc_path.resolve() and rc_path.exists())
            return tools(args, cwd)

        fake_store.versions["a-id"] = "1.0"
        await run_check(
            watcher_config,
            packages=[make_package("a")],
            runner=FakeProcessRunner(handler),
            transport=fake_store.transport,
        )

        assert seen and all(seen)
        assert not rc_path.exists()

    async def test_user_formatter_config_kept(self, watcher_config, make_package, fake_store):
        rc_path = watcher_config.formatter_config_path
        rc_path.write_text('{"tabWidth": 4}')

        await run_check(watcher_config, packages=[], transport=fake_store.transport)

        assert rc_path.read_text() == '{"tabWidth": 4}'

    async def test_errors_reported(self, watcher_config, make_package, fake_store, make_tool_handler):
        """Test failing packages set the exit code and appear in the message."""
        fake_store.broken_metadata.add("a-id")
        sink = RecordingSink()

        report = await run_check(
            watcher_config,
            packages=[make_package("a")],
            runner=FakeProcessRunner(make_tool_handler()),
            transport=fake_store.transport,
            sinks=[sink],
        )

        assert report.exit_code == 1
        assert report.errors[0].failed_stage == "resolve"
        assert "The following errors occurred:" in report.message
        assert sink.deliveries == [(report.outcomes, report.message)]

    async def test_nothing_to_report(self, watcher_config, make_package, fake_store, fake_runner):
        (watcher_config.work_dir / "versions.yaml").write_text("a: '1.0'\n")
        fake_store.versions["a-id"] = "1.0"
        sink = RecordingSink()

        report = await run_check(
            watcher_config,
            packages=[make_package("a")],
            runner=fake_runner,
            transport=fake_store.transport,
            sinks=[sink],
        )

        assert report.message == ""
        assert sink.deliveries[0][1] == ""
        assert fake_runner.calls == []

    async def test_corrupt_ledger_aborts(self, watcher_config, make_package, fake_store):
        (watcher_config.work_dir / "versions.yaml").write_text("- just\n- a list\n")

        with pytest.raises(LedgerFormatError):
            await run_check(
                watcher_config, packages=[make_package("a")], transport=fake_store.transport
            )
        assert fake_store.requests == []


class TestRunCheckFakeFileSystem:
    """Tests for run_check with the in-memory filesystem."""

    async def test_ledger_round_trip(self, watcher_config, make_package, fake_store, fake_runner):
        """Test the ledger is read from and written back to the filesystem."""
        fs = FakeFileSystem()
        versions_path = absolute_path(watcher_config.versions_path)
        await fs.write_text(versions_path, "a: '1.0'\n")
        fake_store.versions["a-id"] = "1.0"

        report = await run_check(
            watcher_config,
            packages=[make_package("a")],
            fs=fs,
            runner=fake_runner,
            transport=fake_store.transport,
        )

        assert report.outcomes[0].status is OutcomeStatus.NO_CHANGE
        assert "a: '1.0'" in await fs.read_text(versions_path)
        assert await fs.is_dir(absolute_path(watcher_config.diff_dir))
        assert not await fs.exists(absolute_path(watcher_config.formatter_config_path))
