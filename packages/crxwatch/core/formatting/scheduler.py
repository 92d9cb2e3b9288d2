"""Runs the external formatter over an unpacked release, one process per batch."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from crxwatch.core.config.models import FormatterConfig
from crxwatch.core.errors import FormatError, ProcessSpawnError
from crxwatch.core.formatting.batching import collect_files, partition_batches
from crxwatch.core.formatting.models import BatchOutcome, FormatBatch
from crxwatch.core.process import ProcessRunner

logger = logging.getLogger(__name__)


class FormatScheduler:
    """Normalises release files so diffs are not dominated by formatting noise.

    Formatting is best-effort: a failing batch is logged and reported in the
    returned outcomes but never raises.

    Args:
        runner: Process runner for the formatter
        config: Formatter settings
        config_path: Formatter config file passed with ``--config``
    """

    def __init__(self, runner: ProcessRunner, config: FormatterConfig, config_path: Path) -> None:
        self.runner = runner
        self.config = config
        self.config_path = config_path

    def build_args(self, batch: FormatBatch) -> list[str]:
        return [
            self.config.command,
            "--config",
            str(self.config_path),
            "--ignore-path=",
            "--write",
            *(str(entry.path) for entry in batch.files),
        ]

    async def normalize(
        self, release_dir: Path, worker_count: int | None = None
    ) -> list[BatchOutcome]:
        """Format every file under ``release_dir`` in concurrent batches.

        Args:
            release_dir: Unpacked release directory
            worker_count: Maximum concurrent formatter processes
                (defaults to ``config.worker_count``)

        Returns:
            One outcome per dispatched (non-empty) batch
        """
        workers = self.config.worker_count if worker_count is None else worker_count
        files = await collect_files(release_dir)
        batches = partition_batches(files, workers)
        logger.debug(
            f"formatting {len(files)} files in {release_dir} across {len(batches)} batches"
        )

        return list(
            await asyncio.gather(
                *(self._run_batch(index, batch) for index, batch in enumerate(batches))
            )
        )

    async def _run_batch(self, index: int, batch: FormatBatch) -> BatchOutcome:
        try:
            outcome = await self.runner.run(self.build_args(batch))
        except ProcessSpawnError as e:
            error = FormatError(str(e))
            logger.warning(f"formatter batch {index} failed: {error}")
            return BatchOutcome(
                batch_index=index,
                file_count=len(batch.files),
                total_size=batch.total_size,
                error=str(error),
            )

        if outcome.stdout.strip():
            logger.debug(outcome.stdout.rstrip())

        error_text: str | None = None
        if outcome.returncode != 0:
            error_text = (
                f"{self.config.command} exited with status {outcome.returncode}: "
                f"{outcome.stderr.strip()}"
            )
            logger.warning(f"formatter batch {index} failed: {error_text}")

        return BatchOutcome(
            batch_index=index,
            file_count=len(batch.files),
            total_size=batch.total_size,
            returncode=outcome.returncode,
            error=error_text,
        )
