"""Command-line interface for crxwatch."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console

from crxwatch.core.config.loader import load_watcher_config
from crxwatch.core.config.models import WatcherConfig
from crxwatch.core.io import RealFileSystem, absolute_path
from crxwatch.core.ledger import LedgerFormatError
from crxwatch.core.notify.sinks import ConsoleSink, DiffArchiveSink
from crxwatch.core.utils.logging import configure_logging
from crxwatch.core.watch.run import run_check

console = Console()
logger = logging.getLogger(__name__)

EXAMPLE_CONFIG = """\
# crxwatch configuration
# every setting is optional; the values shown are the defaults

# check the builtin extension list
#use_builtin_packages: true

# force diffs on (true) or off (false) for every extension.
# leave unset to use each extension's diff_enabled setting.
# if you would like to use a custom prettier config, create .prettierrc.json in
# the work directory. crxwatch will use it instead of the builtin config.
#force_diff_override: null

# directory holding crx/, diff/ and versions.yaml
#work_dir: .

# extra extensions to check
#extra_packages:
#  - name: example          # alphanumerics, '_' and '-' only. used for directory and file
#                           # names and as the versions.yaml key. do not change it later:
#                           # doing so resets the extension's previously checked version.
#    display_name: Example  # shown in logs and reports
#    package_id: abcdefghijklmnopabcdefghijklmnop  # chrome extension id
#    manifest_url: https://example.com/updates.xml  # optional. without it the web store is queried
#    diff_enabled: true     # generate a diff on update

#formatter:
#  command: prettier
#  worker_count: 5
#  config_path: .prettierrc.json

#extractor:
#  command: unzip
#  success_exit_codes: [0, 1]

#diff:
#  command: diff
#  context_lines: 10

#http:
#  timeout_s: 30
#  connect_timeout_s: 10

#logging:
#  level: INFO
#  structured: false
#  filename: null
"""


async def check_async(config: WatcherConfig) -> int:
    """Run one check cycle and print the results.

    Returns:
        Exit code (0 when no extension errored, 1 otherwise)
    """
    fs = RealFileSystem()
    sinks = [
        DiffArchiveSink(fs, absolute_path(config.diff_dir)),
        ConsoleSink(console),
    ]
    try:
        report = await run_check(config, fs=fs, sinks=sinks)
    except (LedgerFormatError, OSError) as e:
        console.print(f"[red]ERROR: {e}[/red]")
        return 1

    console.print(
        f"[bold]{len(report.outcomes)} checked, {len(report.updated)} updated, "
        f"{len(report.errors)} failed[/bold] in {report.duration_ms / 1000:.1f}s"
    )
    return report.exit_code


def apply_overrides(config: WatcherConfig, args: argparse.Namespace) -> WatcherConfig:
    """Apply command-line overrides on top of the loaded config."""
    update: dict[str, object] = {}
    if args.work_dir is not None:
        update["work_dir"] = Path(args.work_dir)
    if args.force_diff is not None:
        update["force_diff_override"] = args.force_diff
    if args.log_level is not None:
        update["logging"] = config.logging.model_copy(update={"level": args.log_level.upper()})
    return config.model_copy(update=update) if update else config


def run_check_command(args: argparse.Namespace) -> int:
    """Load configuration and run a check cycle."""
    try:
        config = apply_overrides(load_watcher_config(args.config), args)
    except (ValueError, ValidationError) as e:
        console.print(f"[red]ERROR: Could not load config: {e}[/red]")
        return 1

    configure_logging(
        level=config.logging.level,
        filename=config.logging.filename,
        structured=config.logging.structured,
    )
    return asyncio.run(check_async(config))


def run_init_command(args: argparse.Namespace) -> int:
    """Write the example config file unless it exists."""
    path = Path(args.config)
    if path.exists():
        console.print(f"[yellow]{path} already exists, not overwriting[/yellow]")
        return 1

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(EXAMPLE_CONFIG, encoding="utf-8")
    console.print(f"[green]✅ Wrote example config to[/green] {path}")
    return 0


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for CLI."""
    p = argparse.ArgumentParser(
        prog="crxwatch",
        description="crxwatch - watch browser extensions for new releases and diff them",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    check = sub.add_parser("check", help="Check every extension once")
    check.add_argument(
        "--config",
        default=str(WatcherConfig.default_path()),
        help="Path to config YAML/JSON (default: config.yaml)",
    )
    check.add_argument("--work-dir", default=None, help="Override work_dir from the config")
    diff_group = check.add_mutually_exclusive_group()
    diff_group.add_argument(
        "--force-diff",
        dest="force_diff",
        action="store_const",
        const=True,
        default=None,
        help="Generate diffs for every extension",
    )
    diff_group.add_argument(
        "--no-diff",
        dest="force_diff",
        action="store_const",
        const=False,
        help="Generate no diffs",
    )
    check.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Override the configured log level",
    )

    init = sub.add_parser("init", help="Write an example config file")
    init.add_argument(
        "--config",
        default=str(WatcherConfig.default_path()),
        help="Path of the config file to create (default: config.yaml)",
    )

    return p


def main(argv: list[str] | None = None) -> None:
    """Main entry point for CLI."""
    p = build_arg_parser()
    args = p.parse_args(argv)

    if args.cmd == "check":
        sys.exit(run_check_command(args))
    elif args.cmd == "init":
        sys.exit(run_init_command(args))


if __name__ == "__main__":
    main()
