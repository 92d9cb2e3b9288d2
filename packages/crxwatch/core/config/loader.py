"""Configuration loading utilities with JSON and YAML support."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

import yaml

from crxwatch.core.config.catalog import builtin_packages
from crxwatch.core.config.models import LoggingConfig, PackageDescriptor, WatcherConfig

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "CRXWATCH_LOG_LEVEL"


def detect_format(file_path: Path | str) -> str:
    """Detect config file format from extension.

    Raises:
        ValueError: If format cannot be determined

    Example:
        >>> detect_format("config.json")
        'json'
        >>> detect_format("config.yml")
        'yaml'
    """
    suffix = Path(file_path).suffix.lower()

    if suffix == ".json":
        return "json"
    elif suffix in [".yaml", ".yml"]:
        return "yaml"
    else:
        raise ValueError(f"Unsupported config format: {suffix}")


def load_config(path: str | Path) -> dict[str, Any]:
    """Load and return raw configuration dictionary.

    Supports both JSON and YAML formats, auto-detected from the extension.

    Raises:
        FileNotFoundError: If config file does not exist
        ValueError: If format is not supported or file content is invalid
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file does not exist: {path}")

    fmt = detect_format(path)

    if fmt == "json":
        try:
            content = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e
    else:
        try:
            with path.open("r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e
        # safe_load returns None for empty files
        if content is None:
            content = {}

    if not isinstance(content, dict):
        raise ValueError(f"Config root in {path} must be a mapping")
    return content


def load_watcher_config(path: str | Path | None = None) -> WatcherConfig:
    """Load and validate the watcher configuration.

    Missing files yield an all-defaults config. ``CRXWATCH_LOG_LEVEL``
    overrides the configured log level when set.

    Raises:
        ValueError: If the file content is invalid
        ValidationError: If config is invalid
    """
    config = WatcherConfig.load_or_default(path)

    env_level = os.getenv(LOG_LEVEL_ENV)
    if env_level:
        logger.debug(f"Loaded {LOG_LEVEL_ENV} from environment")
        # validated, so a bad level is a config error rather than a logging crash
        logging_config = LoggingConfig.model_validate(
            {**config.logging.model_dump(), "level": env_level.upper()}
        )
        config = config.model_copy(update={"logging": logging_config})

    return config


def resolve_packages(config: WatcherConfig) -> list[PackageDescriptor]:
    """Build the list of packages to check for a run.

    Extra packages are appended after the builtin catalog. An extra package
    whose name collides with a builtin one replaces it in place.
    """
    packages: dict[str, PackageDescriptor] = {}
    if config.use_builtin_packages:
        for package in builtin_packages():
            packages[package.name] = package

    for package in config.extra_packages:
        if package.name in packages:
            logger.info(f"extra package {package} replaces builtin package")
        else:
            logger.info(f"adding extra package {package}")
        packages[package.name] = package

    return list(packages.values())
