"""Configuration management for crxwatch."""

from crxwatch.core.config.catalog import builtin_packages
from crxwatch.core.config.loader import (
    load_config,
    load_watcher_config,
    resolve_packages,
)
from crxwatch.core.config.models import (
    DiffToolConfig,
    ExtractorConfig,
    FormatterConfig,
    HttpSettings,
    LoggingConfig,
    PackageDescriptor,
    WatcherConfig,
)

__all__ = [
    # Loaders
    "load_config",
    "load_watcher_config",
    "resolve_packages",
    "builtin_packages",
    # Models
    "WatcherConfig",
    "PackageDescriptor",
    "FormatterConfig",
    "ExtractorConfig",
    "DiffToolConfig",
    "HttpSettings",
    "LoggingConfig",
]
