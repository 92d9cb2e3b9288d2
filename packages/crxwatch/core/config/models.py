"""Configuration models for crxwatch."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Self

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class PackageDescriptor(BaseModel):
    """A browser extension tracked for new releases.

    ``name`` is the ledger key and the prefix of every on-disk artifact for
    the package. Changing it resets the package's version history.

    Example:
        >>> PackageDescriptor(
        ...     name="goguardian-stable",
        ...     display_name="GoGuardian [Stable]",
        ...     package_id="haldlgldplgnggkjaafhelgiaglafanh",
        ...     manifest_url="https://ext.goguardian.com/stable.xml",
        ... )
    """

    name: str = Field(
        min_length=1,
        pattern=r"^[A-Za-z0-9_-]+$",
        description="Stable identifier (alphanumerics, '_' and '-')",
    )
    display_name: str = Field(description="Name shown in logs and reports")
    package_id: str = Field(min_length=1, description="Vendor-assigned extension ID")
    manifest_url: str | None = Field(
        default=None,
        description="XML update manifest URL; the web store is queried when absent",
    )
    diff_enabled: bool = Field(default=True, description="Generate a diff on update")

    model_config = ConfigDict(frozen=True, extra="forbid")

    def __str__(self) -> str:
        return f'"{self.display_name}" [{self.name}]'

    def effective_diff_enabled(self, override: bool | None) -> bool:
        """Return whether to diff this package after applying a global override."""
        return self.diff_enabled if override is None else override


class FormatterConfig(BaseModel):
    """External formatter (prettier) settings."""

    command: str = Field(default="prettier", description="Formatter executable")
    worker_count: int = Field(
        default=5, ge=1, le=32, description="Formatter processes per package"
    )
    config_path: Path = Field(
        default=Path(".prettierrc.json"),
        description="Formatter config file; a builtin one is provisioned when missing",
    )


class ExtractorConfig(BaseModel):
    """External archive extraction (unzip) settings."""

    command: str = Field(default="unzip", description="Extraction executable")
    success_exit_codes: list[int] = Field(
        default_factory=lambda: [0, 1],
        description="Exit codes treated as success (unzip exits 1 on CRX header warnings)",
    )


class DiffToolConfig(BaseModel):
    """External diff utility settings."""

    command: str = Field(default="diff", description="Diff executable")
    context_lines: int = Field(default=10, ge=0, description="Unified diff context lines")


class HttpSettings(BaseModel):
    """HTTP transport settings."""

    timeout_s: float = Field(default=30.0, gt=0)
    connect_timeout_s: float = Field(default=10.0, gt=0)
    user_agent: str = Field(default="crxwatch/0.1")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Root log level",
    )
    structured: bool = Field(default=False, description="Emit JSON log lines")
    filename: str | None = Field(default=None, description="Log file (stdout when unset)")


class ConfigBase(BaseModel):
    """Base class for file-backed configurations.

    Subclasses implement default_path() to specify their default location.
    """

    model_config = ConfigDict(extra="ignore")

    @classmethod
    def default_path(cls) -> Path:
        """Return the default config file path for this config type."""
        raise NotImplementedError(f"{cls.__name__} must implement default_path()")

    @classmethod
    def load_or_default(cls, path: Path | str | None = None) -> Self:
        """Load config from path, falling back to defaults when the file is absent.

        Raises:
            ValueError: If the file content is invalid
            ValidationError: If config is invalid
        """
        from crxwatch.core.config.loader import load_config

        if path is None:
            path = cls.default_path()
        if not Path(path).exists():
            logger.info(f"{path} not found, using default {cls.__name__}")
            return cls()
        return cls.model_validate(load_config(path))


class WatcherConfig(ConfigBase):
    """Top-level configuration for a check run.

    Example:
        >>> config = WatcherConfig.load_or_default("config.yaml")
        >>> config.crx_dir
        PosixPath('crx')
    """

    use_builtin_packages: bool = Field(
        default=True, description="Check the builtin extension catalog"
    )
    force_diff_override: bool | None = Field(
        default=None,
        description="True/False forces diffs on/off for every package; None defers to packages",
    )
    extra_packages: list[PackageDescriptor] = Field(default_factory=list)
    work_dir: Path = Field(default=Path("."), description="Root for crx/, diff/ and versions")

    formatter: FormatterConfig = Field(default_factory=FormatterConfig)
    extractor: ExtractorConfig = Field(default_factory=ExtractorConfig)
    diff: DiffToolConfig = Field(default_factory=DiffToolConfig)
    http: HttpSettings = Field(default_factory=HttpSettings)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def default_path(cls) -> Path:
        return Path("config.yaml")

    @property
    def crx_dir(self) -> Path:
        """Directory holding downloaded archives and unpacked releases."""
        return self.work_dir / "crx"

    @property
    def diff_dir(self) -> Path:
        """Directory diff files are archived to."""
        return self.work_dir / "diff"

    @property
    def versions_path(self) -> Path:
        """Persisted version ledger file."""
        return self.work_dir / "versions.yaml"

    @property
    def formatter_config_path(self) -> Path:
        """Formatter config file, relative paths anchored at ``work_dir``."""
        path = self.formatter.config_path
        return path if path.is_absolute() else self.work_dir / path
