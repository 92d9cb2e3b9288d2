"""Exception hierarchy for the watch pipeline.

Every failure a package pipeline can report derives from ``WatcherError`` so
stages can capture them uniformly. Transport-level HTTP failures
(``crxwatch.core.api.http.ApiError``) are wrapped into the stage errors below.
"""

from __future__ import annotations


class WatcherError(Exception):
    """Base exception for all watch pipeline errors."""


# ---------------------------------------------------------------------------
# Metadata resolution
# ---------------------------------------------------------------------------


class ResolveError(WatcherError):
    """Could not determine the published version of a package."""

    def __init__(self, message: str, *, package_id: str | None = None) -> None:
        self.package_id = package_id
        super().__init__(message)


class MetadataFetchError(ResolveError):
    """Update metadata endpoint could not be reached or returned an error status."""


class MetadataParseError(ResolveError):
    """Update metadata body was not well-formed XML/JSON."""


class MissingVersionError(ResolveError):
    """Update manifest had no version for the package."""


class MissingCodebaseError(ResolveError):
    """Update manifest had a version but no codebase URL for the package."""


class UnexpectedPayloadError(ResolveError):
    """Web-store payload did not carry a version string at the expected path."""


# ---------------------------------------------------------------------------
# Artifact download and extraction
# ---------------------------------------------------------------------------


class ArtifactError(WatcherError):
    """Release artifact could not be downloaded or unpacked."""


class DownloadError(ArtifactError):
    """Artifact download failed."""


class ExtractionError(ArtifactError):
    """Extraction tool could not be spawned or exited unsuccessfully."""

    def __init__(self, message: str, *, returncode: int | None = None) -> None:
        self.returncode = returncode
        super().__init__(message)


class ArtifactFilesystemError(ArtifactError):
    """Writing, creating, or deleting artifact files failed."""


# ---------------------------------------------------------------------------
# Formatting and diffing
# ---------------------------------------------------------------------------


class FormatError(WatcherError):
    """A formatter batch failed. Non-fatal: logged, never propagated."""


class DiffError(WatcherError):
    """Diff between two releases could not be produced."""


class DiffToolInvocationError(DiffError):
    """Diff tool could not be spawned."""


class DiffToolStderrError(DiffError):
    """Diff tool wrote to standard error."""

    def __init__(self, message: str, *, stderr: str) -> None:
        self.stderr = stderr
        super().__init__(message)


# ---------------------------------------------------------------------------
# External processes
# ---------------------------------------------------------------------------


class ProcessSpawnError(WatcherError):
    """External process could not be started."""

    def __init__(self, program: str, cause: BaseException | None = None) -> None:
        self.program = program
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"couldn't spawn {program}{detail}")
