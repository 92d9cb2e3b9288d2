"""Release artifact download and extraction."""

from crxwatch.core.artifacts.fetcher import ArtifactFetcher
from crxwatch.core.artifacts.models import UnpackedRelease, release_dirname

__all__ = ["ArtifactFetcher", "UnpackedRelease", "release_dirname"]
