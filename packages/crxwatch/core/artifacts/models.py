"""Unpacked release model."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict


class UnpackedRelease(BaseModel):
    """A release extracted to ``<crx_dir>/<name>-<version>``."""

    name: str
    version: str
    path: Path

    model_config = ConfigDict(frozen=True)


def release_dirname(name: str, version: str) -> str:
    """Directory (and archive stem) used for a release."""
    return f"{name}-{version}"
