"""Resolution result model."""

from pydantic import BaseModel, ConfigDict, Field


class ResolvedVersion(BaseModel):
    """Currently published version of a package and where to download it."""

    version: str = Field(min_length=1, description="Opaque version string, compared verbatim")
    artifact_url: str = Field(min_length=1, description="Absolute artifact download URL")

    model_config = ConfigDict(frozen=True, extra="forbid")
