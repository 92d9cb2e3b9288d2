"""Result model for external process invocations."""

from pydantic import BaseModel, ConfigDict, Field


class ExitOutcome(BaseModel):
    """Exit status and captured output of a finished process.

    Output is decoded as UTF-8 with replacement of invalid bytes.
    """

    returncode: int
    stdout: str = Field(default="")
    stderr: str = Field(default="")

    model_config = ConfigDict(frozen=True)

    @property
    def ok(self) -> bool:
        return self.returncode == 0
