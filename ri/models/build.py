"""Build runner result model."""

from pydantic import BaseModel, Field


class BuildResult(BaseModel):
    """Outcome of one external build invocation."""

    argv: list[str] = Field(description="Command line that was executed")
    directory: str = Field(description="Working directory of the build")
    returncode: int
    output: str = Field(default="", description="Combined stdout and stderr")

    @property
    def ok(self) -> bool:
        return self.returncode == 0
