"""Project identity and descriptor models.

A descriptor is either unresolved (identity only, as listed in a manifest's
dependency section) or resolved (loaded from a manifest on disk, with its
direct dependencies in declaration order).
"""

from __future__ import annotations

from typing import Iterator, Union

from pydantic import BaseModel, ConfigDict, Field

_PATH_SEPARATORS = ("/", "\\")


class ProjectIdentity(BaseModel):
    """Maven coordinates without a version: (groupId, artifactId)."""

    model_config = ConfigDict(frozen=True)

    group: str = Field(description="Maven groupId")
    artifact: str = Field(description="Maven artifactId")

    @classmethod
    def parse(cls, text: str) -> ProjectIdentity:
        """Parse ``group:artifact``."""
        group, sep, artifact = text.strip().partition(":")
        if not sep or not group or not artifact:
            raise ValueError(f"expected group:artifact, got {text!r}")
        return cls(group=group, artifact=artifact)

    @property
    def link_key(self) -> str:
        """Single path segment naming this project in the link registry."""
        key = f"{self.group}:{self.artifact}"
        for sep in _PATH_SEPARATORS:
            key = key.replace(sep, "_")
        return key

    def __str__(self) -> str:
        return self.link_key


class UnresolvedProject(BaseModel):
    """Identity only; the manifest has not been read yet."""

    model_config = ConfigDict(frozen=True)

    identity: ProjectIdentity

    @property
    def link_key(self) -> str:
        return self.identity.link_key


class ResolvedProject(BaseModel):
    """Project loaded from the manifest in ``directory``."""

    model_config = ConfigDict(frozen=True)

    identity: ProjectIdentity
    dependencies: tuple[ProjectIdentity, ...] = Field(
        default=(),
        description="Direct dependencies in declaration order",
    )
    directory: str = Field(description="Absolute path of the project checkout")

    @property
    def link_key(self) -> str:
        return self.identity.link_key

    def dependency_descriptors(self) -> Iterator[UnresolvedProject]:
        for dep in self.dependencies:
            yield UnresolvedProject(identity=dep)


ProjectDescriptor = Union[UnresolvedProject, ResolvedProject]
