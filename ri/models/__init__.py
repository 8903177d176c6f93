"""Pydantic models."""

from ri.models.build import BuildResult
from ri.models.project import (
    ProjectDescriptor,
    ProjectIdentity,
    ResolvedProject,
    UnresolvedProject,
)

__all__ = [
    "BuildResult",
    "ProjectDescriptor",
    "ProjectIdentity",
    "ResolvedProject",
    "UnresolvedProject",
]
