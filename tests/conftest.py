"""Pytest configuration and fixtures.

``workspace`` builds throwaway Maven checkouts (just a pom.xml each) under
tmp_path and links them into an in-memory registry; ``runner`` records build
invocations instead of running Maven.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Optional, Sequence

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from ri.adapters.link_registry import InMemoryLinkRegistry  # noqa: E402
from ri.models.build import BuildResult  # noqa: E402
from ri.models.project import ProjectIdentity  # noqa: E402

POM_NS = "http://maven.apache.org/POM/4.0.0"


def pom_xml(coords: str, deps: Sequence[str] = ()) -> str:
    group, artifact = coords.split(":", 1)
    dep_xml = "".join(
        f"<dependency><groupId>{d.split(':', 1)[0]}</groupId>"
        f"<artifactId>{d.split(':', 1)[1]}</artifactId><version>1.0</version></dependency>"
        for d in deps
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<project xmlns="{POM_NS}">'
        "<modelVersion>4.0.0</modelVersion>"
        f"<groupId>{group}</groupId><artifactId>{artifact}</artifactId><version>1.0</version>"
        f"<dependencies>{dep_xml}</dependencies>"
        "</project>\n"
    )


class Workspace:
    def __init__(self, base: Path) -> None:
        self.base = base
        self.registry = InMemoryLinkRegistry()

    def project(self, coords: str, deps: Sequence[str] = (), link: bool = True) -> str:
        """Create a checkout for ``coords`` and return its absolute directory."""
        directory = self.base / coords.replace(":", "__")
        directory.mkdir(parents=True, exist_ok=True)
        (directory / "pom.xml").write_text(pom_xml(coords, deps), encoding="utf-8")
        if link:
            self.registry.put(ProjectIdentity.parse(coords), str(directory))
        return os.path.abspath(directory)

    def coords_of(self, directory: str) -> str:
        return Path(directory).name.replace("__", ":")


class RecordingRunner:
    """BuildRunner that records calls; directories in ``fail_in`` exit 1."""

    def __init__(self, fail_in: Optional[set[str]] = None) -> None:
        self.calls: list[tuple[str, str, list[str]]] = []
        self.fail_in = fail_in or set()

    def run(self, directory: str, command: str, args: Sequence[str]) -> BuildResult:
        self.calls.append((directory, command, list(args)))
        failed = directory in self.fail_in
        return BuildResult(
            argv=["mvn", command, *args],
            directory=directory,
            returncode=1 if failed else 0,
            output="[ERROR] BUILD FAILURE\n" if failed else "[INFO] BUILD SUCCESS\n",
        )

    @property
    def directories(self) -> list[str]:
        return [c[0] for c in self.calls]


@pytest.fixture
def workspace(tmp_path: Path) -> Workspace:
    return Workspace(tmp_path / "checkouts")


@pytest.fixture
def runner() -> RecordingRunner:
    return RecordingRunner()
