"""Build runner: run the external build tool in a project directory."""

from __future__ import annotations

import logging
import subprocess
from typing import Protocol, Sequence

from ri.models.build import BuildResult

INSTALL_GOAL = "install"
log = logging.getLogger(__name__)


class BuildFailedError(RuntimeError):
    def __init__(self, result: BuildResult) -> None:
        super().__init__(f"Could not run {result.argv} in {result.directory}")
        self.result = result


class BuildRunner(Protocol):
    def run(self, directory: str, command: str, args: Sequence[str]) -> BuildResult:
        ...


class MavenBuildRunner:
    """Runs ``<executable> <command> <args...>``; blocks until the build exits, no timeout."""

    def __init__(self, executable: str = "mvn") -> None:
        self.executable = executable

    def run(self, directory: str, command: str, args: Sequence[str]) -> BuildResult:
        argv = [self.executable, command, *args]
        log.debug("running %s in %s", argv, directory)
        try:
            proc = subprocess.run(
                argv,
                cwd=directory,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                check=False,
            )
        except OSError as exc:
            return BuildResult(argv=argv, directory=directory, returncode=127, output=f"{exc}\n")
        return BuildResult(argv=argv, directory=directory, returncode=proc.returncode, output=proc.stdout or "")


def run_install(runner: BuildRunner, directory: str, args: Sequence[str]) -> BuildResult:
    """Run the install goal; raise BuildFailedError on a non-zero exit."""
    result = runner.run(directory, INSTALL_GOAL, args)
    if not result.ok:
        raise BuildFailedError(result)
    return result
