"""ri - recursive install of local dependencies for Maven.

Usage:
  ri [install] [maven args...]
  ri link
  ri unlink [group:artifact]
  ri list
  ri help
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Callable, Optional, Sequence

from ri.adapters.link_registry import FileLinkRegistry
from ri.config import Settings, get_settings
from ri.models.project import ProjectIdentity
from ri.services import installer_service
from ri.services.build_runner import BuildFailedError, MavenBuildRunner
from ri.services.installer_service import DependencyCycleError
from ri.services.manifest_loader import ManifestError, PomManifestLoader

DEFAULT_COMMAND = "install"

HELP_TEXT = """\
ri - recursive install of local dependencies for Maven

Commands:
  ri          (same as ri install)
  ri install  (recursive install of linked dependencies and current project)
  ri link     (link the current artifact to the current folder)
  ri unlink   (unlink the current or supplied artifact)
  ri list     (list all the linked artifacts)
  ri help     (this is what you're looking at)

Everything after the command will be passed to Maven.
If nothing, Maven will be called with {default_args}."""

log = logging.getLogger("ri")


def _setup_logging(level: str) -> None:
    logging.basicConfig(stream=sys.stdout, format="%(message)s")
    log.setLevel(getattr(logging, level, logging.INFO))


def split_command(argv: Sequence[str]) -> tuple[str, list[str]]:
    """Return (command, remaining args). No command, or a leading option, means install."""
    args = list(argv)
    if not args or args[0].startswith("-"):
        return DEFAULT_COMMAND, args
    return args[0], args[1:]


def _print_installing(identity: ProjectIdentity) -> None:
    print(f"Installing {identity}", flush=True)


def _cmd_install(settings: Settings, args: list[str]) -> int:
    build_args = args or list(settings.default_build_args)
    try:
        installer_service.install(
            os.getcwd(),
            FileLinkRegistry(settings.links_dir),
            PomManifestLoader(),
            MavenBuildRunner(settings.build_executable),
            build_args,
            fail_on_cycle=settings.fail_on_cycle,
            on_install=_print_installing,
        )
    except BuildFailedError as exc:
        print(exc.result.output, file=sys.stderr)
        print(str(exc), file=sys.stderr)
        return 1
    except DependencyCycleError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    return 0


def _cmd_link(settings: Settings, args: list[str]) -> int:
    identity = installer_service.link(os.getcwd(), FileLinkRegistry(settings.links_dir), PomManifestLoader())
    print(f"Linking {identity}")
    return 0


def _cmd_unlink(settings: Settings, args: list[str]) -> int:
    if args and ":" in args[0]:
        try:
            identity = ProjectIdentity.parse(args[0])
        except ValueError as exc:
            print(f"ERROR: {exc}", file=sys.stderr)
            return 1
    else:
        identity = PomManifestLoader().load(os.getcwd()).identity
    if installer_service.unlink(identity, FileLinkRegistry(settings.links_dir)):
        print(f"Unlinking {identity}")
    else:
        print(f"Nothing to unlink for {identity}")
    return 0


def _cmd_list(settings: Settings, args: list[str]) -> int:
    for key in FileLinkRegistry(settings.links_dir).list_all():
        print(key)
    return 0


def _cmd_help(settings: Settings, args: list[str]) -> int:
    print(HELP_TEXT.format(default_args=" ".join(settings.default_build_args)))
    return 0


COMMANDS: dict[str, Callable[[Settings, list[str]], int]] = {
    "install": _cmd_install,
    "link": _cmd_link,
    "unlink": _cmd_unlink,
    "list": _cmd_list,
    "help": _cmd_help,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    command, args = split_command(sys.argv[1:] if argv is None else argv)
    handler = COMMANDS.get(command)
    if handler is None:
        print(f"Unknown command: {command} (for documentation, run: ri help)", file=sys.stderr)
        return 1

    settings = get_settings()
    _setup_logging(settings.log_level)
    try:
        return handler(settings, args)
    except ManifestError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
