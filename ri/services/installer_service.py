"""Recursive installer: install linked dependencies bottom-up, then the root project.

Depth-first post-order walk. Each linked project is installed once per run,
after every linked project it depends on. Dependencies without a registry
entry are leaves left to the build tool's own resolution.

Cycles are truncated: a dependency that is already on the traversal stack is
skipped (logged at WARNING) unless ``fail_on_cycle`` is set, in which case
DependencyCycleError is raised.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from ri.adapters.link_registry import LinkRegistry
from ri.models.project import ProjectDescriptor, ProjectIdentity, ResolvedProject
from ri.services.build_runner import BuildRunner, run_install
from ri.services.manifest_loader import ManifestLoader

log = logging.getLogger(__name__)


class DependencyCycleError(RuntimeError):
    def __init__(self, cycle: list[ProjectIdentity]) -> None:
        super().__init__("dependency cycle: " + " -> ".join(str(p) for p in cycle))
        self.cycle = cycle


class _Session:
    """State of one install run: installed keys plus the current traversal stack."""

    def __init__(
        self,
        root: ResolvedProject,
        registry: LinkRegistry,
        loader: ManifestLoader,
        runner: BuildRunner,
        build_args: Sequence[str],
        fail_on_cycle: bool,
        on_install: Optional[Callable[[ProjectIdentity], None]],
    ) -> None:
        self.registry = registry
        self.loader = loader
        self.runner = runner
        self.build_args = list(build_args)
        self.fail_on_cycle = fail_on_cycle
        self.on_install = on_install
        # Seeded with the root: the caller installs it last, in its own directory.
        self.installed: set[str] = {root.link_key}
        self.order: list[ProjectIdentity] = []
        # (requested, loaded) per frame; they differ when a link points at another project.
        self.stack: list[tuple[ProjectIdentity, ProjectIdentity]] = []

    def on_stack(self, key: str) -> bool:
        return any(key in (requested.link_key, loaded.link_key) for requested, loaded in self.stack)

    def cycle_to(self, identity: ProjectIdentity) -> list[ProjectIdentity]:
        for start, (requested, loaded) in enumerate(self.stack):
            if identity.link_key in (requested.link_key, loaded.link_key):
                break
        return [*(loaded for _, loaded in self.stack[start:]), identity]


def _resolve(descriptor: ProjectDescriptor, session: _Session) -> Optional[ResolvedProject]:
    if isinstance(descriptor, ResolvedProject):
        return descriptor
    path = session.registry.resolve(descriptor.identity)
    if path is None:
        log.debug("%s is not linked; left to the build tool", descriptor.identity)
        return None
    project = session.loader.load(path)
    if project.link_key != descriptor.link_key:
        log.warning("link %s points to %s, which contains %s", descriptor.identity, path, project.identity)
    return project


def _install_tree(descriptor: ProjectDescriptor, session: _Session) -> None:
    project = _resolve(descriptor, session)
    if project is None:
        return

    session.stack.append((descriptor.identity, project.identity))
    for dep in project.dependency_descriptors():
        if session.on_stack(dep.link_key):
            cycle = session.cycle_to(dep.identity)
            if session.fail_on_cycle:
                raise DependencyCycleError(cycle)
            log.warning("skipping %s: dependency cycle %s", dep.identity, " -> ".join(str(p) for p in cycle))
            continue
        if dep.link_key in session.installed:
            log.debug("%s already installed in this run", dep.identity)
            continue
        _install_tree(dep, session)
    session.stack.pop()

    keys = {descriptor.link_key, project.link_key}
    if project.link_key in session.installed:
        session.installed.update(keys)
        return
    _run_install(project, session.runner, session.build_args, session.on_install)
    session.installed.update(keys)
    session.order.append(project.identity)


def _run_install(
    project: ResolvedProject,
    runner: BuildRunner,
    build_args: Sequence[str],
    on_install: Optional[Callable[[ProjectIdentity], None]],
) -> None:
    if on_install is not None:
        on_install(project.identity)
    log.debug("installing %s in %s", project.identity, project.directory)
    run_install(runner, project.directory, build_args)


def install_dependencies(
    root: ResolvedProject,
    registry: LinkRegistry,
    loader: ManifestLoader,
    runner: BuildRunner,
    build_args: Sequence[str],
    *,
    fail_on_cycle: bool = False,
    on_install: Optional[Callable[[ProjectIdentity], None]] = None,
) -> list[ProjectIdentity]:
    """Install every linked project ``root`` transitively depends on, never ``root`` itself.

    Returns the identities installed, in install order. Raises BuildFailedError on the
    first failing build; projects installed before it stay installed.
    """
    session = _Session(root, registry, loader, runner, build_args, fail_on_cycle, on_install)
    _install_tree(root, session)
    return session.order


def install(
    root_directory: str,
    registry: LinkRegistry,
    loader: ManifestLoader,
    runner: BuildRunner,
    build_args: Sequence[str],
    *,
    fail_on_cycle: bool = False,
    on_install: Optional[Callable[[ProjectIdentity], None]] = None,
) -> list[ProjectIdentity]:
    """Install the linked dependencies of the project in ``root_directory``, then the project.

    The root is installed exactly once, last, in ``root_directory`` (not a
    registry-resolved path). Returns the full install order.
    """
    root = loader.load(root_directory)
    order = install_dependencies(
        root, registry, loader, runner, build_args, fail_on_cycle=fail_on_cycle, on_install=on_install
    )
    _run_install(root, runner, build_args, on_install)
    order.append(root.identity)
    return order


def link(directory: str, registry: LinkRegistry, loader: ManifestLoader) -> ProjectIdentity:
    """Register the project in ``directory`` at that (absolute) path."""
    project = loader.load(directory)
    registry.put(project.identity, project.directory)
    return project.identity


def unlink(identity: ProjectIdentity, registry: LinkRegistry) -> bool:
    return registry.remove(identity)
