"""Manifest loader: read a project's pom.xml into a ResolvedProject."""

from __future__ import annotations

import logging
import os
import xml.etree.ElementTree as ET
from typing import Optional, Protocol

from ri.models.project import ProjectIdentity, ResolvedProject

MANIFEST_NAME = "pom.xml"
log = logging.getLogger(__name__)


class ManifestError(RuntimeError):
    pass


class ManifestLoader(Protocol):
    """Loads the fully populated descriptor of the project in a directory."""

    def load(self, directory: str) -> ResolvedProject:
        ...


def _local_name(tag: str) -> str:
    """Strip the XML namespace: {http://maven.apache.org/POM/4.0.0}groupId -> groupId."""
    return tag.rsplit("}", 1)[-1]


def _child(element: ET.Element, name: str) -> Optional[ET.Element]:
    for child in element:
        if _local_name(child.tag) == name:
            return child
    return None


def _children(element: ET.Element, name: str) -> list[ET.Element]:
    return [child for child in element if _local_name(child.tag) == name]


def _text(element: ET.Element, name: str) -> str:
    child = _child(element, name)
    if child is None or child.text is None:
        return ""
    return child.text.strip()


def parse_pom(content: str | bytes, directory: str) -> ResolvedProject:
    """Parse pom.xml content. groupId falls back to the parent's when omitted."""
    try:
        root = ET.fromstring(content)
    except ET.ParseError as exc:
        raise ManifestError(f"cannot parse {MANIFEST_NAME} in {directory}: {exc}") from exc
    if _local_name(root.tag) != "project":
        raise ManifestError(f"{MANIFEST_NAME} in {directory} has no <project> root element")

    group = _text(root, "groupId")
    if not group:
        parent = _child(root, "parent")
        if parent is not None:
            group = _text(parent, "groupId")
    artifact = _text(root, "artifactId")
    if not group or not artifact:
        raise ManifestError(f"{MANIFEST_NAME} in {directory} is missing groupId or artifactId")

    dependencies: list[ProjectIdentity] = []
    section = _child(root, "dependencies")
    if section is not None:
        for dep in _children(section, "dependency"):
            dep_group = _text(dep, "groupId")
            dep_artifact = _text(dep, "artifactId")
            if not dep_group or not dep_artifact:
                raise ManifestError(
                    f"{MANIFEST_NAME} in {directory} declares a dependency without groupId or artifactId"
                )
            dependencies.append(ProjectIdentity(group=dep_group, artifact=dep_artifact))

    return ResolvedProject(
        identity=ProjectIdentity(group=group, artifact=artifact),
        dependencies=tuple(dependencies),
        directory=directory,
    )


class PomManifestLoader:
    """ManifestLoader for Maven projects."""

    def load(self, directory: str) -> ResolvedProject:
        directory = os.path.abspath(directory)
        path = os.path.join(directory, MANIFEST_NAME)
        try:
            with open(path, "rb") as f:
                content = f.read()
        except OSError as exc:
            raise ManifestError(f"cannot read {path}: {exc}") from exc
        project = parse_pom(content, directory)
        log.debug("loaded %s from %s (%d dependencies)", project.identity, path, len(project.dependencies))
        return project
