"""LinkRegistry abstraction + file-per-entry and in-memory backends.

The file backend keeps no state between calls: every lookup re-reads the
links directory, so edits made by another process are visible immediately.
There is no locking; concurrent writers race.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Protocol

from ri.models.project import ProjectIdentity

log = logging.getLogger(__name__)


class LinkRegistry(Protocol):
    """Protocol for the link registry. Implementations: FileLinkRegistry, InMemoryLinkRegistry."""

    def put(self, identity: ProjectIdentity, path: str) -> None:
        ...

    def remove(self, identity: ProjectIdentity) -> bool:
        """Delete the entry; False when there was nothing to delete."""
        ...

    def resolve(self, identity: ProjectIdentity) -> Optional[str]:
        """Registered source path, or None for an unlinked project."""
        ...

    def list_all(self) -> list[str]:
        ...


class FileLinkRegistry:
    """One file per entry under ``links_dir``, named by link key, holding the path."""

    def __init__(self, links_dir: Path | str) -> None:
        self._links_dir = Path(links_dir)

    @property
    def links_dir(self) -> Path:
        return self._links_dir

    def _entry(self, identity: ProjectIdentity) -> Path:
        return self._links_dir / identity.link_key

    def put(self, identity: ProjectIdentity, path: str) -> None:
        self._links_dir.mkdir(parents=True, exist_ok=True)
        entry = self._entry(identity)
        entry.write_text(str(path), encoding="utf-8")
        log.debug("linked %s -> %s (%s)", identity, path, entry)

    def remove(self, identity: ProjectIdentity) -> bool:
        entry = self._entry(identity)
        try:
            entry.unlink()
        except FileNotFoundError:
            return False
        log.debug("removed link %s", entry)
        return True

    def resolve(self, identity: ProjectIdentity) -> Optional[str]:
        entry = self._entry(identity)
        try:
            with entry.open(encoding="utf-8") as f:
                line = f.readline()
        except FileNotFoundError:
            return None
        path = line.rstrip("\r\n")
        return path or None

    def list_all(self) -> list[str]:
        if not self._links_dir.is_dir():
            return []
        return sorted(p.name for p in self._links_dir.iterdir() if p.is_file())


class InMemoryLinkRegistry:
    """Dict-backed registry with the same semantics; nothing is persisted."""

    def __init__(self, links: Optional[dict[str, str]] = None) -> None:
        self._links: dict[str, str] = dict(links or {})

    def put(self, identity: ProjectIdentity, path: str) -> None:
        self._links[identity.link_key] = str(path)

    def remove(self, identity: ProjectIdentity) -> bool:
        return self._links.pop(identity.link_key, None) is not None

    def resolve(self, identity: ProjectIdentity) -> Optional[str]:
        return self._links.get(identity.link_key)

    def list_all(self) -> list[str]:
        return sorted(self._links)
