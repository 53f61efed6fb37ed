"""Template discovery and the immutable template registry.

Walks the template directory breadth-first with an explicit queue and
maps every regular file to a template identifier::

    templates/
        index.html.hbs      -> "index"
        404.html            -> "404"
        blog/
            post.html       -> "blog/post"

The registry is built exactly once, before the server accepts
connections, and exposes no mutation API.  Concurrent request handlers
read from it without locking.
"""

from __future__ import annotations

import logging
import os
from collections import deque
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType

from wren.errors import DiscoveryError
from wren.templating.naming import strip_extensions

logger = logging.getLogger("wren.discovery")


@dataclass(frozen=True, slots=True)
class TemplateHandle:
    """A discovered template, ready to hand to the render engine.

    Attributes:
        identifier: Extension-free lookup key (``"blog/post"``).
        template_name: Path relative to the template root, with
            suffixes, in ``/`` form — the name kida's loader resolves.
        path: Absolute filesystem path of the template file.
    """

    identifier: str
    template_name: str
    path: Path


@dataclass(frozen=True, slots=True)
class TemplateConflict:
    """Two files normalized to the same identifier; *winner* was kept."""

    identifier: str
    winner: str
    loser: str


class TemplateRegistry(Mapping[str, TemplateHandle]):
    """Read-only mapping of template identifier to :class:`TemplateHandle`.

    Build one with :meth:`discover`.  Instances are immutable: the
    backing dict is wrapped in a ``MappingProxyType`` and no method
    adds, removes, or replaces entries.
    """

    __slots__ = ("_conflicts", "_handles", "_root")

    def __init__(
        self,
        handles: Mapping[str, TemplateHandle],
        *,
        root: Path | None = None,
        conflicts: tuple[TemplateConflict, ...] = (),
    ) -> None:
        self._handles = MappingProxyType(dict(handles))
        self._root = root
        self._conflicts = conflicts

    @classmethod
    def discover(
        cls,
        root: str | Path,
        *,
        suffixes: tuple[str, ...] = (),
        strict: bool = False,
    ) -> TemplateRegistry:
        """Walk *root* and build a registry.  See :func:`discover_templates`."""
        return discover_templates(root, suffixes=suffixes, strict=strict)

    def __getitem__(self, identifier: str) -> TemplateHandle:
        return self._handles[identifier]

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._handles

    def __iter__(self) -> Iterator[str]:
        return iter(self._handles)

    def __len__(self) -> int:
        return len(self._handles)

    def __repr__(self) -> str:
        return f"TemplateRegistry(root={self._root!r}, templates={len(self)})"

    @property
    def root(self) -> Path | None:
        """The directory the registry was discovered from."""
        return self._root

    @property
    def conflicts(self) -> tuple[TemplateConflict, ...]:
        """Identifier collisions seen during discovery, in discovery order."""
        return self._conflicts

    def identifiers(self) -> list[str]:
        """All identifiers, sorted."""
        return sorted(self._handles)


def discover_templates(
    root: str | Path,
    *,
    suffixes: tuple[str, ...] = (),
    strict: bool = False,
) -> TemplateRegistry:
    """Discover every template under *root* and return the registry.

    Args:
        root: Template directory.  Must exist and be readable.
        suffixes: When non-empty, only files whose last suffix is listed
            (e.g. ``(".hbs", ".html")``) are registered.
        strict: Raise instead of keeping the later file when two files
            map to the same identifier.

    Raises:
        DiscoveryError: The root is missing or unreadable, a
            subdirectory cannot be listed, or (with *strict*) two files
            share an identifier.
        MalformedTemplateName: A file name strips to nothing.
    """
    root_path = _validate_root(root)
    logger.info("Loading templates from %s", root_path)

    wanted = frozenset(s if s.startswith(".") else f".{s}" for s in suffixes)
    handles: dict[str, TemplateHandle] = {}
    conflicts: list[TemplateConflict] = []
    visited: set[tuple[int, int]] = set()

    queue: deque[Path] = deque([root_path])
    while queue:
        path = queue.popleft()

        if path.is_dir():
            real = path.stat()
            key = (real.st_dev, real.st_ino)
            if key in visited:
                logger.warning("Skipping already visited directory (symlink cycle?): %s", path)
                continue
            visited.add(key)
            try:
                entries = sorted(os.scandir(path), key=lambda e: e.name)
            except OSError as exc:
                raise DiscoveryError("Cannot read template directory", path) from exc
            queue.extend(Path(entry.path) for entry in entries)
            continue

        if not path.is_file():
            logger.debug("Skipping non-regular file: %s", path)
            continue

        if wanted and path.suffix not in wanted:
            logger.debug("Skipping file with unlisted suffix: %s", path)
            continue

        relative = path.relative_to(root_path)
        identifier = strip_extensions(relative)
        template_name = relative.as_posix()
        logger.debug("Found template %s -> %s", template_name, identifier)

        previous = handles.get(identifier)
        if previous is not None:
            conflict = TemplateConflict(
                identifier, winner=template_name, loser=previous.template_name
            )
            if strict:
                msg = (
                    f"Templates {previous.template_name!r} and {template_name!r} "
                    f"both resolve to {identifier!r}"
                )
                raise DiscoveryError(msg, path)
            logger.warning(
                "Template %r replaces %r for identifier %r",
                template_name,
                previous.template_name,
                identifier,
            )
            conflicts.append(conflict)

        handles[identifier] = TemplateHandle(identifier, template_name, path)

    logger.info("Loaded %d templates", len(handles))
    return TemplateRegistry(handles, root=root_path, conflicts=tuple(conflicts))


def _validate_root(root: str | Path) -> Path:
    """Resolve *root* and check it is a readable directory."""
    root_path = Path(root).resolve()
    if not root_path.exists():
        raise DiscoveryError("Template directory not found", root_path)
    if not root_path.is_dir():
        raise DiscoveryError("Template path is not a directory", root_path)
    if not os.access(root_path, os.R_OK | os.X_OK):
        raise DiscoveryError("Template directory is not readable", root_path)
    return root_path
