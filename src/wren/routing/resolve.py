"""Request path to template resolution.

Pure functions: given the same raw path, router config, and registry
they always return the same answer, hold no state between calls, and
touch no filesystem.  That is what lets any number of request workers
call them concurrently against one registry.

Resolution steps::

    "/blog/post"   -> ("blog", "post")  -> "blog/post"  -> [sub_root/]blog/post
    "/"            -> ()                -> "index"      (use_index_files only)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from urllib.parse import unquote

from wren.errors import InvalidPath
from wren.templating.registry import TemplateHandle, TemplateRegistry

if TYPE_CHECKING:
    from wren.routing.router import RouterConfig

logger = logging.getLogger("wren.router")

# Characters a decoded segment may never contain
_FORBIDDEN_CHARS = frozenset("/\\\x00")
_BAD_START = (".", "*")
_BAD_END = (":", "<", ">")


def parse_segments(raw_path: str) -> tuple[str, ...]:
    """Split a raw (percent-encoded) request path into decoded segments.

    Empty segments and ``.`` are dropped; ``..`` removes the previous
    segment (and never climbs above the root).

    Raises:
        InvalidPath: A segment is not valid percent-encoded UTF-8,
            decodes to a path separator or NUL, starts with ``.`` or
            ``*``, or ends with ``:``, ``<``, or ``>``.
    """
    segments: list[str] = []
    for raw in raw_path.split("/"):
        if raw in ("", "."):
            continue
        if raw == "..":
            if segments:
                segments.pop()
            continue

        try:
            segment = unquote(raw, encoding="utf-8", errors="strict")
        except UnicodeDecodeError as exc:
            msg = f"Segment {raw!r} is not valid UTF-8"
            raise InvalidPath(msg) from exc

        if any(ch in _FORBIDDEN_CHARS for ch in segment):
            raise InvalidPath(f"Segment {raw!r} contains a forbidden character")
        if segment.startswith(_BAD_START):
            raise InvalidPath(f"Segment {raw!r} has a forbidden first character")
        if segment.endswith(_BAD_END):
            raise InvalidPath(f"Segment {raw!r} has a forbidden last character")
        segments.append(segment)

    return tuple(segments)


def candidate_identifier(raw_path: str, config: RouterConfig) -> str | None:
    """Compute the registry key *raw_path* asks for, or None if there is none.

    Raises:
        InvalidPath: *raw_path* cannot be decoded into segments.
    """
    segments = list(parse_segments(raw_path))
    logger.debug("Segments: %r", segments)

    if config.use_index_files and not segments:
        logger.debug("Using index files")
        segments.append(config.index_name)

    if not segments:
        return None

    candidate = "/".join(segments)
    if config.sub_root:
        candidate = f"{config.sub_root}/{candidate}"
    return candidate


def resolve(
    raw_path: str,
    config: RouterConfig,
    registry: TemplateRegistry,
) -> TemplateHandle | None:
    """Map a request path to a template handle.

    Returns ``None`` when no template matches — a decline, not an error.

    Raises:
        InvalidPath: *raw_path* cannot be decoded into segments.
    """
    try:
        candidate = candidate_identifier(raw_path, config)
    except InvalidPath:
        logger.error("Invalid path: %r", raw_path)
        raise

    if candidate is None:
        logger.warning("No template requested for %r", raw_path)
        return None

    logger.debug("Requested template name: %r", candidate)
    handle = registry.get(candidate)
    if handle is None:
        logger.warning("Template not found: %r", candidate)
        return None

    logger.debug("Template found: %r", handle.template_name)
    return handle
