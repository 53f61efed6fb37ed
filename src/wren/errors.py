"""Wren exception hierarchy.

Shared across discovery, routing, the handler chain, and the ASGI layer
so every module raises and catches the same types.

Startup errors (``ConfigurationError``, ``DiscoveryError``) are fatal:
the server refuses to start.  Per-request errors derive from
``HTTPError`` and are mapped to a response by the server.
"""

from dataclasses import dataclass
from pathlib import Path


class WrenError(Exception):
    """Base for all wren-specific errors."""


class ConfigurationError(WrenError):
    """Raised when app or router configuration is invalid.

    Typically raised while constructing ``RouterConfig`` or during
    ``App._freeze()`` at startup.
    """


class DiscoveryError(WrenError):
    """Template discovery failed — the registry cannot be built.

    Raised for a missing or unreadable template root, an unreadable
    subdirectory, or (in strict mode) conflicting template identifiers.
    """

    def __init__(self, detail: str, path: str | Path | None = None) -> None:
        self.detail = detail
        self.path = Path(path) if path is not None else None
        super().__init__(f"{detail}: {path}" if path is not None else detail)


class MalformedTemplateName(DiscoveryError):  # noqa: N818
    """A template file name stripped down to an empty identifier.

    ``.hbs`` or ``...`` have no stem left once every suffix is removed.
    """

    def __init__(self, path: str | Path) -> None:
        super().__init__("Template name is empty after stripping extensions", path)


@dataclass(frozen=True, slots=True)
class HTTPError(WrenError):
    """An error that maps directly to an HTTP status code.

    Raised by chain handlers. The ASGI handler catches these and turns
    them into a response.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404 — every handler in the chain declined the request."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class InvalidPath(HTTPError):  # noqa: N818
    """500 — the request path cannot be decoded into path segments.

    Distinct from a miss: a miss declines, a malformed path fails.
    """

    def __init__(self, detail: str = "Invalid path") -> None:
        super().__init__(status=500, detail=detail)


class RenderFailure(HTTPError):  # noqa: N818
    """500 — a template was resolved but the render engine failed on it."""

    def __init__(self, template: str, detail: str = "") -> None:
        message = f"Failed to render template {template!r}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(status=500, detail=message)
