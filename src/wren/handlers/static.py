"""Static file chain handler.

Serves files from a directory for paths under a URL prefix.  Supports
root-level serving (``prefix="/"``) with automatic index file
resolution.  Declines for everything it cannot serve, so the chain
moves on to the not-found responder.
"""

import logging
import mimetypes
from pathlib import Path

from wren.http.request import Request
from wren.http.response import Response
from wren.routing.protocol import DECLINE, Outcome

logger = logging.getLogger("wren.static")


class StaticFiles:
    """Chain handler that serves static files from a directory.

    Security: resolves symlinks and verifies the final path is within
    the configured directory to prevent path traversal.  Dotfiles are
    never served.

    Usage::

        StaticFiles("public", rank=15)
        StaticFiles("assets", prefix="/assets", cache_control="no-cache")
    """

    __slots__ = ("_cache_control", "_directory", "_index", "_prefix", "_rank")

    def __init__(
        self,
        directory: str | Path,
        prefix: str = "/",
        *,
        rank: int = 15,
        index: str = "index.html",
        cache_control: str = "public, max-age=3600",
    ) -> None:
        self._directory = Path(directory).resolve()
        self._rank = rank
        self._index = index
        self._cache_control = cache_control

        # Normalize prefix: ensure leading slash, strip trailing.
        # Root prefix "/" normalizes to "" (every path is a candidate).
        stripped = "/" + prefix.strip("/")
        self._prefix = stripped if stripped != "/" else ""

    @property
    def rank(self) -> int:
        return self._rank

    @property
    def directory(self) -> Path:
        return self._directory

    def __repr__(self) -> str:
        prefix = self._prefix or "/"
        return f"<StaticFiles {str(self._directory)!r} prefix={prefix!r} rank={self._rank}>"

    async def handle(self, request: Request) -> Outcome:
        """Serve a static file or decline."""
        if request.method not in ("GET", "HEAD"):
            return DECLINE

        path = request.path

        if self._prefix:
            if not path.startswith(self._prefix + "/") and path != self._prefix:
                return DECLINE
            relative = path[len(self._prefix) :].lstrip("/")
        else:
            relative = path.lstrip("/")

        if any(part.startswith(".") for part in relative.split("/") if part):
            return DECLINE

        file_path = (self._directory / relative).resolve() if relative else self._directory
        if not file_path.is_relative_to(self._directory):
            logger.warning("Refusing path outside public directory: %r", path)
            return Response(body="Forbidden", status=403, content_type="text/plain; charset=utf-8")

        if file_path.is_dir():
            index_path = file_path / self._index
            if not index_path.is_file():
                return DECLINE
            # Redirect to the trailing-slash URL so relative links resolve
            if relative and not path.endswith("/"):
                return Response(body="", status=301).with_header("Location", path + "/")
            file_path = index_path

        if not file_path.is_file():
            return DECLINE

        return self._serve_file(file_path)

    def _serve_file(self, file_path: Path) -> Response:
        """Read a file and build a response."""
        content_type, _ = mimetypes.guess_type(str(file_path))
        if content_type is None:
            content_type = "application/octet-stream"

        body = file_path.read_bytes()
        logger.debug("Serving static file %s", file_path)

        return Response(body=body, content_type=content_type).with_header(
            "Cache-Control", self._cache_control
        )
