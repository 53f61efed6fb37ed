"""Immutable HTTP request.

Only the metadata the handler chain needs: method, decoded and raw path,
query string, and headers.  Template serving never reads a body.
"""

from dataclasses import dataclass
from typing import Any
from urllib.parse import quote


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request, frozen at creation.

    ``path`` is the percent-decoded path the ASGI server supplies;
    ``raw_path`` is the path exactly as it appeared on the request line.
    Template resolution works from ``raw_path`` so that undecodable
    segments can be reported instead of silently replaced.
    """

    method: str
    path: str
    raw_path: str
    query_string: str = ""
    headers: tuple[tuple[bytes, bytes], ...] = ()
    http_version: str = "1.1"
    server: tuple[str, int] | None = None
    client: tuple[str, int] | None = None

    def header(self, name: str, default: str | None = None) -> str | None:
        """Return the first value of header *name* (case-insensitive)."""
        wanted = name.lower().encode("latin-1")
        for key, value in self.headers:
            if key.lower() == wanted:
                return value.decode("latin-1")
        return default

    @property
    def url(self) -> str:
        """Path plus query string, as requested."""
        if self.query_string:
            return f"{self.path}?{self.query_string}"
        return self.path

    @classmethod
    def from_asgi(cls, scope: dict[str, Any]) -> "Request":
        """Create a Request from an ASGI HTTP scope."""
        path = scope["path"]
        # raw_path is optional in ASGI.  Bytes outside ASCII are escaped so
        # percent-decoding later sees exactly the bytes that were sent.
        raw = scope.get("raw_path")
        if raw:
            raw_path = quote(raw.split(b"?", 1)[0], safe="/%")
        else:
            raw_path = quote(path, safe="/")
        server = scope.get("server")
        client = scope.get("client")
        return cls(
            method=scope["method"].upper(),
            path=path,
            raw_path=raw_path,
            query_string=scope.get("query_string", b"").decode("latin-1"),
            headers=tuple(scope.get("headers", ())),
            http_version=scope.get("http_version", "1.1"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
        )
