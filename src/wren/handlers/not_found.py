"""Catch-all not-found responder.

Renders the registry's ``404`` template once every chain handler has
declined.  ``message`` is the request path still percent-encoded, as it
arrived on the request line.  Falls back to a plain-text body when no
such template exists or it fails to render, so a broken error page can
never turn a 404 into a 500.
"""

import logging

from kida import Environment

from wren.http.request import Request
from wren.http.response import Response
from wren.templating.integration import render_handle
from wren.templating.registry import TemplateRegistry

logger = logging.getLogger("wren.server")


class NotFoundResponder:
    """Produces the single, consistent response for unresolved paths."""

    __slots__ = ("_env", "_registry", "_template")

    def __init__(
        self,
        registry: TemplateRegistry | None,
        env: Environment | None,
        template: str = "404",
    ) -> None:
        self._registry = registry
        self._env = env
        self._template = template

    @property
    def template(self) -> str:
        return self._template

    def respond(self, request: Request) -> Response:
        """Build the 404 response for *request*."""
        handle = self._registry.get(self._template) if self._registry is not None else None
        if handle is not None and self._env is not None:
            try:
                body = render_handle(self._env, handle, {"message": request.raw_path})
            except Exception:
                logger.exception("Failed to render not-found template %r", handle.template_name)
            else:
                return Response(body=body, status=404)

        return Response(body="Not Found", status=404, content_type="text/plain; charset=utf-8")
