"""Error handling pipeline for wren requests.

Maps HTTPError exceptions and unexpected failures to Response objects.
Server errors never leak internal details unless ``debug`` is on.
"""

import logging
import traceback
from html import escape

from wren.errors import HTTPError
from wren.handlers.not_found import NotFoundResponder
from wren.http.request import Request
from wren.http.response import Response

logger = logging.getLogger("wren.server")

_PLAIN = "text/plain; charset=utf-8"


def handle_http_error(
    exc: HTTPError,
    request: Request,
    not_found: NotFoundResponder,
    debug: bool,
) -> Response:
    """Map an HTTPError to a Response."""
    if exc.status == 404:
        logger.debug("404 %s %s — %s", request.method, request.path, exc.detail)
        response = not_found.respond(request)
    elif exc.status >= 500:
        logger.error("%d %s %s — %s", exc.status, request.method, request.path, exc.detail)
        body = f"{exc.status}: {exc.detail}" if debug and exc.detail else "Internal Server Error"
        response = Response(body=body, status=exc.status, content_type=_PLAIN)
    else:
        logger.debug("%d %s %s — %s", exc.status, request.method, request.path, exc.detail)
        body = exc.detail or f"Error {exc.status}"
        response = Response(body=body, status=exc.status, content_type=_PLAIN)

    for name, value in exc.headers:
        response = response.with_header(name, value)
    return response


def handle_internal_error(exc: Exception, request: Request, debug: bool) -> Response:
    """Handle unexpected exceptions as 500 errors."""
    logger.exception("500 %s %s", request.method, request.path)

    if debug:
        body = f"<pre>{escape(''.join(traceback.format_exception(exc)))}</pre>"
        return Response(body=body, status=500)

    return Response(body="Internal Server Error", status=500, content_type=_PLAIN)
