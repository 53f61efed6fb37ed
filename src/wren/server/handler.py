"""ASGI handler — translates ASGI scope/messages to wren types.

The only component that touches raw ASGI directly. Converts the scope
dict to a typed Request, runs it through the handler chain, and sends
the resulting Response back through ASGI send().
"""

from wren._internal.asgi import Receive, Scope, Send
from wren.errors import HTTPError
from wren.handlers.not_found import NotFoundResponder
from wren.http.request import Request
from wren.routing.chain import HandlerChain
from wren.server.errors import handle_http_error, handle_internal_error
from wren.server.sender import send_response


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    chain: HandlerChain,
    not_found: NotFoundResponder,
    debug: bool,
) -> None:
    """Process a single HTTP request through the handler chain.

    Handlers only return values, so nothing reaches ``send`` until the
    chain has produced its final response (or failed).
    """
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope)

    try:
        response = await chain.dispatch(request)
    except HTTPError as exc:
        response = handle_http_error(exc, request, not_found, debug)
    except Exception as exc:
        response = handle_internal_error(exc, request, debug)

    await send_response(response, send, head=request.method == "HEAD")
