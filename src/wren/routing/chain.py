"""Ranked handler chain.

Handlers are tried in ascending rank; the first one that does not
decline answers the request.  If all decline, ``NotFound`` is raised and
the server's not-found responder takes over.
"""

import logging
from collections.abc import Iterable

from wren.errors import NotFound
from wren.http.request import Request
from wren.http.response import Response
from wren.routing.protocol import ChainHandler, Decline

logger = logging.getLogger("wren.router")


class HandlerChain:
    """An immutable, rank-ordered sequence of chain handlers.

    Handlers with equal rank keep their registration order.
    """

    __slots__ = ("_handlers",)

    def __init__(self, handlers: Iterable[ChainHandler]) -> None:
        self._handlers: tuple[ChainHandler, ...] = tuple(
            sorted(handlers, key=lambda handler: handler.rank)
        )

    @property
    def handlers(self) -> tuple[ChainHandler, ...]:
        return self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    async def dispatch(self, request: Request) -> Response:
        """Run *request* through the chain.

        Errors raised by a handler propagate unchanged: a failure is not
        a decline.

        Raises:
            NotFound: Every handler declined.
        """
        for handler in self._handlers:
            outcome = await handler.handle(request)
            if isinstance(outcome, Decline):
                logger.debug("%r declined %s %s", handler, request.method, request.path)
                continue
            return outcome
        raise NotFound(f"No handler for {request.path}")
