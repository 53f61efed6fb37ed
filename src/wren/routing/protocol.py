"""Chain handler protocol and the decline sentinel.

A chain handler is any object with a ``rank`` and an async ``handle``::

    class Health:
        rank = 0

        async def handle(self, request: Request) -> Outcome:
            if request.path != "/health":
                return DECLINE
            return Response("ok")

No base class required. The chain checks the shape, not the lineage.

The three outcomes:

- return a ``Response`` — the request is answered, the chain stops
- return ``DECLINE`` — not handled, the chain moves on
- raise an ``HTTPError`` — the request fails; the chain stops
"""

from typing import Final, Protocol, runtime_checkable

from wren.http.request import Request
from wren.http.response import Response


class Decline:
    """The "not handled here" outcome.  Use the ``DECLINE`` singleton."""

    __slots__ = ()
    _instance: "Decline | None" = None

    def __new__(cls) -> "Decline":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "DECLINE"

    def __bool__(self) -> bool:
        return False


DECLINE: Final = Decline()

type Outcome = Response | Decline


@runtime_checkable
class ChainHandler(Protocol):
    """Protocol for handlers composed by :class:`~wren.routing.chain.HandlerChain`.

    Lower ranks are tried first.  A handler that declines must not have
    produced any part of a response.
    """

    @property
    def rank(self) -> int: ...

    async def handle(self, request: Request) -> Outcome: ...
