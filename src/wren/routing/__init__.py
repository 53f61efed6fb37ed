"""Routing — template resolution and the ranked handler chain.

A chain handler answers a request with a Response or declines with
``DECLINE`` so the next handler (by ascending rank) can try.
"""

from wren.routing.chain import HandlerChain
from wren.routing.protocol import DECLINE, ChainHandler, Decline, Outcome
from wren.routing.resolve import parse_segments, resolve
from wren.routing.router import RouterConfig, TemplateRouter

__all__ = [
    "DECLINE",
    "ChainHandler",
    "Decline",
    "HandlerChain",
    "Outcome",
    "RouterConfig",
    "TemplateRouter",
    "parse_segments",
    "resolve",
]
