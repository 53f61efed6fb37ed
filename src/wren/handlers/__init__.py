"""Chain handlers that sit behind the template router.

StaticFiles -- Serve files from the public directory, decline on miss
NotFoundResponder -- Render the ``404`` template for unanswered requests
"""

from wren.handlers.not_found import NotFoundResponder
from wren.handlers.static import StaticFiles

__all__ = ["NotFoundResponder", "StaticFiles"]
