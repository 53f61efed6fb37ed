"""Wren — serve a directory of templates as a website.

Every template under the template directory becomes a page: the file's
path, minus its extensions, is the URL.  Requests no template answers
fall through to static files, then to a rendered 404 page.

Basic usage::

    from wren import App, AppConfig

    app = App(AppConfig(template_dir="templates", use_index_files=True))
    app.run()

Or without writing any Python::

    wren serve --templates templates --public public --index-files
"""

__version__ = "0.1.0"
__all__ = [
    "DECLINE",
    "App",
    "AppConfig",
    "ChainHandler",
    "ConfigurationError",
    "DiscoveryError",
    "HTTPError",
    "HandlerChain",
    "InvalidPath",
    "MalformedTemplateName",
    "NotFound",
    "RenderFailure",
    "Request",
    "Response",
    "RouterConfig",
    "StaticFiles",
    "TemplateHandle",
    "TemplateRegistry",
    "TemplateRouter",
    "WrenError",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wren`` fast while providing a clean top-level API.
    """
    if name == "App":
        from wren.app import App

        return App

    if name == "AppConfig":
        from wren.config import AppConfig

        return AppConfig

    if name == "Request":
        from wren.http.request import Request

        return Request

    if name == "Response":
        from wren.http.response import Response

        return Response

    if name in (
        "WrenError",
        "ConfigurationError",
        "DiscoveryError",
        "MalformedTemplateName",
        "HTTPError",
        "NotFound",
        "InvalidPath",
        "RenderFailure",
    ):
        from wren import errors

        return getattr(errors, name)

    if name in ("TemplateRegistry", "TemplateHandle"):
        from wren.templating import registry

        return getattr(registry, name)

    if name in ("DECLINE", "ChainHandler", "HandlerChain", "RouterConfig", "TemplateRouter"):
        from wren import routing

        return getattr(routing, name)

    if name == "StaticFiles":
        from wren.handlers.static import StaticFiles

        return StaticFiles

    raise AttributeError(f"module 'wren' has no attribute {name!r}")
