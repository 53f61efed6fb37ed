"""Run a wren App under the pounce ASGI server.

Development (``config.debug``) runs one worker that restarts when a
template or source file changes, so the template registry is rebuilt
from scratch on every edit.  Production runs ``config.workers`` workers
(0 = one per CPU); each shares the registry built when the app froze.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from wren.app import App
    from wren.config import AppConfig

logger = logging.getLogger("wren.server")


def server_options(
    config: AppConfig,
    *,
    host: str | None = None,
    port: int | None = None,
) -> dict[str, Any]:
    """Keyword arguments for pounce's ``ServerConfig``.

    In development the template directory is always watched, and the
    template suffixes are added to the watched extensions.
    """
    options: dict[str, Any] = {
        "host": host or config.host,
        "port": port or config.port,
    }
    if config.debug:
        watched_dirs = (*config.reload_dirs, str(config.template_dir))
        watched_ext = (*config.reload_include, *config.template_suffixes)
        options.update(
            workers=1,
            reload=True,
            reload_dirs=tuple(dict.fromkeys(watched_dirs)),
            reload_include=tuple(dict.fromkeys(watched_ext)),
        )
    else:
        options.update(
            workers=config.workers,
            log_format=config.log_format,
            log_level=config.log_level,
        )
    return options


def serve(
    app: App,
    *,
    host: str | None = None,
    port: int | None = None,
    app_path: str | None = None,
) -> None:
    """Block serving *app* until the server stops.

    Args:
        app: A frozen wren App.
        host: Bind address; defaults to ``app.config.host``.
        port: Bind port; defaults to ``app.config.port``.
        app_path: ``"module:attribute"`` import string so the dev server
            can reimport the app after a reload.  Apps built from a bare
            template directory have none.
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    options = server_options(app.config, host=host, port=port)
    mode = "development" if app.config.debug else "production"
    logger.info("Serving on http://%s:%d (%s)", options["host"], options["port"], mode)
    Server(ServerConfig(**options), app, app_path=app_path).run()
