"""``wren run`` — start an existing wren App or a template directory.

The server mode (development or production) follows ``app.config.debug``.
"""

import argparse
import dataclasses
import sys

from wren.cli._resolve import is_template_directory, resolve_app
from wren.errors import ConfigurationError, DiscoveryError
from wren.logging import configure_logging
from wren.server.run import serve


def run_server(args: argparse.Namespace) -> None:
    """Resolve ``args.app``, discover its templates, and serve it.

    ``--workers`` replaces the app's configured worker count before the
    app freezes.  Any resolution or discovery failure exits with status 1
    before the server binds.
    """
    try:
        app = resolve_app(args.app)
        configure_logging(args.log_level or app.config.log_level)
        if args.workers is not None:
            app.config = dataclasses.replace(app.config, workers=args.workers)
        app._ensure_frozen()
    except (
        ModuleNotFoundError,
        AttributeError,
        TypeError,
        ValueError,
        ConfigurationError,
        DiscoveryError,
    ) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    app_path = None if is_template_directory(args.app) else args.app
    serve(app, host=args.host, port=args.port, app_path=app_path)
