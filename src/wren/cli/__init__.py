"""Wren CLI — serve a template directory, run an app, list templates.

Entry point registered as ``wren`` in ``pyproject.toml``::

    [project.scripts]
    wren = "wren.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``wren`` command."""
    parser = argparse.ArgumentParser(
        prog="wren",
        description="Wren — serve a directory of templates as a website.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level for wren messages (default: WREN_LOG_LEVEL or info)",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- wren serve -------------------------------------------------------
    serve_parser = subparsers.add_parser(
        "serve", help="Serve a template directory without writing any Python"
    )
    serve_parser.add_argument("--templates", default=None, help="Template directory")
    serve_parser.add_argument("--public", default=None, help="Static file directory")
    serve_parser.add_argument(
        "--sub-root",
        default=None,
        help="Template subdirectory that URLs resolve against (e.g. pages)",
    )
    serve_parser.add_argument(
        "--index-files",
        action="store_true",
        default=None,
        help="Serve the index template for the root path /",
    )
    serve_parser.add_argument("--host", default=None, help="Bind host address")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port number")
    serve_parser.add_argument(
        "--debug",
        action="store_true",
        default=None,
        help="Development mode: single worker, auto-reload, tracebacks",
    )
    serve_parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker count (0=auto-detect, production only)",
    )

    # -- wren run ---------------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Start a wren App or a template directory")
    run_parser.add_argument(
        "app", help="Import string (e.g. mysite:app) or template directory (e.g. templates/)"
    )
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--port", type=int, default=None, help="Bind port number")
    run_parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker count (0=auto-detect, production only)",
    )

    # -- wren templates ---------------------------------------------------
    templates_parser = subparsers.add_parser(
        "templates", help="List discovered templates and their URL identifiers"
    )
    templates_parser.add_argument(
        "directory",
        nargs="?",
        default=None,
        help="Template directory (default: WREN_TEMPLATE_DIR or templates)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "serve":
        from wren.cli._serve import run_serve

        run_serve(args)
    elif args.command == "run":
        from wren.cli._run import run_server

        run_server(args)
    elif args.command == "templates":
        from wren.cli._templates import run_templates

        run_templates(args)
