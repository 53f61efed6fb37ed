"""``wren serve`` — build an App from environment and flags, then run it.

Flags override ``WREN_*`` environment variables, which override the
``AppConfig`` defaults.
"""

import argparse
import sys

from wren.app import App
from wren.config import AppConfig
from wren.errors import ConfigurationError, DiscoveryError
from wren.logging import configure_logging


def build_config(args: argparse.Namespace) -> AppConfig:
    """Merge command-line flags over ``AppConfig.from_env()``.

    Flags left unset keep the environment (or default) value.
    """
    overrides: dict[str, object] = {}
    for flag, field in (
        ("templates", "template_dir"),
        ("public", "public_dir"),
        ("sub_root", "template_page_root"),
        ("index_files", "use_index_files"),
        ("host", "host"),
        ("port", "port"),
        ("debug", "debug"),
        ("workers", "workers"),
    ):
        value = getattr(args, flag, None)
        if value is not None:
            overrides[field] = value
    if getattr(args, "log_level", None) is not None:
        overrides["log_level"] = args.log_level
    return AppConfig.from_env(**overrides)


def run_serve(args: argparse.Namespace) -> None:
    """Discover templates and start serving.

    Discovery runs before the server binds, so a missing or unreadable
    template directory exits with status 1 instead of starting.
    """
    try:
        config = build_config(args)
        configure_logging(config.log_level)
        app = App(config)
        app._ensure_frozen()
    except (ConfigurationError, DiscoveryError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    app.run()
