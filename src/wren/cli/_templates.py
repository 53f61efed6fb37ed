"""``wren templates`` — list discovered templates.

Prints every identifier the registry holds next to the template file
that answers it, plus any identifier conflicts found during discovery.
"""

import argparse
import sys

from wren.config import AppConfig
from wren.errors import ConfigurationError, DiscoveryError
from wren.templating.registry import discover_templates


def run_templates(args: argparse.Namespace) -> None:
    """Print an IDENTIFIER / TEMPLATE table for a template directory."""
    try:
        config = AppConfig.from_env()
        directory = args.directory or config.template_dir
        registry = discover_templates(directory, suffixes=config.template_suffixes)
    except (ConfigurationError, DiscoveryError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if not registry:
        print(f"No templates found in {directory}.")
        return

    rows = [(ident, registry[ident].template_name) for ident in registry.identifiers()]

    width = max(max(len(identifier) for identifier, _ in rows), 10)  # "IDENTIFIER" header
    fmt = f"{{:<{width}}}  {{}}"
    print(fmt.format("IDENTIFIER", "TEMPLATE"))
    sep_len = width + 2 + max(len(name) for _, name in rows)
    print("-" * min(max(sep_len, 20), 80))
    for identifier, template_name in rows:
        print(fmt.format(identifier, template_name))

    for conflict in registry.conflicts:
        print(
            f"warning: {conflict.identifier!r}: {conflict.winner} shadows {conflict.loser}",
            file=sys.stderr,
        )
