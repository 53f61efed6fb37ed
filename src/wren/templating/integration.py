"""Kida environment setup and handle rendering.

Creates a kida Environment rooted at the template directory. The
environment is created once during ``App._freeze()`` and shared by
every handler in the chain.
"""

from collections.abc import Mapping
from typing import Any

from kida import Environment, FileSystemLoader

from wren.config import AppConfig
from wren.templating.registry import TemplateHandle


def create_environment(config: AppConfig) -> Environment:
    """Create a kida Environment from app configuration.

    Templates are loaded by their path relative to
    ``config.template_dir``, which is exactly ``TemplateHandle.template_name``.
    Auto-reload stays off: the registry is fixed for the process lifetime.
    """
    return Environment(
        loader=FileSystemLoader(str(config.template_dir)),
        autoescape=config.autoescape,
        auto_reload=False,
        trim_blocks=config.trim_blocks,
        lstrip_blocks=config.lstrip_blocks,
    )


def render_handle(
    env: Environment,
    handle: TemplateHandle,
    context: Mapping[str, Any] | None = None,
) -> str:
    """Render a discovered template to string."""
    template = env.get_template(handle.template_name)
    return template.render(dict(context or {}))
