"""Shared fixtures: on-disk template and public trees."""

import logging
from collections.abc import Callable
from pathlib import Path

import pytest
from kida import Environment, FileSystemLoader

from wren.config import AppConfig
from wren.templating.registry import TemplateRegistry


def write_tree(root: Path, files: dict[str, str | bytes]) -> Path:
    """Create *files* (relative path -> contents) under *root*."""
    root.mkdir(parents=True, exist_ok=True)
    for relative, contents in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(contents, bytes):
            path.write_bytes(contents)
        else:
            path.write_text(contents)
    return root


@pytest.fixture(autouse=True)
def _restore_wren_logger():
    """Undo handlers and levels installed by ``configure_logging``."""
    logger = logging.getLogger("wren")
    handlers = list(logger.handlers)
    level = logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[..., Path]:
    """Factory: ``make_tree("templates", {"index.html": "..."})``."""

    def _make(name: str, files: dict[str, str | bytes]) -> Path:
        return write_tree(tmp_path / name, files)

    return _make


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """A small site: pages, a nested section, a 404 page."""
    return write_tree(
        tmp_path / "templates",
        {
            "index.html": "<h1>Home</h1>",
            "about.html.hbs": "<h1>About</h1>",
            "blog/index.html": "<h1>Blog</h1>",
            "blog/first-post.html": "<h1>First</h1>",
            "feed.xml.hbs": "<rss></rss>",
            "pages/about.html": "<h1>Pages About</h1>",
            "404.html": "<h1>Missing: {{ message }}</h1>",
        },
    )


@pytest.fixture
def public_dir(tmp_path: Path) -> Path:
    return write_tree(
        tmp_path / "public",
        {
            "missing.txt": "served from public",
            "style.css": "body { color: red; }",
            "docs/index.html": "<h1>Static Docs</h1>",
        },
    )


@pytest.fixture
def registry(template_dir: Path) -> TemplateRegistry:
    return TemplateRegistry.discover(template_dir)


@pytest.fixture
def env(template_dir: Path) -> Environment:
    return Environment(loader=FileSystemLoader(str(template_dir)), autoescape=True)


@pytest.fixture
def site_config(template_dir: Path, public_dir: Path) -> AppConfig:
    return AppConfig(template_dir=template_dir, public_dir=public_dir)
