"""Target resolution for ``wren run``.

The target is either a template directory, served exactly as
``wren serve --templates DIR`` would serve it, or an import string
naming an App (or a factory returning one).
"""

import importlib
from pathlib import Path

from wren.app import App
from wren.config import AppConfig


def is_template_directory(target: str) -> bool:
    """Whether *target* names a template directory rather than a module.

    A directory holding ``__init__.py`` is a package, so ``wren run mysite``
    still imports ``mysite.app`` when run next to the package.
    """
    path = Path(target)
    return path.is_dir() and not (path / "__init__.py").is_file()


def resolve_app(target: str) -> App:
    """Resolve a ``wren run`` target to a wren App.

    ``"templates/"`` builds ``App(AppConfig.from_env(template_dir=...))``.
    ``"mysite:app"`` imports ``mysite`` and reads ``app``; the attribute
    defaults to ``app``.  A callable that is not an App is called once,
    as an app factory.

    Raises:
        ModuleNotFoundError: If the module cannot be imported.
        AttributeError: If the module has no such attribute.
        TypeError: If the target yields something other than an App.
        ConfigurationError: If ``WREN_*`` settings are invalid
            (template directory targets only).
    """
    if is_template_directory(target):
        return App(AppConfig.from_env(template_dir=target))

    module_name, _, attribute = target.partition(":")
    candidate = getattr(importlib.import_module(module_name), attribute or "app")
    if isinstance(candidate, App):
        return candidate

    if callable(candidate):
        try:
            candidate = candidate()
        except Exception as exc:
            raise TypeError(f"App factory {target!r} failed: {exc}") from exc
        if isinstance(candidate, App):
            return candidate

    raise TypeError(f"{target!r} is a {type(candidate).__name__}, not a wren.App instance")
