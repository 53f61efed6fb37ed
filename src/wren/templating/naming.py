"""Template identifiers from file paths.

A template identifier is the template's path relative to the template
root with every suffix removed from the final component::

    "index.html.hbs"        -> "index"
    "blog/post.html"        -> "blog/post"
    "blog/archive"          -> "blog/archive"

Identifiers always use ``/`` as the separator, whatever the host OS.
"""

from pathlib import PurePath

from wren.errors import MalformedTemplateName


def strip_extensions(relative_path: str | PurePath) -> str:
    """Return the template identifier for *relative_path*.

    While the final component contains a ``.``, it is replaced by the
    text before the first ``.``.  Compound suffixes therefore disappear
    entirely rather than one at a time.

    Raises:
        MalformedTemplateName: If the final component is empty once
            stripped (``.hbs``, ``...``) or the path is empty.
    """
    parts = list(PurePath(relative_path).parts)
    if not parts:
        raise MalformedTemplateName(relative_path)

    name = parts[-1]
    while "." in name:
        name = name.split(".", 1)[0]
    if not name:
        raise MalformedTemplateName(relative_path)

    parts[-1] = name
    return "/".join(parts)
