"""Log handler setup for the ``wren`` command.

Library code only creates loggers under the ``wren`` namespace; it never
installs handlers.  The CLI calls :func:`configure_logging` once so
discovery and routing messages reach stderr.
"""

import logging
import sys

_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


class CLIHandler(logging.StreamHandler):
    """The stderr handler owned by :func:`configure_logging`."""

    def __init__(self) -> None:
        super().__init__(sys.stderr)
        self.setFormatter(logging.Formatter(_FORMAT))


def configure_logging(level: str | int = "info") -> logging.Logger:
    """Send ``wren.*`` records at *level* and above to stderr.

    Calling it again replaces the handler installed by the previous call
    instead of adding a second one.

    Raises:
        ValueError: *level* is not a known level name.
    """
    if isinstance(level, str):
        levels = logging.getLevelNamesMapping()
        try:
            level = levels[level.upper()]
        except KeyError:
            known = ", ".join(name.lower() for name in sorted(levels, key=levels.__getitem__))
            raise ValueError(f"Unknown log level {level!r}, expected one of: {known}") from None

    root = logging.getLogger("wren")
    for handler in [h for h in root.handlers if isinstance(h, CLIHandler)]:
        root.removeHandler(handler)
    root.addHandler(CLIHandler())
    root.setLevel(level)
    return root
