"""Logging setup for the svcinfo command-line tool.

Library modules only create loggers; handlers are installed here.
"""

import logging
from contextlib import suppress

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "svcinfo"


def setup_logging(level: int = logging.WARNING, console: Console | None = None) -> None:
    """Send svcinfo log records to stderr through rich."""
    root = logging.getLogger(ROOT_LOGGER)
    _close_handlers(root)
    root.setLevel(level)
    root.propagate = False

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=level <= logging.DEBUG,
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root.addHandler(handler)


def _close_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        with suppress(Exception):
            handler.close()
