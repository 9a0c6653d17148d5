"""
Logging helpers.

Every argot module logs through logging.getLogger(__name__), so all records
land under the "argot" logger. The package stays silent by default (a
NullHandler is attached); setup() wires a rich handler for interactive use.
"""
import logging

from rich.console import Console
from rich.logging import RichHandler

from .faults import console

logger = logging.getLogger("argot")
logger.addHandler(logging.NullHandler())


def setup(level="WARNING", /, *, colorful=True):
    """
    Route argot's log records to stderr through rich.

    Calling it again replaces the handler installed by the previous call.
    Returns the "argot" logger.
    """
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    handler = RichHandler(
        console=console if colorful else Console(stderr=True, no_color=True),
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger


__all__ = (
    "setup",
)
