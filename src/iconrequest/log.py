"""Logging setup shared by the library and the CLI."""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "iconrequest"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the ``iconrequest`` namespace."""
    if not name or name == LOGGER_NAME:
        return logging.getLogger(LOGGER_NAME)
    if name.startswith(f"{LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def configure_logging(level: int | str = logging.INFO, console: Console | None = None) -> None:
    """
    Attach a rich handler to the package logger.

    Safe to call more than once; the handler is only installed the first time.

    Args:
        level: Log level for the package logger
        console: Rich console to render to (defaults to stderr)
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    if any(isinstance(h, RichHandler) for h in logger.handlers):
        return

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
