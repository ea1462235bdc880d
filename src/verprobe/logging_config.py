"""Logging setup for command-line use."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "verprobe"


def configure_logging(level: str = "WARNING", *, console: Console | None = None) -> logging.Logger:
    """Route verprobe log records to stderr through rich.

    Calling this again replaces the handler installed by a previous call.

    Args:
        level: Level name such as ``INFO`` or ``WARNING``; unknown names fall back to WARNING.
        console: Console to render into; defaults to a stderr console.

    Returns:
        logging.Logger: The configured package logger.
    """
    levelno = logging.getLevelName(level.upper())
    if not isinstance(levelno, int):
        levelno = logging.WARNING

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        show_time=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(levelno)
    return logger


__all__ = ["LOGGER_NAME", "configure_logging"]
