# SPDX-License-Identifier: MIT

import logging

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "fourd"


def configure_logging(level: str | int = "WARNING") -> logging.Logger:
    """
    Attach a RichHandler (stderr) to the package logger.

    Safe to call more than once: an existing handler is reused and only the
    level changes.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    if isinstance(level, str):
        level = level.upper()
    logger.setLevel(level)

    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
        logger.addHandler(handler)

    return logger
