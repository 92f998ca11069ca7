from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "dndcalc"


def setup_logging(level: str = "WARNING") -> logging.Logger:
    """Attach a single rich console handler to the package logger."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper())

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(
            console=Console(stderr=True),
            show_time=False,
            rich_tracebacks=True,
            log_time_format="[%X]",
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)

    # Keep records out of the root logger so they are not printed twice.
    logger.propagate = False
    return logger
