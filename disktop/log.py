from __future__ import annotations
import logging
from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "disktop"

def level_for(verbosity: int) -> int:
    if verbosity >= 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING

def setup_logging(verbosity: int = 0) -> logging.Logger:
    """Route the ``disktop`` loggers to stderr through Rich."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level_for(verbosity))
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()

    handler = RichHandler(console=Console(stderr=True, soft_wrap=True),
                          show_path=False, markup=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
