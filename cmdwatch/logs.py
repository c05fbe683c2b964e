"""Logging setup for cmdwatch.

curses owns the terminal while cmdwatch runs, so log records are only ever
written to a file. Without a configured file the package logger gets a
NullHandler, which also keeps the logging module's last-resort stderr handler
from scribbling over the screen.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

LOGGER_NAME = "cmdwatch"
LOG_FORMAT = "[%(asctime)s] %(levelname)s - %(message)s"
DATE_FORMAT = "%H:%M:%S"


def configure_logging(log_config: dict[str, Any]) -> logging.Logger:
    """Attach exactly one handler to the ``cmdwatch`` logger and return it."""
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = False

    log_file = str(log_config.get("file") or "")
    if not log_file:
        logger.addHandler(logging.NullHandler())
        return logger

    handler = logging.FileHandler(Path(log_file).expanduser(), encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(str(log_config.get("level", "INFO")).upper())
    return logger
