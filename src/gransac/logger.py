"""Logging utilities."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional

LOG_LEVEL_ENV = "GRANSAC_LOG_LEVEL"


def level_from_env(default: int = logging.INFO) -> int:
    """
    Read the log level name (DEBUG, INFO, ...) from GRANSAC_LOG_LEVEL.
    Unknown names fall back to default.
    """
    name = os.environ.get(LOG_LEVEL_ENV, "").strip().upper()
    if not name:
        return default
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else default


def setup_logger(name: str = "gransac", log_level: Optional[int] = None,
                 log_file: Optional[str] = None) -> logging.Logger:
    """Setup logger with console and optional file handler."""
    logger = logging.getLogger(name)
    logger.setLevel(level_from_env() if log_level is None else log_level)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # repeated setup must not duplicate output
    for handler in list(logger.handlers):
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)
            handler.close()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
