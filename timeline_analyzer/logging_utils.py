"""Logging setup shared by the scripts and the demo UI."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from timeline_analyzer.config import LOGGING_CONFIG

_ROOT_LOGGER = "timeline_analyzer"


def setup_logging(level: Optional[str] = None, log_file: Optional[Path] = None) -> logging.Logger:
    """Configure the package logger with a console handler and an optional file handler."""

    level_name = (level or LOGGING_CONFIG['level']).upper()
    numeric_level = logging.getLevelName(level_name)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level_name}")

    logger = logging.getLogger(_ROOT_LOGGER)
    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()
    logger.propagate = False

    fmt = logging.Formatter(LOGGING_CONFIG['format'])

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(numeric_level)
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    return logger
