"""
logger.py
Application-wide logging setup.
"""

from __future__ import annotations

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

import config

LOGGER_NAME = "ezfoodie"


def setup_logger(level: int | None = None, log_dir: Path | None = None) -> logging.Logger:
    """
    Configure the "ezfoodie" logger once.

    - Daily rotating log file, 7 days kept
    - Console output with the same format
    Module loggers ("ezfoodie.storage", "ezfoodie.logic", ...) propagate here.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(config.LOG_LEVEL if level is None else level)

    # Calling setup_logger() again must not duplicate output
    if logger.handlers:
        return logger

    log_dir = config.LOG_DIR if log_dir is None else log_dir
    log_dir.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    file_handler = TimedRotatingFileHandler(
        filename=log_dir / "ezfoodie.log",
        when="midnight",
        interval=1,
        backupCount=7,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    logger.info("Logger initialized (level %s)", logging.getLevelName(logger.level))
    return logger
