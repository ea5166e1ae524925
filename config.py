"""
config.py
File locations and log level. Each setting can be overridden through an
environment variable.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent


def _path_setting(key: str, default: Path) -> Path:
    value = os.getenv(key)
    if value is None or not value.strip():
        return default
    return Path(value.strip()).expanduser()


def _log_level_setting(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    level = logging.getLevelName(value.strip().upper())
    # getLevelName returns a "Level X" string for unknown names
    return level if isinstance(level, int) else default


DATA_FILE = _path_setting("EZFOODIE_DATA_FILE", BASE_DIR / "data" / "ezfoodie.json")
LOG_DIR = _path_setting("EZFOODIE_LOG_DIR", BASE_DIR / "data" / "logs")
LOG_LEVEL = _log_level_setting("EZFOODIE_LOG_LEVEL", logging.INFO)
