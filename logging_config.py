import logging
from logging import Logger
from typing import Optional

from config import Settings, settings as default_settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Driver and hashing libraries are chatty below WARNING
QUIET_LOGGERS = ("pymongo", "passlib")


def resolve_level(name: str) -> int:
    level = logging.getLevelName((name or "").upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(settings: Optional[Settings] = None) -> Logger:
    """Configure the root logger from LOG_LEVEL and return the app logger."""
    settings = settings or default_settings
    level = resolve_level(settings.log_level)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    logger = logging.getLogger("habit_tracker")
    logger.setLevel(level)
    return logger
