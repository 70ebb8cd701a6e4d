"""
Logging setup for the quiz platform.

Every module logs through ``logging.getLogger(__name__)``; this installs a
single console handler on the package logger so the API process and
embedded engines share one format.
"""

import logging
from typing import Optional

from coursequiz.core.config import settings

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'


def setup_logging(log_level: Optional[str] = None) -> logging.Logger:
    """
    Configure the ``coursequiz`` logger.

    Args:
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR).
            Falls back to ``settings.LOG_LEVEL``.

    Returns:
        The configured package logger.
    """
    if log_level is None:
        log_level = settings.LOG_LEVEL

    level = getattr(logging, log_level.upper(), logging.INFO)

    logger = logging.getLogger('coursequiz')
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
    logger.addHandler(handler)

    return logger
