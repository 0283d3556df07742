"""
Logging setup for scripts that drive the scrapers.

Library modules only call get_logger; configuring handlers is left to the
entry point (scripts, tests).
"""

import logging
import sys
from typing import Optional

from config.settings import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Chatty at INFO/DEBUG: one line per request or browser event
NOISY_LOGGERS = ("httpx", "httpcore", "asyncio")


def setup_logging(level: Optional[str] = None) -> None:
    """
    Send log records to stdout.

    Args:
        level: Level name such as "DEBUG"; defaults to settings.log_level
    """
    logging.basicConfig(
        level=getattr(logging, (level or settings.log_level).upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
