"""Settings and logging setup shared by the scrapers and scripts."""

from config.settings import settings, get_settings
from config.logging_config import setup_logging, get_logger

__all__ = ["settings", "get_settings", "setup_logging", "get_logger"]
