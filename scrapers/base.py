"""
Common run wrapper for the page scrapers.

A scraper implements `_scrape`; `run` times it, collects the errors it
records along the way and reports one of three statuses:

- success: `_scrape` returned and logged no errors
- partial_success: `_scrape` returned but some pages failed
- failed: `_scrape` raised
"""

import time
from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx

from config.logging_config import get_logger
from scrapers.utils.session_manager import StockAnalysisSession

logger = get_logger(__name__)

STATUS_SUCCESS = "success"
STATUS_PARTIAL = "partial_success"
STATUS_FAILED = "failed"


class BaseScraper(ABC):
    """Abstract base class for the snapshot scrapers."""

    SCRAPER_NAME: str = "base_scraper"

    def __init__(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        rate_limit: Optional[float] = None,
    ):
        """
        Args:
            transport: httpx transport for every session this scraper opens
            rate_limit: Seconds between requests, overriding settings
        """
        self.transport = transport
        self.rate_limit = rate_limit
        self.records_scraped = 0
        self.errors: list[str] = []

    def http_session(self) -> StockAnalysisSession:
        return StockAnalysisSession(rate_limit=self.rate_limit, transport=self.transport)

    async def run(self, **kwargs) -> dict[str, Any]:
        """
        Run `_scrape` and report how it went. Never raises.

        Returns:
            Dict with status, records_scraped, duration_seconds, errors and
            result (None when the scrape failed)
        """
        self.records_scraped = 0
        self.errors = []
        started = time.monotonic()
        logger.info(f"Starting {self.SCRAPER_NAME} with {kwargs}")

        result = None
        try:
            result = await self._scrape(**kwargs)
        except Exception as e:
            logger.error(f"{self.SCRAPER_NAME} failed: {e}")
            self.errors.append(str(e))
            status = STATUS_FAILED
        else:
            status = STATUS_PARTIAL if self.errors else STATUS_SUCCESS

        duration = time.monotonic() - started
        logger.info(
            f"{self.SCRAPER_NAME} finished: status={status}, "
            f"records={self.records_scraped}, errors={len(self.errors)}, "
            f"duration={duration:.2f}s"
        )

        return {
            "status": status,
            "records_scraped": self.records_scraped,
            "duration_seconds": duration,
            "errors": list(self.errors),
            "result": result,
        }

    @abstractmethod
    async def _scrape(self, **kwargs) -> Any:
        """Fetch and parse pages; record recoverable failures with log_error."""

    def log_error(self, error: str) -> None:
        self.errors.append(error)
        logger.error(f"{self.SCRAPER_NAME}: {error}")

    def increment_scraped(self, count: int = 1) -> None:
        self.records_scraped += count
