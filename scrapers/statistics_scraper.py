"""
Statistics page scraper.

The statistics page groups ~70 "label | value" rows into several tables
marked data-test="statistics-table". Rows are mapped onto StockStatistics
through STATISTICS_FIELD_MAP.
"""

from typing import Optional

from bs4 import BeautifulSoup

from config.logging_config import get_logger
from scrapers.base import BaseScraper
from scrapers.market import statistics_url
from scrapers.models import StockStatistics
from scrapers.utils.html_table_parser import extract_label_rows
from scrapers.utils.field_map import STATISTICS_FIELD_MAP, STATISTICS_TEXT_FIELDS, dispatch_fields

logger = get_logger(__name__)

STATISTICS_TABLE_MARKER = 'data-test="statistics-table"'
STATISTICS_TABLE_SELECTOR = "table[data-test='statistics-table']"


def parse_statistics_html(html: str) -> StockStatistics:
    """Parse a statistics page into StockStatistics."""
    soup = BeautifulSoup(html, "lxml")
    rows = extract_label_rows(soup, STATISTICS_TABLE_SELECTOR)
    data = dispatch_fields(rows, STATISTICS_FIELD_MAP, STATISTICS_TEXT_FIELDS)
    return StockStatistics.from_dict(data)


class StatisticsScraper(BaseScraper):
    """Scraper for the statistics page."""

    SCRAPER_NAME = "statistics_scraper"

    async def _scrape(self, symbol: Optional[str] = None, **kwargs) -> Optional[StockStatistics]:
        if not symbol:
            self.log_error("Symbol is required")
            return None

        statistics = await self.fetch_statistics(symbol)
        self.increment_scraped()
        return statistics

    async def fetch_statistics(self, symbol: str) -> StockStatistics:
        """
        Fetch and parse the statistics page for a symbol.

        Raises:
            PageNotFoundError: The page has no statistics table
        """
        url = statistics_url(symbol)
        async with self.http_session() as session:
            html = await session.get_page_safe(url, required_marker=STATISTICS_TABLE_MARKER)

        return parse_statistics_html(html)


async def get_stock_statistics(symbol: str) -> StockStatistics:
    """
    Fetch the statistics snapshot for a symbol.

    Standalone function for quick access.
    """
    return await StatisticsScraper().fetch_statistics(symbol)
