"""
Quote overview scraper.

Reads the current price and the two overview tables ("overview-info" and
"overview-quote") from a stockanalysis.com quote page.
"""

from typing import Any, Optional

from bs4 import BeautifulSoup

from config.logging_config import get_logger
from scrapers.base import BaseScraper
from scrapers.market import overview_url
from scrapers.models import StockOverview
from scrapers.utils.field_map import OVERVIEW_FIELD_MAP, OVERVIEW_TEXT_FIELDS, dispatch_fields
from scrapers.utils.html_table_parser import extract_label_rows
from scrapers.utils.normalizer import parse_price_target, parse_range, parse_value

logger = get_logger(__name__)

PRICE_SELECTOR = "div.text-4xl.font-bold"
PERFORMANCE_SELECTOR = "div.flex.shrink.flex-row.space-x-1 span"
OVERVIEW_TABLES = (
    "table[data-test='overview-info']",
    "table[data-test='overview-quote']",
)


def parse_overview_html(html: str) -> StockOverview:
    """
    Parse a quote page into a StockOverview.

    Missing rows leave their fields as None.
    """
    soup = BeautifulSoup(html, "lxml")

    rows = []
    for selector in OVERVIEW_TABLES:
        rows.extend(extract_label_rows(soup, selector))

    data: dict[str, Any] = dispatch_fields(rows, OVERVIEW_FIELD_MAP, OVERVIEW_TEXT_FIELDS)

    price_tag = soup.select_one(PRICE_SELECTOR)
    data["price"] = parse_value(price_tag.get_text(strip=True)) if price_tag else None

    performance_tag = soup.select_one(PERFORMANCE_SELECTOR)
    performance = performance_tag.get_text(strip=True) if performance_tag else ""
    data["performance_1y"] = performance or None

    data["low_52_week"], data["high_52_week"] = parse_range(data.get("range_52_week"))
    data["price_target_price"], data["upside_percent"] = parse_price_target(data.get("price_target"))

    return StockOverview.from_dict(data)


class OverviewScraper(BaseScraper):
    """Scraper for the quote overview page."""

    SCRAPER_NAME = "overview_scraper"

    async def _scrape(self, symbol: Optional[str] = None, **kwargs) -> Optional[StockOverview]:
        if not symbol:
            self.log_error("Symbol is required")
            return None

        overview = await self.fetch_overview(symbol)
        self.increment_scraped()
        return overview

    async def fetch_overview(self, symbol: str) -> StockOverview:
        """Fetch and parse the overview page for a symbol."""
        url = overview_url(symbol)
        async with self.http_session() as session:
            html = await session.get_page(url)

        overview = parse_overview_html(html)
        if overview.price is None:
            logger.warning(f"No price found on {url}")
        return overview


async def get_stock_overview(symbol: str) -> StockOverview:
    """
    Fetch the quote overview for a symbol.

    Standalone function for quick access.
    """
    return await OverviewScraper().fetch_overview(symbol)
