"""
Financial statements scraper.

Fetches income statement, balance sheet, cash flow and ratio pages in
annual, quarterly or trailing form, and returns them either column-oriented
(as displayed) or as one record per period.
"""

from typing import Any, Optional

from config.logging_config import get_logger
from scrapers.base import BaseScraper
from scrapers.market import clean_symbol, financials_url
from scrapers.models import FinancialStatement
from scrapers.utils.html_table_parser import parse_financial_html_table

logger = get_logger(__name__)

STATEMENT_TYPES = ("Income", "Balance Sheet", "Cash Flow", "Ratios")
PERIOD_TYPES = ("Annual", "Quarterly", "TTM")


def parse_statement_html(
    html: str,
    symbol: str,
    statement_type: str = "Income",
    period_type: str = "Annual",
) -> FinancialStatement:
    """Parse a statement page into a FinancialStatement (empty if no table)."""
    parsed = parse_financial_html_table(html)
    statement = FinancialStatement(
        symbol=clean_symbol(symbol),
        statement_type=statement_type,
        period_type=period_type,
    )
    if parsed is None:
        return statement

    statement.unit = parsed["unit"]
    statement.fiscal_year = parsed["fiscal_year"]
    statement.period_ending = parsed["period_ending"]
    statement.financials = parsed["financials"]
    return statement


class FinancialsScraper(BaseScraper):
    """Scraper for statement pages."""

    SCRAPER_NAME = "financials_scraper"

    async def _scrape(
        self,
        symbol: Optional[str] = None,
        statement_types: tuple[str, ...] = STATEMENT_TYPES,
        period_type: str = "Annual",
        **kwargs,
    ) -> dict[str, list[dict[str, Any]]]:
        """
        Fetch several statements for one symbol as period records.

        A statement that fails is logged and skipped.

        Returns:
            Statement type -> period records
        """
        results: dict[str, list[dict[str, Any]]] = {}
        if not symbol:
            self.log_error("Symbol is required")
            return results

        for statement_type in statement_types:
            try:
                statement = await self.fetch_statement(symbol, statement_type, period_type)
            except Exception as e:
                self.log_error(f"Failed to fetch {statement_type} for {symbol}: {e}")
                continue

            records = statement.to_records()
            results[statement_type] = records
            self.increment_scraped(len(records))

        return results

    async def fetch_statement(
        self,
        symbol: str,
        statement_type: str = "Income",
        period_type: str = "Annual",
    ) -> FinancialStatement:
        """Fetch and parse one statement page."""
        url = financials_url(symbol, statement_type, period_type)
        async with self.http_session() as session:
            html = await session.get_page(url)

        statement = parse_statement_html(html, symbol, statement_type, period_type)
        if not statement.fiscal_year:
            logger.warning(f"No periods found on {url}")
        return statement


async def get_stock_financials(
    symbol: str,
    statement_type: str = "Income",
    period_type: str = "Annual",
) -> FinancialStatement:
    """
    Fetch a statement in column form, keyed by the row labels as displayed.

    Standalone function for quick access.
    """
    return await FinancialsScraper().fetch_statement(symbol, statement_type, period_type)


async def get_stock_financials_v2(
    symbol: str,
    statement_type: str = "Income",
    period_type: str = "Annual",
) -> list[dict[str, Any]]:
    """
    Fetch a statement as one record per period.

    Each record carries fiscalYear, quarter and year plus every row under
    its normalized key.
    """
    statement = await get_stock_financials(symbol, statement_type, period_type)
    return statement.to_records()
