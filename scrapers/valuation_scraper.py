"""
Valuation model scraper.

Two sources, both rendered client-side and fetched through BrowserSession:

- valueinvesting.io intrinsic value page: one row per valuation model
  (range, selected value, upside) plus the discount-rate table.
- gurufocus.com WACC term page: the WACC/ROIC sentence and the worked
  calculation paragraphs (weights, cost of equity, cost of debt, tax rate).
"""

import re
from typing import Any, Optional

from bs4 import BeautifulSoup

from config.settings import settings
from config.logging_config import get_logger
from scrapers.base import BaseScraper
from scrapers.models import FairValueRow, ValuationResult, ValuationRow, WaccDetails
from scrapers.utils.html_table_parser import cell_text
from scrapers.utils.normalizer import parse_range, parse_value
from scrapers.utils.session_manager import BrowserSession, PageNotFoundError, check_page_content

logger = get_logger(__name__)

ALLOWED_METHODS = [
    "DCF (Growth 5y)",
    "DCF (Growth 10y)",
    "DCF (EBITDA 5y)",
    "DCF (EBITDA 10y)",
    "Fair Value",
    "P/E",
    "EV/EBITDA",
    "EPV",
    "DDM - Stable",
    "DDM - Multi",
]

# Discount-rate table label fragment -> ValuationResult attribute
DISCOUNT_RATE_LABELS = [
    ("Market risk premium", "market_risk_premium"),
    ("Cost of Equity", "cost_of_equity"),
    ("Cost of Debt", "cost_of_debt"),
    ("WACC", "wacc"),
]

SUMMARY_TABLE_MARKER = "each_summary"


def _is_thai(symbol: str) -> bool:
    return symbol.upper().endswith(".BK")


def base_ticker(symbol: str) -> str:
    """'AP.BK' -> 'AP'; other symbols unchanged."""
    return symbol[:-3] if _is_thai(symbol) else symbol


def gurufocus_symbol(symbol: str) -> str:
    """'AP.BK' -> 'BKK:AP'; other symbols unchanged."""
    if _is_thai(symbol):
        return f"BKK:{base_ticker(symbol).upper()}"
    return symbol


def valuation_symbol(symbol: str) -> str:
    """'ap.bk' -> 'AP.BK'; other symbols unchanged."""
    if _is_thai(symbol):
        return f"{base_ticker(symbol).upper()}.BK"
    return symbol


def valuation_url(symbol: str) -> str:
    return f"{settings.valueinvesting_base_url.rstrip('/')}/{valuation_symbol(symbol)}/valuation/intrinsic-value"


def wacc_url(symbol: str) -> str:
    return f"{settings.gurufocus_base_url.rstrip('/')}/term/wacc/{gurufocus_symbol(symbol)}"


# ===== valueinvesting.io =====

def parse_valuation_html(html: str, symbol: str) -> ValuationResult:
    """
    Parse the intrinsic value page.

    Only models listed in ALLOWED_METHODS are kept, in page order.
    """
    soup = BeautifulSoup(html, "lxml")
    result = ValuationResult(symbol=base_ticker(symbol))

    for row in soup.select("table.each_summary tr"):
        cells = row.find_all("td")
        if len(cells) != 4:
            continue

        method = cell_text(cells[0])
        if method not in ALLOWED_METHODS:
            continue

        value_min, value_max = _split_value_range(cell_text(cells[1]))
        result.valuation.append(
            ValuationRow(
                method=method,
                value_min=value_min,
                value_max=value_max,
                selected=parse_value(cell_text(cells[2])),
                upside=parse_value(cell_text(cells[3])),
            )
        )

    for row in soup.select("table.market_table.overview_table tr"):
        cells = row.find_all("td")
        if len(cells) < 2:
            continue

        label = cell_text(cells[0])
        value = parse_value(cell_text(cells[1]))
        for fragment, attribute in DISCOUNT_RATE_LABELS:
            if fragment in label:
                setattr(result, attribute, value)
                break

    return result


def parse_fair_value_table(html: str) -> list[FairValueRow]:
    """Parse the summary rows of the fair value table, keeping range and upside as text."""
    soup = BeautifulSoup(html, "lxml")
    table = []
    for row in soup.select("table.each_summary tbody tr.hover_gray"):
        cells = row.find_all("td")
        if len(cells) < 4:
            continue

        model = cell_text(cells[0])
        value_range = cell_text(cells[1])
        selected = parse_value(cell_text(cells[2]))
        if model and value_range and selected is not None:
            table.append(
                FairValueRow(
                    model=model,
                    range=value_range,
                    selected=selected,
                    upside=cell_text(cells[3]),
                )
            )
    return table


def _split_value_range(text: str) -> tuple[Optional[float], Optional[float]]:
    low, high = parse_range(text)
    if low is None and high is None and "-" in text:
        low_text, high_text = text.split("-", 1)
        return parse_value(low_text), parse_value(high_text)
    return low, high


# ===== gurufocus.com =====

def extract_float_after_equal(text: str) -> Optional[float]:
    """Number right after the first '=' ("Tax Rate = 20.5%" -> 20.5)."""
    match = re.search(r"=\s*([\d,]+\.?\d*)%?", text)
    return parse_value(match.group(1)) if match else None


def extract_float_from_text(text: str, label: str) -> Optional[float]:
    """First number following a label pattern."""
    match = re.search(rf"{label}.*?([\d,.]+)", text, re.IGNORECASE)
    return parse_value(match.group(1)) if match else None


def extract_last_float(text: str) -> Optional[float]:
    """Last number on the first line of text that carries one."""
    match = re.search(r"(\d+[,.]?\d*)(?!.*\d)", text)
    return parse_value(match.group(1)) if match else None


def extract_cost_of_equity_parts(text: str) -> Optional[list[float]]:
    """
    Split "Cost of Equity = 4.2 % + 1.1 * 6 % = 10.8%" into
    [risk free rate, beta, market premium, cost of equity].
    """
    match = re.search(
        r"Cost of Equity\s*=\s*([\d.]+)\s*%\s*\+\s*([\d.]+)\s*\*\s*([\d.]+)\s*%\s*=\s*([\d.]+)%",
        text,
    )
    return [float(n) for n in match.groups()] if match else None


def extract_cost_of_debt_parts(text: str) -> Optional[list[float]]:
    """
    Split the "Cost of Debt = 120 / 3000 = 4%" line into
    [interest expense, total debt, cost of debt].
    """
    for line in (line.strip() for line in text.split("\n")):
        if not line.startswith("Cost of Debt ="):
            continue
        match = re.search(r"=\s*([\d.]+)\s*/\s*([\d.]+)\s*=\s*([\d.]+)%", line)
        return [float(n) for n in match.groups()] if match else None
    return None


def parse_wacc_html(html: str, symbol: str) -> WaccDetails:
    """
    Parse a gurufocus WACC term page.

    The description paragraph carries the headline WACC and ROIC; the
    calculation paragraphs are, in order: weights (a/b), cost of equity (c),
    cost of debt, tax rate.
    """
    soup = BeautifulSoup(html, "lxml")
    details = WaccDetails(symbol=base_ticker(symbol))

    description_tag = soup.select_one("#target_def_description p")
    description = cell_text(description_tag) if description_tag else ""

    wacc_match = re.search(r"cost of capital (is|was)?\s*([\d.]+)%+", description, re.IGNORECASE)
    details.wacc = parse_value(wacc_match.group(2)) if wacc_match else None

    roic_match = re.search(r"ROIC.*?([\d.]+)%+", description, re.IGNORECASE)
    details.roic = parse_value(roic_match.group(1)) if roic_match else None

    paragraphs = [p.get_text() for p in soup.select("#target_def_calculation p.term_cal")]
    paragraphs += [""] * (4 - len(paragraphs))
    weights, equity, debt, tax = paragraphs[:4]

    details.market_cap_mil = extract_float_from_text(weights, "market capitalization.*?is")
    details.book_value_debt_mil = extract_float_from_text(weights, "Book Value of Debt.*?is")
    details.weight_equity = extract_last_float(_after(weights, "a)"))
    details.weight_debt = extract_last_float(_after(weights, "b)"))
    details.tax_rate = extract_float_after_equal(tax)

    equity_parts = extract_cost_of_equity_parts(_after(equity, "c)"))
    if equity_parts:
        details.risk_free_rate, details.beta, details.market_premium, details.cost_of_equity = equity_parts

    debt_parts = extract_cost_of_debt_parts(debt)
    if debt_parts:
        details.interest_expense, details.total_debt, details.cost_of_debt = debt_parts

    return details


def _after(text: str, marker: str) -> str:
    """Text after the first marker, or '' if the marker is absent."""
    parts = text.split(marker, 1)
    return parts[1] if len(parts) > 1 else ""


class ValuationScraper(BaseScraper):
    """Scraper for valuation models and WACC."""

    SCRAPER_NAME = "valuation_scraper"

    async def _scrape(self, symbol: Optional[str] = None, **kwargs) -> dict[str, Any]:
        """
        Fetch valuation models and WACC for one symbol.

        Either source may fail independently; failures are logged.
        """
        results: dict[str, Any] = {"valuation": None, "wacc": None}
        if not symbol:
            self.log_error("Symbol is required")
            return results

        async with BrowserSession() as browser:
            try:
                results["valuation"] = parse_valuation_html(await browser.get_page(valuation_url(symbol)), symbol)
                self.increment_scraped()
            except Exception as e:
                self.log_error(f"Failed to fetch valuation for {symbol}: {e}")

            try:
                results["wacc"] = parse_wacc_html(await browser.get_page(wacc_url(symbol)), symbol)
                self.increment_scraped()
            except Exception as e:
                self.log_error(f"Failed to fetch WACC for {symbol}: {e}")

        return results


async def get_valuation(symbol: str) -> ValuationResult:
    """
    Fetch valuation models and discount rates from valueinvesting.io.

    Standalone function for quick access.
    """
    async with BrowserSession() as browser:
        html = await browser.get_page(valuation_url(symbol))
    return parse_valuation_html(html, symbol)


async def get_fair_value_table(symbol: str) -> list[FairValueRow]:
    """
    Fetch the fair value summary table from valueinvesting.io.

    Raises:
        PageNotFoundError: The page has no summary table
    """
    url = valuation_url(symbol)
    async with BrowserSession() as browser:
        html = await browser.get_page(url)

    reason = check_page_content(200, html, SUMMARY_TABLE_MARKER)
    if reason:
        raise PageNotFoundError(url, reason)
    return parse_fair_value_table(html)


async def get_wacc_and_roic(symbol: str) -> WaccDetails:
    """
    Fetch WACC, ROIC and the WACC inputs from gurufocus.

    Standalone function for quick access.
    """
    async with BrowserSession() as browser:
        html = await browser.get_page(wacc_url(symbol))
    return parse_wacc_html(html, symbol)
