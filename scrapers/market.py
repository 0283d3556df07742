"""
Symbol routing for stockanalysis.com.

Thai listings are written "BKK:AP" or "AP.BK" and live under /quote/bkk/;
everything else is treated as a US ticker under /stocks/.
"""

import re
from typing import Literal, Optional

from config.settings import settings

Market = Literal["bkk", "us"]

STATEMENT_PATHS = {
    "Income": "financials/",
    "Balance Sheet": "financials/balance-sheet/",
    "Cash Flow": "financials/cash-flow-statement/",
    "Ratios": "financials/ratios/",
}

PERIOD_QUERIES = {
    "Annual": "",
    "Quarterly": "?p=quarterly",
    "TTM": "?p=trailing",
}

_BKK_SYMBOL_RE = re.compile(r"^(BKK:.+|.+\.BK)$", re.IGNORECASE)


def detect_market(symbol: str) -> Market:
    """Return 'bkk' for Thai symbols, 'us' otherwise."""
    if _BKK_SYMBOL_RE.match(symbol):
        return "bkk"
    return "us"


def clean_symbol(symbol: str) -> str:
    """Strip the BKK: prefix and .BK suffix; tickers are upper-cased."""
    ticker = re.sub(r"^BKK:", "", symbol.strip(), flags=re.IGNORECASE)
    return re.sub(r"\.BK$", "", ticker, flags=re.IGNORECASE).upper()


def base_url(symbol: str, base: Optional[str] = None) -> str:
    """Quote base URL for a symbol, with a trailing slash."""
    root = (base or settings.stockanalysis_base_url).rstrip("/")
    ticker = clean_symbol(symbol)
    if detect_market(symbol) == "bkk":
        return f"{root}/quote/bkk/{ticker}/"
    return f"{root}/stocks/{ticker.lower()}/"


def overview_url(symbol: str) -> str:
    return base_url(symbol)


def statistics_url(symbol: str) -> str:
    return f"{base_url(symbol)}statistics/"


def financials_url(symbol: str, statement_type: str = "Income", period_type: str = "Annual") -> str:
    """
    Statement page URL.

    Args:
        symbol: Raw symbol ("AAPL", "AP.BK", "BKK:AP")
        statement_type: Income, Balance Sheet, Cash Flow or Ratios
        period_type: Annual, Quarterly or TTM

    Raises:
        ValueError: Unknown statement or period type
    """
    if statement_type not in STATEMENT_PATHS:
        raise ValueError(f"Unknown statement type: {statement_type}")
    if period_type not in PERIOD_QUERIES:
        raise ValueError(f"Unknown period type: {period_type}")
    return f"{base_url(symbol)}{STATEMENT_PATHS[statement_type]}{PERIOD_QUERIES[period_type]}"
