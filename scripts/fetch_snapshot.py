#!/usr/bin/env python
"""
Fetch a stock snapshot and print it as JSON.

Useful for checking selectors against the live sites:

    python scripts/fetch_snapshot.py AAPL --statement Ratios --period Quarterly
    python scripts/fetch_snapshot.py AP.BK --statistics --valuation
"""

import asyncio
import json
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from config.logging_config import setup_logging, get_logger
from scrapers.financials_scraper import PERIOD_TYPES, STATEMENT_TYPES, get_stock_financials_v2
from scrapers.overview_scraper import get_stock_overview
from scrapers.statistics_scraper import get_stock_statistics
from scrapers.valuation_scraper import get_fair_value_table, get_valuation, get_wacc_and_roic

logger = get_logger(__name__)


async def fetch_snapshot(
    symbol: str,
    statement: str,
    period: str,
    statistics: bool = False,
    valuation: bool = False,
) -> dict[str, Any]:
    """Fetch overview and one statement, plus optional statistics and valuation."""
    setup_logging()
    logger.info(f"Fetching snapshot for {symbol}")

    snapshot: dict[str, Any] = {
        "symbol": symbol,
        "overview": (await get_stock_overview(symbol)).to_dict(),
        "financials": await get_stock_financials_v2(symbol, statement, period),
    }

    if statistics:
        snapshot["statistics"] = (await get_stock_statistics(symbol)).to_dict()

    if valuation:
        snapshot["valuation"] = asdict(await get_valuation(symbol))
        snapshot["fair_value"] = [asdict(row) for row in await get_fair_value_table(symbol)]
        snapshot["wacc"] = asdict(await get_wacc_and_roic(symbol))

    return snapshot


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Fetch a stock snapshot as JSON")
    parser.add_argument("symbol", help="Ticker, e.g. AAPL, AP.BK or BKK:AP")
    parser.add_argument("--statement", choices=STATEMENT_TYPES, default="Income")
    parser.add_argument("--period", choices=PERIOD_TYPES, default="Annual")
    parser.add_argument("--statistics", action="store_true", help="Include the statistics page")
    parser.add_argument("--valuation", action="store_true", help="Include valuation models and WACC")

    args = parser.parse_args()

    result = asyncio.run(
        fetch_snapshot(
            args.symbol,
            args.statement,
            args.period,
            statistics=args.statistics,
            valuation=args.valuation,
        )
    )
    print(json.dumps(result, indent=2, default=str))
