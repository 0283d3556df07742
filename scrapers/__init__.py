"""Scrapers module for stock overviews, statements, statistics and valuations."""

from scrapers.base import BaseScraper
from scrapers.overview_scraper import OverviewScraper, get_stock_overview
from scrapers.financials_scraper import (
    FinancialsScraper,
    get_stock_financials,
    get_stock_financials_v2,
)
from scrapers.statistics_scraper import StatisticsScraper, get_stock_statistics
from scrapers.valuation_scraper import (
    ValuationScraper,
    get_fair_value_table,
    get_valuation,
    get_wacc_and_roic,
)
from scrapers.market import detect_market, clean_symbol

__all__ = [
    "BaseScraper",
    "OverviewScraper",
    "FinancialsScraper",
    "StatisticsScraper",
    "ValuationScraper",
    "get_stock_overview",
    "get_stock_financials",
    "get_stock_financials_v2",
    "get_stock_statistics",
    "get_valuation",
    "get_fair_value_table",
    "get_wacc_and_roic",
    "detect_market",
    "clean_symbol",
]
