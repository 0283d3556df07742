"""Scraper utility modules."""

from scrapers.utils.session_manager import (
    StockAnalysisSession,
    BrowserSession,
    PageNotFoundError,
    check_page_content,
)
from scrapers.utils.normalizer import (
    normalize_cell,
    normalize_key,
    parse_value,
    unit_multiplier,
    RATIO_KEYWORDS,
)
from scrapers.utils.field_map import dispatch_fields, STATISTICS_FIELD_MAP, OVERVIEW_FIELD_MAP
from scrapers.utils.html_table_parser import (
    parse_financial_html_table,
    parse_period_label,
    reshape,
)

__all__ = [
    "StockAnalysisSession",
    "BrowserSession",
    "PageNotFoundError",
    "check_page_content",
    "normalize_cell",
    "normalize_key",
    "parse_value",
    "unit_multiplier",
    "RATIO_KEYWORDS",
    "dispatch_fields",
    "STATISTICS_FIELD_MAP",
    "OVERVIEW_FIELD_MAP",
    "parse_financial_html_table",
    "parse_period_label",
    "reshape",
]
