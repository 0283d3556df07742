"""
Label-to-field mappings for snapshot pages.

Statistics and overview pages are two-column tables of "label | value".
Each mapping lists, per canonical field, the exact label texts that feed it.
Adding or auditing a field is a change to these tables only.
"""

from typing import Iterable, Optional, Union

from scrapers.utils.normalizer import parse_value

SnapshotValue = Union[float, str, None]

# ===== STATISTICS PAGE =====
STATISTICS_FIELD_MAP = {
    # Valuation
    "market_cap": ["Market Cap"],
    "enterprise_value": ["Enterprise Value"],
    # Important dates
    "earnings_date": ["Earnings Date"],
    "ex_dividend_date": ["Ex-Dividend Date"],
    # Share statistics
    "shares_outstanding": ["Shares Outstanding"],
    "shares_change_yoy": ["Shares Change (YoY)"],
    "shares_change_qoq": ["Shares Change (QoQ)"],
    "owned_by_institutions": ["Owned by Institutions (%)"],
    # Valuation ratios
    "pe_ratio": ["PE Ratio"],
    "forward_pe_ratio": ["Forward PE"],
    "ps_ratio": ["PS Ratio"],
    "pb_ratio": ["PB Ratio"],
    "ptbv_ratio": ["P/TBV Ratio"],
    "pfcf_ratio": ["P/FCF Ratio"],
    "pocf_ratio": ["P/OCF Ratio"],
    "peg_ratio": ["PEG Ratio"],
    # Enterprise valuation
    "ev_earnings": ["EV / Earnings"],
    "ev_sales": ["EV / Sales"],
    "ev_ebitda": ["EV / EBITDA"],
    "ev_ebit": ["EV / EBIT"],
    "ev_fcf": ["EV / FCF"],
    # Financial position
    "current_ratio": ["Current Ratio"],
    "quick_ratio": ["Quick Ratio"],
    "debt_to_equity": ["Debt / Equity"],
    "debt_to_ebitda": ["Debt / EBITDA"],
    "debt_to_fcf": ["Debt / FCF"],
    "interest_coverage": ["Interest Coverage"],
    # Financial efficiency
    "return_on_equity": ["Return on Equity (ROE)"],
    "return_on_assets": ["Return on Assets (ROA)"],
    "return_on_invested_capital": ["Return on Invested Capital (ROIC)"],
    "return_on_capital_employed": ["Return on Capital Employed (ROCE)"],
    # Stock price statistics
    "beta_5y": ["Beta (5Y)"],
    "price_change_52w": ["52-Week Price Change"],
    "moving_average_50d": ["50-Day Moving Average"],
    "moving_average_200d": ["200-Day Moving Average"],
    "rsi": ["Relative Strength Index (RSI)"],
    "average_volume_20d": ["Average Volume (20 Days)"],
    # Income statement
    "revenue": ["Revenue"],
    "gross_profit": ["Gross Profit"],
    "operating_income": ["Operating Income"],
    "pretax_income": ["Pretax Income"],
    "net_income": ["Net Income"],
    "ebitda": ["EBITDA"],
    "ebit": ["EBIT"],
    "eps": ["Earnings Per Share (EPS)"],
    # Balance sheet
    "cash": ["Cash & Cash Equivalents"],
    "total_debt": ["Total Debt"],
    "net_cash": ["Net Cash"],
    "net_cash_per_share": ["Net Cash Per Share"],
    "book_value": ["Equity (Book Value)"],
    "book_value_per_share": ["Book Value Per Share"],
    "working_capital": ["Working Capital"],
    # Cash flow
    "operating_cash_flow": ["Operating Cash Flow"],
    "capital_expenditures": ["Capital Expenditures"],
    "free_cash_flow": ["Free Cash Flow"],
    "free_cash_flow_per_share": ["FCF Per Share"],
    # Margins
    "gross_margin": ["Gross Margin"],
    "operating_margin": ["Operating Margin"],
    "pretax_margin": ["Pretax Margin"],
    "profit_margin": ["Profit Margin"],
    "ebitda_margin": ["EBITDA Margin"],
    "ebit_margin": ["EBIT Margin"],
    "fcf_margin": ["FCF Margin"],
    # Dividends & yields
    "dividend_per_share": ["Dividend Per Share"],
    "dividend_yield": ["Dividend Yield"],
    "dividend_growth": ["Dividend Growth (YoY)"],
    "payout_ratio": ["Payout Ratio"],
    "buyback_yield": ["Buyback Yield"],
    "shareholder_yield": ["Shareholder Yield"],
    "earnings_yield": ["Earnings Yield"],
    "fcf_yield": ["FCF Yield"],
    # Scores
    "altman_z_score": ["Altman Z-Score"],
    "piotroski_f_score": ["Piotroski F-Score"],
}

STATISTICS_TEXT_FIELDS = {"earnings_date", "ex_dividend_date"}

# ===== OVERVIEW PAGE =====
OVERVIEW_FIELD_MAP = {
    "market_cap": ["Market Cap"],
    "revenue": ["Revenue (ttm)"],
    "net_income": ["Net Income (ttm)"],
    "shares_outstanding": ["Shares Out"],
    "eps": ["EPS (ttm)"],
    "pe_ratio": ["PE Ratio"],
    "forward_pe_ratio": ["Forward PE"],
    "dividend": ["Dividend"],
    "ex_dividend_date": ["Ex-Dividend Date"],
    "earnings_date": ["Earnings Date"],
    "volume": ["Volume"],
    "open": ["Open"],
    "previous_close": ["Previous Close"],
    "days_range": ["Day's Range"],
    "range_52_week": ["52-Week Range"],
    "beta": ["Beta"],
    "analysts": ["Analysts"],
    "price_target": ["Price Target"],
}

# Overview keeps unit-bearing amounts as displayed ("3.31T")
OVERVIEW_TEXT_FIELDS = {
    "market_cap",
    "revenue",
    "net_income",
    "shares_outstanding",
    "dividend",
    "ex_dividend_date",
    "earnings_date",
    "days_range",
    "range_52_week",
    "analysts",
    "price_target",
}


def build_label_index(field_map: dict[str, list[str]]) -> dict[str, str]:
    """Invert a field map into exact label -> canonical field."""
    index = {}
    for canonical, labels in field_map.items():
        for label in labels:
            index[label] = canonical
    return index


STATISTICS_LABEL_INDEX = build_label_index(STATISTICS_FIELD_MAP)
OVERVIEW_LABEL_INDEX = build_label_index(OVERVIEW_FIELD_MAP)


def label_index_for(field_map: dict[str, list[str]]) -> dict[str, str]:
    """Prebuilt index for the page maps above; other maps are inverted on demand."""
    if field_map is STATISTICS_FIELD_MAP:
        return STATISTICS_LABEL_INDEX
    if field_map is OVERVIEW_FIELD_MAP:
        return OVERVIEW_LABEL_INDEX
    return build_label_index(field_map)


def lookup_field(label: str, field_map: dict[str, list[str]] = STATISTICS_FIELD_MAP) -> Optional[str]:
    """
    Return the canonical field for an exact label, or None.

    Labels are compared after trimming; the comparison is case-sensitive.
    """
    return label_index_for(field_map).get(label.strip())


def dispatch_fields(
    rows: Iterable[tuple[str, str]],
    field_map: dict[str, list[str]] = STATISTICS_FIELD_MAP,
    text_fields: Optional[set[str]] = None,
) -> dict[str, SnapshotValue]:
    """
    Map (label, value) rows onto the canonical fields of a snapshot.

    Every canonical field is present and defaults to None. Unknown labels are
    ignored. Text fields keep the trimmed value; all others go through
    parse_value.

    Args:
        rows: (label, cell text) pairs in page order
        field_map: Canonical field -> accepted labels
        text_fields: Fields that bypass numeric parsing

    Returns:
        Dict of canonical field -> value
    """
    if text_fields is None:
        text_fields = STATISTICS_TEXT_FIELDS if field_map is STATISTICS_FIELD_MAP else set()

    label_index = label_index_for(field_map)
    result: dict[str, SnapshotValue] = {canonical: None for canonical in field_map}

    for label, value in rows:
        canonical = label_index.get(label.strip())
        if canonical is None:
            continue

        value = (value or "").strip()
        if canonical in text_fields:
            result[canonical] = value or None
        else:
            result[canonical] = parse_value(value)

    return result
