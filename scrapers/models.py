"""
Result types returned by the scrapers.

Every field is nullable: companies do not report every metric, and pages
drop rows they have no data for.
"""

from dataclasses import asdict, dataclass, field, fields
from datetime import date
from typing import Any, Optional

import pandas as pd

from scrapers.utils.html_table_parser import normalize_series_keys, parse_period_ending, reshape


@dataclass
class StockOverview:
    """Quote page snapshot. Unit-bearing amounts are kept as displayed."""

    price: Optional[float] = None
    market_cap: Optional[str] = None
    revenue: Optional[str] = None
    net_income: Optional[str] = None
    shares_outstanding: Optional[str] = None
    eps: Optional[float] = None
    pe_ratio: Optional[float] = None
    forward_pe_ratio: Optional[float] = None
    dividend: Optional[str] = None
    ex_dividend_date: Optional[str] = None
    earnings_date: Optional[str] = None
    volume: Optional[float] = None
    open: Optional[float] = None
    previous_close: Optional[float] = None
    days_range: Optional[str] = None
    range_52_week: Optional[str] = None
    beta: Optional[float] = None
    analysts: Optional[str] = None
    price_target: Optional[str] = None
    performance_1y: Optional[str] = None

    # Derived from the raw text fields above
    low_52_week: Optional[float] = None
    high_52_week: Optional[float] = None
    price_target_price: Optional[float] = None
    upside_percent: Optional[float] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StockOverview":
        """Create a StockOverview, ignoring keys that are not fields."""
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in names})

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class StockStatistics:
    """Statistics page snapshot."""

    market_cap: Optional[float] = None
    enterprise_value: Optional[float] = None
    earnings_date: Optional[str] = None
    ex_dividend_date: Optional[str] = None
    shares_outstanding: Optional[float] = None
    shares_change_yoy: Optional[float] = None
    shares_change_qoq: Optional[float] = None
    owned_by_institutions: Optional[float] = None
    pe_ratio: Optional[float] = None
    forward_pe_ratio: Optional[float] = None
    ps_ratio: Optional[float] = None
    pb_ratio: Optional[float] = None
    ptbv_ratio: Optional[float] = None
    pfcf_ratio: Optional[float] = None
    pocf_ratio: Optional[float] = None
    peg_ratio: Optional[float] = None
    ev_earnings: Optional[float] = None
    ev_sales: Optional[float] = None
    ev_ebitda: Optional[float] = None
    ev_ebit: Optional[float] = None
    ev_fcf: Optional[float] = None
    current_ratio: Optional[float] = None
    quick_ratio: Optional[float] = None
    debt_to_equity: Optional[float] = None
    debt_to_ebitda: Optional[float] = None
    debt_to_fcf: Optional[float] = None
    interest_coverage: Optional[float] = None
    return_on_equity: Optional[float] = None
    return_on_assets: Optional[float] = None
    return_on_invested_capital: Optional[float] = None
    return_on_capital_employed: Optional[float] = None
    beta_5y: Optional[float] = None
    price_change_52w: Optional[float] = None
    moving_average_50d: Optional[float] = None
    moving_average_200d: Optional[float] = None
    rsi: Optional[float] = None
    average_volume_20d: Optional[float] = None
    revenue: Optional[float] = None
    gross_profit: Optional[float] = None
    operating_income: Optional[float] = None
    pretax_income: Optional[float] = None
    net_income: Optional[float] = None
    ebitda: Optional[float] = None
    ebit: Optional[float] = None
    eps: Optional[float] = None
    cash: Optional[float] = None
    total_debt: Optional[float] = None
    net_cash: Optional[float] = None
    net_cash_per_share: Optional[float] = None
    book_value: Optional[float] = None
    book_value_per_share: Optional[float] = None
    working_capital: Optional[float] = None
    operating_cash_flow: Optional[float] = None
    capital_expenditures: Optional[float] = None
    free_cash_flow: Optional[float] = None
    free_cash_flow_per_share: Optional[float] = None
    gross_margin: Optional[float] = None
    operating_margin: Optional[float] = None
    pretax_margin: Optional[float] = None
    profit_margin: Optional[float] = None
    ebitda_margin: Optional[float] = None
    ebit_margin: Optional[float] = None
    fcf_margin: Optional[float] = None
    dividend_per_share: Optional[float] = None
    dividend_yield: Optional[float] = None
    dividend_growth: Optional[float] = None
    payout_ratio: Optional[float] = None
    buyback_yield: Optional[float] = None
    shareholder_yield: Optional[float] = None
    earnings_yield: Optional[float] = None
    fcf_yield: Optional[float] = None
    altman_z_score: Optional[float] = None
    piotroski_f_score: Optional[float] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StockStatistics":
        """Create StockStatistics, ignoring keys that are not fields."""
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in names})

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class FinancialStatement:
    """
    Column-oriented statement as rendered on the page.

    `financials` is keyed by the row label as displayed, with one value per
    entry in `fiscal_year`.
    """

    symbol: str
    statement_type: str
    period_type: str
    unit: str = ""
    fiscal_year: list[str] = field(default_factory=list)
    period_ending: list[str] = field(default_factory=list)
    financials: dict[str, list[Optional[float]]] = field(default_factory=dict)

    def to_records(self) -> list[dict[str, Any]]:
        """One record per period, keyed by normalized field names."""
        return reshape(self.fiscal_year, normalize_series_keys(self.financials))

    def period_end_dates(self) -> list[Optional[date]]:
        return [parse_period_ending(label) for label in self.period_ending]

    def to_dataframe(self) -> pd.DataFrame:
        """Records as a DataFrame, one row per period, in page column order."""
        return pd.DataFrame.from_records(self.to_records())


@dataclass
class ValuationRow:
    """One intrinsic value model from valueinvesting.io."""

    method: str
    value_min: Optional[float] = None
    value_max: Optional[float] = None
    selected: Optional[float] = None
    upside: Optional[float] = None


@dataclass
class ValuationResult:
    symbol: str
    market_risk_premium: Optional[float] = None
    cost_of_equity: Optional[float] = None
    cost_of_debt: Optional[float] = None
    wacc: Optional[float] = None
    valuation: list[ValuationRow] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class FairValueRow:
    """Summary row of the fair value table; range and upside stay as displayed."""

    model: str
    range: str
    selected: float
    upside: str


@dataclass
class WaccDetails:
    """WACC and its inputs as explained on a gurufocus term page (percentages as shown)."""

    symbol: str
    wacc: Optional[float] = None
    roic: Optional[float] = None
    market_cap_mil: Optional[float] = None
    book_value_debt_mil: Optional[float] = None
    weight_equity: Optional[float] = None
    weight_debt: Optional[float] = None
    tax_rate: Optional[float] = None
    cost_of_equity: Optional[float] = None
    risk_free_rate: Optional[float] = None
    beta: Optional[float] = None
    market_premium: Optional[float] = None
    cost_of_debt: Optional[float] = None
    interest_expense: Optional[float] = None
    total_debt: Optional[float] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
