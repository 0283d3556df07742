"""Tests for statement table parsing and period reshaping."""

from datetime import date

import pytest
from scrapers.utils.html_table_parser import (
    PeriodLabel,
    parse_financial_html_table,
    parse_period_ending,
    parse_period_label,
    reshape,
)

STATEMENT_HTML = """
<html><body>
<div class="relative inline-block text-left">
  <span>Financials in millions USD.</span>
  <button>Data Source</button> <button>Download</button>
</div>
<table>
  <thead>
    <tr>
      <th>Fiscal Year</th><th>FY 2024</th><th>FY 2023</th><th>FY 2022</th><th>2019 - 2014</th>
    </tr>
    <tr>
      <th>Period Ending</th>
      <th><span class="hidden sm:inline">Sep 28, 2024</span><span class="sm:hidden">Sep '24</span></th>
      <th><span class="hidden sm:inline">Sep 30, 2023</span><span class="sm:hidden">Sep '23</span></th>
      <th>Sep 24, 2022</th>
      <th></th>
    </tr>
  </thead>
  <tbody>
    <tr><td>Revenue</td><td>391,035</td><td>383,285</td><td>394,328</td><td>Upgrade</td></tr>
    <tr><td>Revenue Growth (YoY)</td><td>2.02%</td><td>-2.80%</td><td>7.79%</td><td>Upgrade</td></tr>
    <tr><td>EPS (Diluted)</td><td>6.08</td><td>6.13</td><td>6.11</td><td>Upgrade</td></tr>
    <tr><td>Gross Margin</td><td>46.206%</td><td>44.13%</td><td>43.31%</td><td></td></tr>
    <tr><td>Dividend Per Share</td><td>0.98</td><td>0.94</td><td>-</td><td></td></tr>
  </tbody>
</table>
</body></html>
"""


class TestPeriodLabel:
    """Tests for period header decomposition."""

    def test_fiscal_year(self):
        """Test FY labels."""
        assert parse_period_label("FY 2024") == PeriodLabel("FY 2024", "ALL", "2024")

    def test_quarter(self):
        """Test quarter labels."""
        assert parse_period_label("Q2 2024") == PeriodLabel("Q2 2024", "Q2", "2024")

    def test_fallback_is_verbatim(self):
        """Test that unknown labels become the year."""
        assert parse_period_label("TTM") == PeriodLabel("TTM", "ALL", "TTM")
        assert parse_period_label("2019 - 2014") == PeriodLabel("2019 - 2014", "ALL", "2019 - 2014")

    def test_period_ending_dates(self):
        """Test parsing of period ending headers."""
        assert parse_period_ending("Sep 28, 2024") == date(2024, 9, 28)
        assert parse_period_ending("TTM") is None
        assert parse_period_ending("") is None


class TestReshape:
    """Tests for pivoting field series into period records."""

    def test_fiscal_year_record(self):
        """Test a single annual period."""
        assert reshape(["FY 2024"], {"Revenue": [1000]}) == [
            {"fiscalYear": "FY 2024", "quarter": "ALL", "year": "2024", "Revenue": 1000}
        ]

    def test_quarter_record(self):
        """Test a single quarterly period."""
        assert reshape(["Q2 2024"], {"EPS": [1.6]}) == [
            {"fiscalYear": "Q2 2024", "quarter": "Q2", "year": "2024", "EPS": 1.6}
        ]

    def test_column_order_preserved(self):
        """Test that records follow the label order, not sorted."""
        records = reshape(["Q1 2024", "Q4 2023", "Q3 2023"], {"Revenue": [3, 2, 1]})
        assert [r["fiscalYear"] for r in records] == ["Q1 2024", "Q4 2023", "Q3 2023"]
        assert [r["Revenue"] for r in records] == [3, 2, 1]
        assert [r["year"] for r in records] == ["2024", "2023", "2023"]

    def test_short_series_padded_with_none(self):
        """Test that a short series does not raise."""
        records = reshape(["FY 2024", "FY 2023", "FY 2022"], {"Revenue": [10.0], "EPS": []})
        assert [r["Revenue"] for r in records] == [10.0, None, None]
        assert [r["EPS"] for r in records] == [None, None, None]

    def test_empty_inputs(self):
        """Test empty labels and empty series."""
        assert reshape([], {"Revenue": [1.0]}) == []
        assert reshape(["TTM"], {}) == [{"fiscalYear": "TTM", "quarter": "ALL", "year": "TTM"}]


class TestParseFinancialHtmlTable:
    """Tests for statement page extraction."""

    def test_unit_and_headers(self):
        """Test unit caption and header rows with the trailing column dropped."""
        parsed = parse_financial_html_table(STATEMENT_HTML)
        assert parsed is not None
        assert parsed["unit"] == "Financials in millions USD."
        assert parsed["multiplier"] == 1e6
        assert parsed["fiscal_year"] == ["FY 2024", "FY 2023", "FY 2022"]
        assert parsed["period_ending"] == ["Sep 28, 2024", "Sep 30, 2023", "Sep 24, 2022"]

    def test_currency_rows_scaled(self):
        """Test that currency rows are multiplied by the caption unit."""
        parsed = parse_financial_html_table(STATEMENT_HTML)
        assert parsed["financials"]["Revenue"] == pytest.approx([391_035e6, 383_285e6, 394_328e6])

    def test_ratio_rows_not_scaled(self):
        """Test that ratio rows keep their values and are rounded."""
        financials = parse_financial_html_table(STATEMENT_HTML)["financials"]
        assert financials["Revenue Growth (YoY)"] == [2.02, -2.8, 7.79]
        assert financials["EPS (Diluted)"] == [6.08, 6.13, 6.11]
        assert financials["Gross Margin"] == [46.21, 44.13, 43.31]

    def test_sentinel_cells(self):
        """Test that dash cells become None."""
        financials = parse_financial_html_table(STATEMENT_HTML)["financials"]
        assert financials["Dividend Per Share"] == [0.98, 0.94, None]

    def test_keep_trailing_column(self):
        """Test that the trailing column can be kept."""
        parsed = parse_financial_html_table(STATEMENT_HTML, drop_trailing=False)
        assert parsed["fiscal_year"][-1] == "2019 - 2014"
        assert len(parsed["financials"]["Revenue"]) == 4
        assert parsed["financials"]["Revenue"][-1] is None

    def test_no_table(self):
        """Test that a page without tables returns None."""
        assert parse_financial_html_table("<html><body><p>Nothing here</p></body></html>") is None
