"""Tests for the value normalizer."""

import pytest
from scrapers.utils.normalizer import (
    clean_unit_caption,
    is_ratio_field,
    normalize_cell,
    normalize_key,
    parse_price_target,
    parse_range,
    parse_value,
    unit_multiplier,
)


class TestParseValue:
    """Tests for parse_value."""

    def test_sentinels_are_none(self):
        """Test that placeholder tokens normalize to None, never 0."""
        for token in ["n/a", "N/A", "-", "--", "", "   ", None]:
            assert parse_value(token) is None, f"Failed for {token!r}"

    def test_unit_suffixes(self):
        """Test K/M/B/T suffix scaling."""
        assert parse_value("3.31T") == pytest.approx(3.31e12)
        assert parse_value("86.16B") == pytest.approx(86.16e9)
        assert parse_value("450.2M") == pytest.approx(450.2e6)
        assert parse_value("12K") == pytest.approx(12e3)

    def test_suffix_is_case_sensitive(self):
        """Test that lower-case letters are not unit suffixes."""
        assert parse_value("3.31t") is None
        assert parse_value("5m") is None

    def test_thousands_separator_and_currency(self):
        """Test stripping of commas and dollar signs."""
        assert parse_value("1,234.56") == 1234.56
        assert parse_value("$1,234.56") == 1234.56
        assert parse_value("-$12.50") == -12.5

    def test_percent_is_not_divided(self):
        """Test that percentages keep their displayed magnitude."""
        assert parse_value("6.54%") == 6.54
        assert parse_value("-0.35%") == -0.35

    def test_parentheses_are_negative(self):
        """Test accounting-style negatives."""
        assert parse_value("(12.5)") == -12.5
        assert parse_value("(4.02%)") == -4.02

    def test_unicode_minus(self):
        """Test that the Unicode minus sign reads as a minus."""
        assert parse_value("−12.5") == -12.5
        assert parse_value("−3.1B") == pytest.approx(-3.1e9)

    def test_signed_value_in_parentheses(self):
        """Test that an already negative value in parentheses is not negated twice."""
        assert parse_value("(−4.02%)") == -4.02
        assert parse_value("(-4.02%)") == -4.02

    def test_clean_numbers_unchanged(self):
        """Test that already-clean numeric strings parse as plain floats."""
        for token in ["0", "42", "-7", "3.14159", "-0.001", "1000000"]:
            assert parse_value(token) == float(token)

    def test_unparsable_is_none(self):
        """Test that text without a number normalizes to None."""
        assert parse_value("Buy") is None
        assert parse_value("Oct 30, 2025") is None
        assert parse_value("T") is None

    def test_non_finite_and_python_literals_are_none(self):
        """Test that float() spellings that are not displayed numbers give None."""
        for token in ["NaN", "nan", "inf", "-inf", "Infinity", "1_000", "1e5"]:
            assert parse_value(token) is None, f"Failed for {token!r}"

    def test_non_finite_ratio_cell_is_none(self):
        """Test that a NaN token does not reach records through a ratio row."""
        assert normalize_cell("GrossMargin", "NaN", 1e6) is None

    def test_external_multiplier(self):
        """Test that the caller multiplier applies only without an inline suffix."""
        assert parse_value("391,035", 1e6) == pytest.approx(391_035e6)
        assert parse_value("2.5B", 1e6) == pytest.approx(2.5e9)

    def test_suffix_round_trip(self):
        """Test that re-formatting with the same suffix reproduces the magnitude."""
        value = parse_value("86.16B")
        assert f"{value / 1e9:.2f}B" == "86.16B"


class TestNormalizeKey:
    """Tests for row label to field key normalization."""

    def test_strips_punctuation_and_whitespace(self):
        """Test removal of slashes, parentheses and whitespace."""
        assert normalize_key("Return on Equity (ROE)") == "ReturnonEquityROE"
        assert normalize_key("P/E Ratio") == "PERatio"
        assert normalize_key("  Revenue \n Growth  (YoY) ") == "RevenueGrowthYoY"

    def test_percent_becomes_word(self):
        """Test that % is spelled out."""
        assert normalize_key("ROE (%)") == "ROEPercent"


class TestClassification:
    """Tests for ratio-like field classification."""

    def test_ratio_fields(self):
        """Test keys that must be treated as ratios."""
        for key in [
            "GrossMargin",
            "RevenueGrowthYoY",
            "DividendYield",
            "PERatio",
            "EPSBasic",
            "BookValuePerShare",
            "EffectiveTaxRate",
            "AssetTurnover",
            "ROEPercent",
            "ROIC",
            "PayoutRatio",
            "ForwardPE",
        ]:
            assert is_ratio_field(key), f"Failed for {key}"

    def test_currency_fields(self):
        """Test keys that must be scaled by the table unit."""
        for key in ["Revenue", "NetIncome", "TotalAssets", "FreeCashFlow", "GrossProfit"]:
            assert not is_ratio_field(key), f"Failed for {key}"

    def test_ro_is_a_substring_match(self):
        """Test that any key containing RO is classified as a ratio."""
        assert is_ratio_field("GROSSPROFIT")


class TestNormalizeCell:
    """Tests for unit-aware cell normalization."""

    def test_ratio_never_scaled(self):
        """Test that ratio rows ignore a table multiplier above 1."""
        assert normalize_cell("ROEPercent", "15.234", 1e6) == 15.23

    def test_ratio_rounded_to_two_decimals(self):
        """Test rounding of ratio rows."""
        assert normalize_cell("GrossMargin", "46.2061%", 1.0) == 46.21

    def test_currency_scaled(self):
        """Test that currency rows are multiplied by the table unit."""
        assert normalize_cell("Revenue", "391,035", 1e6) == pytest.approx(391_035e6)

    def test_sentinel_cell(self):
        """Test sentinel cells in either kind of row."""
        assert normalize_cell("Revenue", "-", 1e6) is None
        assert normalize_cell("GrossMargin", "", 1e6) is None


class TestUnitCaption:
    """Tests for table unit captions."""

    def test_known_units(self):
        """Test caption multipliers."""
        assert unit_multiplier("Financials in millions USD. Fiscal year is October - September.") == 1e6
        assert unit_multiplier("Financials in Billions THB") == 1e9
        assert unit_multiplier("In Thousands") == 1e3
        assert unit_multiplier("Trillion KRW") == 1e12

    def test_default_unit(self):
        """Test that no unit means a multiplier of 1."""
        assert unit_multiplier("") == 1.0
        assert unit_multiplier(None) == 1.0
        assert unit_multiplier("USD") == 1.0

    def test_clean_caption(self):
        """Test removal of toolbar words from the caption."""
        raw = "Financials in millions USD.\n   Data Source   Download"
        assert clean_unit_caption(raw) == "Financials in millions USD."


class TestCompositeFields:
    """Tests for range and price target text."""

    def test_parse_range(self):
        """Test splitting a 52-week range."""
        assert parse_range("169.21 - 260.10") == (169.21, 260.1)
        assert parse_range("n/a") == (None, None)
        assert parse_range(None) == (None, None)

    def test_parse_price_target(self):
        """Test splitting price target and upside."""
        assert parse_price_target("247.65 (-4.02%)") == (247.65, -4.02)
        assert parse_price_target("$36.50 (+12.3%)") == (36.5, 12.3)
        assert parse_price_target("n/a") == (None, None)
