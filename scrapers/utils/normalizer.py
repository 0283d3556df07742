"""
Value normalizer for scraped financial text.

Financial sites render the same number in many ways: "3.31T", "86.16B",
"1,234.56", "$12.50", "6.54%", "(4.02)", or a placeholder such as "n/a".
This module turns those tokens into floats (or None) and classifies
statement rows as ratio-like or currency-like so that table-wide units are
only applied where they make sense.
"""

import re
from typing import Optional

from config.logging_config import get_logger

logger = get_logger(__name__)

# Tokens that mean "no data"; compared lower-cased after trimming
SENTINEL_TOKENS = {"n/a", "-", "--", ""}

# Single trailing letter -> multiplier (case-sensitive)
UNIT_SUFFIXES = {
    "K": 1e3,
    "M": 1e6,
    "B": 1e9,
    "T": 1e12,
}

# Table captions such as "Financials in millions USD. Fiscal year is ..."
# Checked in this order, case-insensitive, first hit wins.
CAPTION_UNITS = [
    ("Million", 1e6),
    ("Billion", 1e9),
    ("Thousand", 1e3),
    ("Trillion", 1e12),
]

# Substrings of a normalized key that mark a ratio/percentage row.
# "RO" is meant for ROE/ROA/ROIC/ROCE and matches any key containing it.
RATIO_KEYWORDS = (
    "EPS",
    "Margin",
    "Growth",
    "Yield",
    "Ratio",
    "PerShare",
    "TaxRate",
    "Turnover",
    "RO",
    "Payout",
    "ForwardPE",
)

_KEY_STRIP_RE = re.compile(r"[/()]")
_WHITESPACE_RE = re.compile(r"\s+")
_NUMBER_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)$")


def normalize_key(label: str) -> str:
    """
    Turn a table row label into a field key.

    "Return on Equity (ROE)" -> "ReturnonEquityROE", "ROE (%)" -> "ROEPercent".
    """
    key = _KEY_STRIP_RE.sub("", label or "")
    key = _WHITESPACE_RE.sub("", key)
    return key.replace("%", "Percent")


def is_ratio_field(key: str, keywords: tuple[str, ...] = RATIO_KEYWORDS) -> bool:
    """Check whether a normalized key names a ratio/percentage row."""
    return any(keyword in key for keyword in keywords)


def unit_multiplier(caption: Optional[str]) -> float:
    """
    Derive the table-wide multiplier from a unit caption.

    Returns 1.0 when the caption names no known unit.
    """
    if not caption:
        return 1.0
    lowered = caption.lower()
    for unit, multiplier in CAPTION_UNITS:
        if unit.lower() in lowered:
            return multiplier
    return 1.0


def clean_unit_caption(raw: str) -> str:
    """Drop the toolbar words that sit next to the unit caption and collapse whitespace."""
    text = re.sub(r"Data Source|Download", "", raw or "")
    return _WHITESPACE_RE.sub(" ", text).strip()


def parse_value(token: Optional[str], multiplier: float = 1.0) -> Optional[float]:
    """
    Parse a formatted financial token into a float.

    Handles:
    - Sentinels ("n/a", "-", "--", empty) -> None
    - Thousands separators and "$"
    - Parentheses for negative numbers: (1234) -> -1234
    - Unit suffixes K/M/B/T
    - Trailing "%" (value is returned as-is, not divided by 100)

    Args:
        token: Raw cell text
        multiplier: Applied when the token carries no unit suffix of its own

    Returns:
        Parsed float value or None
    """
    if token is None:
        return None

    text = token.strip()
    if text.lower() in SENTINEL_TOKENS:
        return None

    text = text.replace(",", "").replace("$", "").replace("−", "-").strip()

    if len(text) > 2 and text.startswith("(") and text.endswith(")"):
        inner = text[1:-1].strip()
        # "(-4.02%)" is already signed
        text = inner if inner.startswith("-") else "-" + inner

    scale = multiplier
    if text and text[-1] in UNIT_SUFFIXES:
        scale = UNIT_SUFFIXES[text[-1]]
        logger.debug(f"Stripped unit suffix {text[-1]!r} from {token!r}")
        text = text[:-1].strip()

    if text.endswith("%"):
        text = text[:-1].strip()

    # float() alone would also accept "nan", "inf" and "1_000"
    if not _NUMBER_RE.match(text):
        logger.debug(f"Unparsable numeric token: {token!r}")
        return None

    return float(text) * scale


def normalize_cell(key: str, token: Optional[str], table_multiplier: float = 1.0) -> Optional[float]:
    """
    Normalize a statement cell given its row key.

    Ratio-like rows are never scaled by the table multiplier and are rounded
    to 2 decimals; all other rows are scaled and kept at full precision.

    Args:
        key: Normalized row key (see normalize_key)
        token: Raw cell text
        table_multiplier: Multiplier derived from the table's unit caption
    """
    if is_ratio_field(key):
        value = parse_value(token)
        return round(value, 2) if value is not None else None
    return parse_value(token, table_multiplier)


def parse_range(text: Optional[str]) -> tuple[Optional[float], Optional[float]]:
    """
    Split a "low - high" range such as "169.21 - 260.10" into two floats.
    """
    if not text:
        return None, None
    parts = re.split(r"\s+[-–—]\s+", text.strip(), maxsplit=1)
    if len(parts) != 2:
        return None, None
    return parse_value(parts[0]), parse_value(parts[1])


def parse_price_target(text: Optional[str]) -> tuple[Optional[float], Optional[float]]:
    """
    Split a price target such as "247.65 (-4.02%)" into price and upside percent.
    """
    if not text:
        return None, None
    match = re.match(r"^\s*([^\s(]+)\s*(?:\(([^)]*)\))?", text)
    if not match:
        return None, None
    price = parse_value(match.group(1))
    upside = parse_value(match.group(2)) if match.group(2) else None
    return price, upside
