"""
HTML table parser for financial statements.

Statement pages render one column per reporting period:

| Fiscal Year   | FY 2024      | FY 2023      | ... | (trailing) |
| Period Ending | Sep 28, 2024 | Sep 30, 2023 | ... |            |
|---------------|--------------|--------------|-----|------------|
| Revenue       | 391,035      | 383,285      | ... |            |
| Gross Margin  | 46.21%       | 44.13%       | ... |            |

The parser extracts the period headers and one value series per row; the
reshaper pivots those series into one record per period.
"""

import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

from bs4 import BeautifulSoup
from dateutil.parser import ParserError, parse as parse_date

from config.logging_config import get_logger
from scrapers.utils.normalizer import (
    clean_unit_caption,
    normalize_cell,
    normalize_key,
    unit_multiplier,
)

logger = get_logger(__name__)

QUARTER_LABEL_RE = re.compile(r"(Q\d)\s+(\d{4})")
FISCAL_YEAR_LABEL_RE = re.compile(r"FY\s+(\d{4})")

# Caption holding "Financials in millions USD ..." next to the download menu
UNIT_CAPTION_SELECTOR = ".relative.inline-block.text-left"
# Long-form period ending text ("Sep 28, 2024") inside a header cell
PERIOD_ENDING_SELECTOR = ".hidden.sm\\:inline"


def cell_text(tag: Any) -> str:
    """Text of a tag with runs of whitespace collapsed to single spaces."""
    return " ".join(tag.get_text().split())


@dataclass(frozen=True)
class PeriodLabel:
    """A fiscal period header decomposed into quarter and year."""

    label: str
    quarter: str
    year: str


def parse_period_label(label: str) -> PeriodLabel:
    """
    Decompose a period header.

    Examples:
    - 'Q2 2024' -> quarter 'Q2', year '2024'
    - 'FY 2024' -> quarter 'ALL', year '2024'
    - 'TTM'     -> quarter 'ALL', year 'TTM'
    """
    quarter_match = QUARTER_LABEL_RE.search(label)
    if quarter_match:
        return PeriodLabel(label, quarter_match.group(1), quarter_match.group(2))

    fy_match = FISCAL_YEAR_LABEL_RE.search(label)
    if fy_match:
        return PeriodLabel(label, "ALL", fy_match.group(1))

    return PeriodLabel(label, "ALL", label)


def parse_period_ending(label: str) -> Optional[date]:
    """Parse a period ending header such as 'Sep 28, 2024' into a date."""
    if not label:
        return None
    try:
        return parse_date(label).date()
    except (ParserError, ValueError, OverflowError):
        return None


def reshape(
    period_labels: list[str],
    field_series: dict[str, list[Optional[float]]],
) -> list[dict[str, Any]]:
    """
    Pivot label-indexed series into one record per period.

    Callers must already have removed the row-label column and any trailing
    column that has no period header. A series shorter than the label list
    yields None for the missing periods.

    Args:
        period_labels: Period headers in column order
        field_series: Field key -> values in the same column order

    Returns:
        List of records with fiscalYear, quarter, year and every field key
    """
    records = []
    for index, label in enumerate(period_labels):
        period = parse_period_label(label)
        record: dict[str, Any] = {
            "fiscalYear": period.label,
            "quarter": period.quarter,
            "year": period.year,
        }
        for key, values in field_series.items():
            record[key] = values[index] if index < len(values) else None
        records.append(record)
    return records


def normalize_series_keys(
    field_series: dict[str, list[Optional[float]]],
) -> dict[str, list[Optional[float]]]:
    """Re-key raw row labels with normalize_key; later rows win on collisions."""
    return {normalize_key(label): values for label, values in field_series.items()}


def parse_financial_html_table(html: str, drop_trailing: bool = True) -> Optional[dict[str, Any]]:
    """
    Parse a statement page into headers and normalized value series.

    The first column (row labels) is always dropped. When drop_trailing is
    set, the last column is dropped too, for both headers and cells.

    Args:
        html: Page HTML
        drop_trailing: Drop the trailing column the page renders after the periods

    Returns:
        Dict with unit, multiplier, fiscal_year, period_ending and financials
        (raw row label -> values), or None when no statement table is found
    """
    soup = BeautifulSoup(html, "lxml")

    table = _find_statement_table(soup.find_all("table"))
    if table is None:
        logger.warning("No statement table found in HTML content")
        return None

    caption = soup.select_one(UNIT_CAPTION_SELECTOR)
    unit = clean_unit_caption(caption.get_text(" ")) if caption else ""
    multiplier = unit_multiplier(unit)

    header_rows = table.select("thead tr")
    fiscal_year: list[str] = []
    period_ending: list[str] = []

    if header_rows:
        for cell in _data_cells(header_rows[0].find_all(["th", "td"]), drop_trailing):
            fiscal_year.append(cell_text(cell))

    if len(header_rows) > 1:
        for cell in _data_cells(header_rows[1].find_all(["th", "td"]), drop_trailing):
            long_form = cell.select_one(PERIOD_ENDING_SELECTOR)
            text = cell_text(long_form) if long_form else ""
            period_ending.append(text or cell_text(cell))

    financials: dict[str, list[Optional[float]]] = {}
    for row in _body_rows(table):
        cells = row.find_all("td")
        if not cells:
            continue

        label = cell_text(cells[0])
        if not label:
            continue

        key = normalize_key(label)
        financials[label] = [
            normalize_cell(key, cell_text(cell), multiplier)
            for cell in _data_cells(cells, drop_trailing)
        ]

    if not fiscal_year:
        logger.warning("Could not parse any period headers from statement table")

    return {
        "unit": unit,
        "multiplier": multiplier,
        "fiscal_year": fiscal_year,
        "period_ending": period_ending,
        "financials": financials,
    }


def _data_cells(cells: list, drop_trailing: bool) -> list:
    """Drop the label column and, optionally, the trailing column."""
    return cells[1:-1] if drop_trailing else cells[1:]


def _body_rows(table: Any) -> list:
    rows = table.select("tbody tr")
    if rows:
        return rows
    # Tables without tbody: everything that is not a header row
    return [row for row in table.find_all("tr") if row.find_parent("thead") is None]


def _find_statement_table(tables: list) -> Optional[Any]:
    """
    Find the statement table from a list of tables.

    Prefers tables whose header mentions fiscal periods, then the one with
    most rows.
    """
    if not tables:
        return None

    candidates = []
    for table in tables:
        header = table.find("thead")
        header_text = header.get_text(" ", strip=True) if header else ""
        has_periods = bool(
            QUARTER_LABEL_RE.search(header_text)
            or FISCAL_YEAR_LABEL_RE.search(header_text)
            or "Fiscal" in header_text
            or "Period" in header_text
        )
        candidates.append((table, has_periods, len(table.find_all("tr"))))

    candidates.sort(key=lambda x: (x[1], x[2]), reverse=True)
    return candidates[0][0]


def extract_label_rows(soup: BeautifulSoup, table_selector: str) -> list[tuple[str, str]]:
    """(first cell, last cell) text of every row in the tables matching a selector."""
    rows = []
    for table in soup.select(table_selector):
        for row in table.find_all("tr"):
            cells = row.find_all("td")
            if not cells:
                continue
            rows.append((cell_text(cells[0]), cell_text(cells[-1])))
    return rows
