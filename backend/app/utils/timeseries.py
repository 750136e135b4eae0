"""
Chart series for the dashboard's main sales graph.

yearly  → one 12-month series per year on record
monthly → one 5-week series per month on record for the selected year
other   → one daily series over the filtered rows
"""
from collections import defaultdict
from typing import Dict, List, Optional, Sequence

from .dates import MONTH_NAMES, WEEK_LABELS, parse_date_parts, week_of_month


def _yearly_series(all_rows: Sequence, years: Sequence[int]) -> List[dict]:
    monthly: Dict[int, List[float]] = {year: [0] * 12 for year in years}
    for row in all_rows:
        parts = parse_date_parts(row.date)
        if parts and parts.year in monthly and 0 <= parts.month <= 11:
            monthly[parts.year][parts.month] += row.qty
    return [{"name": str(year), "data": monthly[year]} for year in sorted(years)]


def _weekly_series(all_rows: Sequence, year: int) -> List[dict]:
    weekly: Dict[int, List[float]] = {}
    for row in all_rows:
        parts = parse_date_parts(row.date)
        if not parts or parts.year != year or not 0 <= parts.month <= 11:
            continue
        buckets = weekly.setdefault(parts.month, [0] * len(WEEK_LABELS))
        try:
            week = week_of_month(parts.year, parts.month, parts.day)
        except ValueError:
            continue
        # Months spilling into a sixth calendar week lose those days here
        if 1 <= week <= len(WEEK_LABELS):
            buckets[week - 1] += row.qty
    return [{"name": MONTH_NAMES[month], "data": weekly[month]} for month in sorted(weekly)]


def _daily_series(filtered_rows: Sequence) -> tuple[List[str], List[dict]]:
    totals: Dict[str, float] = defaultdict(int)
    for row in filtered_rows:
        totals[row.date] += row.qty
    labels = sorted(totals)
    series = [{"name": "Sales", "data": [totals[d] for d in labels]}] if labels else []
    return labels, series


def build_sales_stats(
    filter_type: str,
    year: Optional[int],
    month: Optional[int],
    filtered_rows: Sequence,
    all_rows: Sequence,
    available_years: Sequence[int],
) -> dict:
    """
    Yearly and monthly views compare sub-periods across all history, so they
    scan `all_rows`; every other view charts just the filtered window.
    `month` is accepted for symmetry with the filter but the monthly view
    always covers every month of `year`.
    """
    if filter_type == "yearly" and available_years:
        return {
            "granularity": "month",
            "labels": list(MONTH_NAMES),
            "isMultipleSeries": True,
            "series": _yearly_series(all_rows, available_years),
        }

    if filter_type == "monthly" and year is not None:
        return {
            "granularity": "week",
            "labels": list(WEEK_LABELS),
            "isMultipleSeries": True,
            "series": _weekly_series(all_rows, year),
        }

    labels, series = _daily_series(filtered_rows)
    return {
        "granularity": "day",
        "labels": labels,
        "isMultipleSeries": False,
        "series": series,
    }
