"""
Aggregation helpers used by the dashboard service.
"""
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .dates import MONTH_NAMES, parse_date_parts
from .filters import DateRange

UNKNOWN_STORE = "Unknown Store"


def round2(value: float) -> float:
    # half-up, matching what the dashboard front end displays
    return math.floor(value * 100 + 0.5) / 100


def sum_rows_in_range(rows: Sequence, date_range: Optional[DateRange]) -> float:
    if date_range is None or not date_range.is_bounded:
        return 0
    return sum(row.qty for row in rows if date_range.contains(row.date))


def build_rankings(totals: Dict[str, float], limit: Optional[int] = None) -> List[dict]:
    """Labels sorted by quantity, highest first. Ties keep insertion order."""
    ranked = sorted(
        ((label, sales) for label, sales in totals.items() if label),
        key=lambda item: item[1],
        reverse=True,
    )
    if limit is not None:
        ranked = ranked[:limit]
    return [{"label": label, "sales": sales} for label, sales in ranked]


def build_chart_data(totals: Dict[str, float]) -> dict:
    ranked = build_rankings(totals)
    return {
        "labels": [r["label"] for r in ranked],
        "values": [r["sales"] for r in ranked],
    }


def build_monthly_series(totals: Dict[str, float]) -> dict:
    ordered = sorted(
        totals.items(),
        key=lambda item: MONTH_NAMES.index(item[0]) if item[0] in MONTH_NAMES else len(MONTH_NAMES),
    )
    return {
        "months": [month for month, _ in ordered],
        "sales": [sales for _, sales in ordered],
    }


def top_label(totals: Dict[str, float], default: str = "N/A") -> str:
    ranked = build_rankings(totals, 1)
    return ranked[0]["label"] if ranked else default


def _add(totals: Dict[str, float], key: Optional[str], qty: float) -> None:
    if key:
        totals[key] = totals.get(key, 0) + qty


@dataclass
class StorePerformance:
    store_id: Optional[int]
    storename: str
    store_slug: Optional[str]
    total_sales: float = 0
    categories: Dict[str, float] = field(default_factory=dict)
    products: Dict[str, float] = field(default_factory=dict)
    monthly: Dict[str, float] = field(default_factory=dict)


@dataclass
class PerformanceSummary:
    total_quantity: float = 0
    today_sales: float = 0
    categories: Dict[str, float] = field(default_factory=dict)
    products: Dict[str, float] = field(default_factory=dict)
    monthly: Dict[str, float] = field(default_factory=dict)
    stores: List[StorePerformance] = field(default_factory=list)   # highest total first


def build_store_performance(rows: Sequence, today: str) -> PerformanceSummary:
    """
    One pass over detailed rows: grand totals, today's total, global
    category / product / month maps and the same breakdown per store.
    `today` is the request's YYYY-MM-DD date.
    """
    summary = PerformanceSummary()
    stores: Dict[str, StorePerformance] = {}

    for row in rows:
        qty = row.qty
        summary.total_quantity += qty
        if row.date == today:
            summary.today_sales += qty

        parts = parse_date_parts(row.date)
        month_label = MONTH_NAMES[parts.month] if parts and 0 <= parts.month <= 11 else None

        _add(summary.categories, row.category_name, qty)
        _add(summary.products, row.product_name, qty)
        _add(summary.monthly, month_label, qty)

        if row.store_id is not None:
            key = f"id:{row.store_id}"
        else:
            key = f"name:{row.store_name or UNKNOWN_STORE}"
        store = stores.get(key)
        if store is None:
            store = stores[key] = StorePerformance(
                store_id=row.store_id,
                storename=row.store_name or UNKNOWN_STORE,
                store_slug=row.store_slug,
            )
        store.total_sales += qty
        _add(store.categories, row.category_name, qty)
        _add(store.products, row.product_name, qty)
        _add(store.monthly, month_label, qty)

    summary.stores = sorted(stores.values(), key=lambda s: s.total_sales, reverse=True)
    return summary


def compute_target_metrics(current: float, previous: float) -> dict:
    """
    Period-over-period change plus the dynamic sales target.

    The target is the next multiple of 1000 at or above 1.8x the current
    total, never below 1000, and 0 when nothing has sold.
    """
    percentage_change = 0 if previous == 0 else round2((current - previous) / previous * 100)
    target = 0 if current <= 0 else max(1000, math.ceil(current * 1.8 / 1000) * 1000)
    progress = 0 if target == 0 else round2(min(current / target * 100, 100))
    remaining = 0 if target == 0 else max(target - current, 0)
    return {
        "previousPeriodSales": previous,
        "percentageChange": percentage_change,
        "currentTarget": target,
        "targetProgress": progress,
        "remainingTarget": remaining,
    }
