"""
Sales dashboard payloads.

build_dashboard_overview:       all stores, with cross-store rankings
build_store_dashboard_overview: one store, looked up by slug

Both are synchronous and keep all working state local to the call. The
caller supplies the row source and the request's `today`.
"""
import logging
from datetime import date
from typing import Any, List, Mapping, Optional, Sequence

from ..exceptions import InvalidRequestError, NotFoundError
from ..schemas.sales import StoreTotalsRow
from ..utils.aggregation import (
    PerformanceSummary,
    build_chart_data,
    build_monthly_series,
    build_rankings,
    build_store_performance,
    compute_target_metrics,
    sum_rows_in_range,
    top_label,
)
from ..utils.dates import format_day
from ..utils.filters import FilterSpec, SalesMetadata, build_metadata, compute_previous_range, normalize_params
from ..utils.sales_source import SalesRowSource
from ..utils.timeseries import build_sales_stats

logger = logging.getLogger(__name__)

HIGHLIGHT_LIMIT = 3
CHART_LIMIT = 10
STORE_RANKING_LIMIT = 10
STORE_BREAKDOWN_LIMIT = 5
DEFAULT_STORE_SELECTION = 3


def _as_pairs(totals, key: str, limit: Optional[int] = None) -> List[dict]:
    return [{key: r["label"], "sales": r["sales"]} for r in build_rankings(totals, limit)]


def _store_metadata(store_totals: Sequence[StoreTotalsRow]) -> List[dict]:
    stores = [
        {"id": row.id, "name": row.name, "slug": row.slug, "totalSales": row.total_sales}
        for row in store_totals
        if row.id is not None and row.name
    ]
    stores.sort(key=lambda s: s["totalSales"], reverse=True)
    return stores


def _filter_block(spec: FilterSpec) -> dict:
    return {
        "type": spec.filter_type,
        "year": spec.year,
        "month": spec.month,
        "range": spec.range.to_dict(),
    }


def _metadata_block(metadata: SalesMetadata, spec: FilterSpec, total_records: int) -> dict:
    return {
        "availableYears": metadata.available_years,
        "availableMonthsByYear": metadata.available_months_by_year,
        "monthsForSelectedYear": metadata.months_for_year(spec.year),
        "defaultSelections": {
            "year": spec.defaults.year,
            "month": spec.defaults.month,
        },
        "totalRecords": total_records,
    }


def _common_sections(
    spec: FilterSpec,
    metadata: SalesMetadata,
    performance: PerformanceSummary,
    all_rows: Sequence,
    filtered_rows: Sequence,
) -> dict:
    previous_range = compute_previous_range(spec.filter_type, spec.year, spec.month)
    previous_sales = sum_rows_in_range(all_rows, previous_range)

    totals = {
        "totalQuantity": performance.total_quantity,
        "todaySales": performance.today_sales,
        **compute_target_metrics(performance.total_quantity, previous_sales),
    }
    charts = {
        "salesStats": build_sales_stats(
            spec.filter_type, spec.year, spec.month,
            filtered_rows, all_rows, metadata.available_years,
        ),
        "categoryDistribution": build_chart_data(performance.categories),
        "topProducts": _as_pairs(performance.products, "product", CHART_LIMIT),
        "topCategories": _as_pairs(performance.categories, "category", CHART_LIMIT),
        "monthlySales": build_monthly_series(performance.monthly),
    }
    return {
        "totals": totals,
        "highlights": {
            "topCategories": _as_pairs(performance.categories, "category", HIGHLIGHT_LIMIT),
            "topProducts": _as_pairs(performance.products, "product", HIGHLIGHT_LIMIT),
        },
        "charts": charts,
        "counts": {"totalRows": len(filtered_rows)},
    }


def assemble_dashboard_overview(
    all_rows: Sequence,
    store_totals: Sequence[StoreTotalsRow],
    filtered_rows: Sequence,
    spec: FilterSpec,
    metadata: SalesMetadata,
    today: date,
) -> dict:
    performance = build_store_performance(filtered_rows, format_day(today))
    common = _common_sections(spec, metadata, performance, all_rows, filtered_rows)
    stores_meta = _store_metadata(store_totals)

    metadata_block = _metadata_block(metadata, spec, len(all_rows))
    metadata_block["defaultSelections"]["stores"] = [s["id"] for s in stores_meta[:DEFAULT_STORE_SELECTION]]
    metadata_block["stores"] = stores_meta

    top_stores = performance.stores[:STORE_RANKING_LIMIT]
    common["totals"]["totalStores"] = len(performance.stores)
    common["charts"]["topStores"] = [
        {
            "storeId": s.store_id,
            "storename": s.storename,
            "storeSlug": s.store_slug,
            "sales": s.total_sales,
        }
        for s in top_stores
    ]

    return {
        "filter": {**_filter_block(spec), "appliedStoreIds": spec.store_ids},
        "metadata": metadata_block,
        "totals": common["totals"],
        "highlights": common["highlights"],
        "charts": common["charts"],
        "stores": {
            "ranking": [
                {
                    "storeId": s.store_id,
                    "storename": s.storename,
                    "storeSlug": s.store_slug,
                    "totalSales": s.total_sales,
                    "topCategory": top_label(s.categories),
                    "topProduct": top_label(s.products),
                }
                for s in top_stores
            ],
            "breakdown": [
                {
                    "storeId": s.store_id,
                    "storename": s.storename,
                    "totalSales": s.total_sales,
                    "topCategory": top_label(s.categories),
                    "topProduct": top_label(s.products),
                    "categorySales": _as_pairs(s.categories, "category"),
                    "productSales": _as_pairs(s.products, "product"),
                    "monthlySales": build_monthly_series(s.monthly),
                }
                for s in performance.stores[:STORE_BREAKDOWN_LIMIT]
            ],
        },
        "counts": common["counts"],
    }


def build_dashboard_overview(source: SalesRowSource, raw_params: Mapping[str, Any], today: date) -> dict:
    """Global overview across every store (optionally narrowed by storeIds)."""
    all_rows = source.summary_rows()
    store_totals = source.store_totals()

    metadata = build_metadata(all_rows)
    spec = normalize_params(raw_params, metadata, today)

    filtered_rows = source.detailed_rows(spec.range, spec.store_ids)
    logger.info(
        "Dashboard overview: filter=%s range=%s..%s stores=%s rows=%d/%d",
        spec.filter_type, spec.range.start_date, spec.range.end_date,
        spec.store_ids, len(filtered_rows), len(all_rows),
    )
    return assemble_dashboard_overview(all_rows, store_totals, filtered_rows, spec, metadata, today)


def assemble_store_dashboard_overview(
    store: Mapping[str, Any],
    all_rows: Sequence,
    filtered_rows: Sequence,
    spec: FilterSpec,
    metadata: SalesMetadata,
    today: date,
) -> dict:
    performance = build_store_performance(filtered_rows, format_day(today))
    common = _common_sections(spec, metadata, performance, all_rows, filtered_rows)
    common["charts"]["productDistribution"] = build_chart_data(performance.products)

    return {
        "store": dict(store),
        "filter": _filter_block(spec),
        "metadata": _metadata_block(metadata, spec, len(all_rows)),
        "totals": common["totals"],
        "highlights": common["highlights"],
        "charts": common["charts"],
        "counts": common["counts"],
    }


def build_store_dashboard_overview(
    source: SalesRowSource,
    store_slug: str,
    raw_params: Mapping[str, Any],
    today: date,
) -> dict:
    """Overview for a single store; caller-supplied store filters are ignored."""
    slug = (store_slug or "").strip()
    if not slug:
        raise InvalidRequestError("Store slug is required")

    store = source.get_store(slug)
    if store is None:
        raise NotFoundError(f'Store with slug "{slug}" not found')

    all_rows = source.summary_rows(store_id=store.id)
    metadata = build_metadata(all_rows)
    spec = normalize_params(raw_params, metadata, today)
    spec.store_ids = [store.id]

    filtered_rows = source.detailed_rows(spec.range, spec.store_ids)
    logger.info(
        "Store dashboard %s: filter=%s range=%s..%s rows=%d/%d",
        slug, spec.filter_type, spec.range.start_date, spec.range.end_date,
        len(filtered_rows), len(all_rows),
    )
    return assemble_store_dashboard_overview(
        {"id": store.id, "name": store.name, "slug": store.slug},
        all_rows, filtered_rows, spec, metadata, today,
    )
