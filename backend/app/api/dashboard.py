import datetime as _dt
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.dashboard import DashboardOverviewOut, ErrorOut, StoreDashboardOut
from ..services.dashboard import build_dashboard_overview, build_store_dashboard_overview
from ..utils.sales_source import SqlSalesRowSource

router = APIRouter()

_ERROR_RESPONSES = {400: {"model": ErrorOut}, 404: {"model": ErrorOut}}


def get_row_source(db: Session = Depends(get_db)) -> SqlSalesRowSource:
    return SqlSalesRowSource(db)


def get_today() -> _dt.date:
    # Read once per request so day/week/tomorrow filters and todaySales agree
    return _dt.date.today()


def _collapse(values: Optional[List[str]]):
    if not values:
        return None
    return values[0] if len(values) == 1 else values


def _raw_params(**params) -> dict:
    return {k: v for k, v in params.items() if v is not None}


@router.get("/sales/overview", response_model=DashboardOverviewOut, responses=_ERROR_RESPONSES)
def sales_overview(
    filter_type: Optional[str] = Query(None, alias="filterType", description="yearly | monthly | weekly | daily | tomorrow | custom | all"),
    year: Optional[str] = Query(None),
    selected_year: Optional[str] = Query(None, alias="selectedYear"),
    month: Optional[str] = Query(None, description="0-indexed month (Jan = 0)"),
    selected_month: Optional[str] = Query(None, alias="selectedMonth"),
    from_date: Optional[str] = Query(None, alias="fromDate", description="YYYY-MM-DD, custom filter only"),
    start_date: Optional[str] = Query(None, alias="startDate"),
    to_date: Optional[str] = Query(None, alias="toDate", description="YYYY-MM-DD, custom filter only"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    store_ids: Optional[List[str]] = Query(None, alias="storeIds", description="Comma-separated or repeated store ids"),
    store_id: Optional[List[str]] = Query(None, alias="storeId"),
    stores: Optional[List[str]] = Query(None),
    source: SqlSalesRowSource = Depends(get_row_source),
    today: _dt.date = Depends(get_today),
):
    raw = _raw_params(
        filterType=filter_type,
        year=year,
        selectedYear=selected_year,
        month=month,
        selectedMonth=selected_month,
        fromDate=from_date,
        startDate=start_date,
        toDate=to_date,
        endDate=end_date,
        storeIds=_collapse(store_ids),
        storeId=_collapse(store_id),
        stores=_collapse(stores),
    )
    return build_dashboard_overview(source, raw, today)


@router.get("/sales/store/{store_slug}", response_model=StoreDashboardOut, responses=_ERROR_RESPONSES)
def store_overview(
    store_slug: str = Path(..., description="Store slug"),
    filter_type: Optional[str] = Query(None, alias="filterType"),
    year: Optional[str] = Query(None),
    selected_year: Optional[str] = Query(None, alias="selectedYear"),
    month: Optional[str] = Query(None, description="0-indexed month (Jan = 0)"),
    selected_month: Optional[str] = Query(None, alias="selectedMonth"),
    from_date: Optional[str] = Query(None, alias="fromDate"),
    start_date: Optional[str] = Query(None, alias="startDate"),
    to_date: Optional[str] = Query(None, alias="toDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    source: SqlSalesRowSource = Depends(get_row_source),
    today: _dt.date = Depends(get_today),
):
    # Store filters are forced to this store, so storeIds is not accepted here
    raw = _raw_params(
        filterType=filter_type,
        year=year,
        selectedYear=selected_year,
        month=month,
        selectedMonth=selected_month,
        fromDate=from_date,
        startDate=start_date,
        toDate=to_date,
        endDate=end_date,
    )
    return build_store_dashboard_overview(source, store_slug, raw, today)
