"""
Row sources for the dashboard service.

The aggregation code never builds queries; it asks a source for plain row
lists. SqlSalesRowSource reads them through SQLAlchemy, one instance per
request session. InMemorySalesRowSource applies the same filters to lists
already in memory.
"""
import logging
from datetime import date, timedelta
from typing import Iterable, List, Optional, Protocol, Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models.metadata import Store, Category
from ..models.sales import Product, Sale
from ..schemas.sales import DetailedSalesRow, SalesRow, StoreRef, StoreTotalsRow
from .dates import days_in_month, parse_date_parts
from .filters import DateRange

logger = logging.getLogger(__name__)


class SalesRowSource(Protocol):
    def summary_rows(self, store_id: Optional[int] = None) -> List[SalesRow]: ...

    def store_totals(self) -> List[StoreTotalsRow]: ...

    def detailed_rows(self, date_range: DateRange, store_ids: Sequence[int] = ()) -> List[DetailedSalesRow]: ...

    def get_store(self, slug: str) -> Optional[StoreRef]: ...


_FIRST_DAY = date.min.isoformat()
_LAST_DAY = date.max.isoformat()


def _year_prefix(value: str) -> Optional[int]:
    """Leading four digits of a year written with more than four, else None."""
    head = value.split("-", 1)[0]
    return int(head[:4]) if len(head) > 4 and head.isdigit() else None


def _lower_bound(value: str) -> Optional[date]:
    """Earliest real date that sorts at or after the YYYY-MM-DD string `value`; None if none does."""
    if value <= _FIRST_DAY:
        return date.min
    if value > _LAST_DAY:
        return None
    # "10000-..." sorts between "1000-12-31" and "1001-01-01"
    prefix = _year_prefix(value)
    if prefix is not None:
        return date(prefix + 1, 1, 1)
    year, month, day = parse_date_parts(value)
    if month < 0:
        return date(year, 1, 1)
    if month > 11:
        return date(year + 1, 1, 1)
    if day < 1:
        return date(year, month + 1, 1)
    if day > days_in_month(year, month):
        return date(year + 1, 1, 1) if month == 11 else date(year, month + 2, 1)
    return date(year, month + 1, day)


def _upper_bound(value: str) -> Optional[date]:
    """Latest real date that sorts at or before the YYYY-MM-DD string `value`; None if none does."""
    if value >= _LAST_DAY:
        return date.max
    if value < _FIRST_DAY:
        return None
    prefix = _year_prefix(value)
    if prefix is not None:
        return date(prefix, 12, 31)
    year, month, day = parse_date_parts(value)
    if month < 0:
        return date(year - 1, 12, 31)
    if month > 11:
        return date(year, 12, 31)
    if day < 1:
        return date(year, month + 1, 1) - timedelta(days=1)
    return date(year, month + 1, min(day, days_in_month(year, month)))


class SqlSalesRowSource:
    def __init__(self, db: Session):
        self._db = db

    def summary_rows(self, store_id: Optional[int] = None) -> List[SalesRow]:
        q = self._db.query(Sale.id, Sale.date, Sale.qty)
        if store_id is not None:
            q = q.filter(Sale.store_id == store_id)
        rows = [SalesRow(id=r.id, date=r.date, qty=r.qty) for r in q.order_by(Sale.date, Sale.id).all()]
        logger.debug("Loaded %d summary sales rows (store_id=%s)", len(rows), store_id)
        return rows

    def store_totals(self) -> List[StoreTotalsRow]:
        rows = (
            self._db.query(
                Store.id.label("id"),
                Store.name.label("name"),
                Store.slug.label("slug"),
                func.coalesce(func.sum(Sale.qty), 0).label("total_sales"),
            )
            .select_from(Sale)
            .outerjoin(Store, Sale.store_id == Store.id)
            .group_by(Store.id, Store.name, Store.slug)
            .all()
        )
        return [
            StoreTotalsRow(id=r.id, name=r.name, slug=r.slug, total_sales=r.total_sales)
            for r in rows
        ]

    def detailed_rows(self, date_range: DateRange, store_ids: Sequence[int] = ()) -> List[DetailedSalesRow]:
        q = (
            self._db.query(
                Sale.id,
                Sale.date,
                Sale.qty,
                Sale.store_id,
                Store.name.label("store_name"),
                Store.slug.label("store_slug"),
                Sale.category_id,
                Category.name.label("category_name"),
                Sale.product_id,
                Product.name.label("product_name"),
            )
            .outerjoin(Store, Sale.store_id == Store.id)
            .outerjoin(Category, Sale.category_id == Category.id)
            .outerjoin(Product, Sale.product_id == Product.id)
        )
        if date_range.is_bounded:
            start = _lower_bound(date_range.start_date)
            end = _upper_bound(date_range.end_date)
            if start is None or end is None or start > end:
                logger.debug("No calendar dates fall within %s", date_range)
                return []
            q = q.filter(Sale.date.between(start, end))
        if store_ids:
            q = q.filter(Sale.store_id.in_(list(store_ids)))

        rows = [DetailedSalesRow.model_validate(r._asdict()) for r in q.order_by(Sale.date, Sale.id).all()]
        logger.debug("Loaded %d detailed sales rows for %s", len(rows), date_range)
        return rows

    def get_store(self, slug: str) -> Optional[StoreRef]:
        store = self._db.query(Store).filter(Store.slug == slug).first()
        return StoreRef.model_validate(store) if store else None


class InMemorySalesRowSource:
    """Serves detailed rows held in memory; summary rows and store totals are derived from them."""

    def __init__(self, rows: Iterable, stores: Iterable = ()):
        self._rows = [
            r if isinstance(r, DetailedSalesRow) else DetailedSalesRow.model_validate(r)
            for r in rows
        ]
        self._stores = [
            s if isinstance(s, StoreRef) else StoreRef.model_validate(s)
            for s in stores
        ]

    def summary_rows(self, store_id: Optional[int] = None) -> List[SalesRow]:
        return [
            SalesRow(id=r.id, date=r.date, qty=r.qty)
            for r in self._rows
            if store_id is None or r.store_id == store_id
        ]

    def store_totals(self) -> List[StoreTotalsRow]:
        totals: dict = {}
        for r in self._rows:
            key = r.store_id
            if key not in totals:
                known = self._store_by_id(r.store_id)
                totals[key] = StoreTotalsRow(
                    id=r.store_id,
                    name=known.name if known else r.store_name,
                    slug=known.slug if known else r.store_slug,
                )
            totals[key].total_sales += r.qty
        return list(totals.values())

    def detailed_rows(self, date_range: DateRange, store_ids: Sequence[int] = ()) -> List[DetailedSalesRow]:
        rows = self._rows
        if date_range.is_bounded:
            rows = [r for r in rows if date_range.contains(r.date)]
        if store_ids:
            wanted = set(store_ids)
            rows = [r for r in rows if r.store_id in wanted]
        return list(rows)

    def get_store(self, slug: str) -> Optional[StoreRef]:
        for store in self._stores:
            if store.slug == slug:
                return store
        for r in self._rows:
            if r.store_slug == slug and r.store_id is not None:
                return StoreRef(id=r.store_id, name=r.store_name or "", slug=r.store_slug)
        return None

    def _store_by_id(self, store_id: Optional[int]) -> Optional[StoreRef]:
        if store_id is None:
            return None
        return next((s for s in self._stores if s.id == store_id), None)
