from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, field_validator

from ..utils.dates import normalize_row_date, to_number


class SalesRow(BaseModel):
    """Summary row: just enough for metadata and range scans."""
    id: Optional[int] = None
    date: str
    qty: Union[int, float] = 0

    model_config = ConfigDict(from_attributes=True)

    @field_validator("date", mode="before")
    @classmethod
    def _normalize_date(cls, v):
        return normalize_row_date(v)

    @field_validator("qty", mode="before")
    @classmethod
    def _coerce_qty(cls, v):
        return to_number(v)


class DetailedSalesRow(SalesRow):
    """Summary row joined with its store / category / product."""
    store_id: Optional[int] = None
    store_name: Optional[str] = None
    store_slug: Optional[str] = None
    category_id: Optional[int] = None
    category_name: Optional[str] = None
    product_id: Optional[int] = None
    product_name: Optional[str] = None


class StoreTotalsRow(BaseModel):
    id: Optional[int] = None
    name: Optional[str] = None
    slug: Optional[str] = None
    total_sales: Union[int, float] = 0

    model_config = ConfigDict(from_attributes=True)

    @field_validator("total_sales", mode="before")
    @classmethod
    def _coerce_total(cls, v):
        return to_number(v)


class StoreRef(BaseModel):
    id: int
    name: str
    slug: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
