from typing import Dict, List, Optional, Union
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# Whole-number quantities stay integers on the wire
Number = Union[int, float]


class CamelModel(BaseModel):
    """Dashboard payloads use camelCase keys on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DateRangeOut(CamelModel):
    start_date: Optional[str] = None
    end_date: Optional[str] = None


class FilterOut(CamelModel):
    type: str
    year: Optional[int] = None
    month: Optional[int] = None      # 0-indexed
    range: DateRangeOut


class OverviewFilterOut(FilterOut):
    applied_store_ids: List[int] = []


class DefaultSelections(CamelModel):
    year: Optional[int] = None
    month: Optional[int] = None


class OverviewDefaultSelections(DefaultSelections):
    stores: List[int] = []


class StoreSummaryOut(CamelModel):
    id: int
    name: str
    slug: Optional[str] = None
    total_sales: Number


class MetadataOut(CamelModel):
    available_years: List[int]
    available_months_by_year: Dict[str, List[int]]
    months_for_selected_year: List[int]
    default_selections: DefaultSelections
    total_records: int


class OverviewMetadataOut(MetadataOut):
    default_selections: OverviewDefaultSelections
    stores: List[StoreSummaryOut]


class TotalsOut(CamelModel):
    total_quantity: Number
    today_sales: Number
    previous_period_sales: Number
    percentage_change: Number
    current_target: int
    target_progress: Number
    remaining_target: Number


class OverviewTotalsOut(TotalsOut):
    total_stores: int


class CategorySales(CamelModel):
    category: str
    sales: Number


class ProductSales(CamelModel):
    product: str
    sales: Number


class HighlightsOut(CamelModel):
    top_categories: List[CategorySales]
    top_products: List[ProductSales]


class SeriesOut(CamelModel):
    name: str
    data: List[Number]


class SalesStatsOut(CamelModel):
    granularity: str                 # month | week | day
    labels: List[str]
    is_multiple_series: bool
    series: List[SeriesOut]


class ChartDataOut(CamelModel):
    labels: List[str]
    values: List[Number]


class MonthlySeriesOut(CamelModel):
    months: List[str]
    sales: List[Number]


class TopStoreOut(CamelModel):
    store_id: Optional[int] = None
    storename: str
    store_slug: Optional[str] = None
    sales: Number


class ChartsOut(CamelModel):
    sales_stats: SalesStatsOut
    category_distribution: ChartDataOut
    top_products: List[ProductSales]
    top_categories: List[CategorySales]
    monthly_sales: MonthlySeriesOut


class OverviewChartsOut(ChartsOut):
    top_stores: List[TopStoreOut]


class StoreChartsOut(ChartsOut):
    product_distribution: ChartDataOut


class StoreRankingOut(CamelModel):
    store_id: Optional[int] = None
    storename: str
    store_slug: Optional[str] = None
    total_sales: Number
    top_category: str
    top_product: str


class StoreBreakdownOut(CamelModel):
    store_id: Optional[int] = None
    storename: str
    total_sales: Number
    top_category: str
    top_product: str
    category_sales: List[CategorySales]
    product_sales: List[ProductSales]
    monthly_sales: MonthlySeriesOut


class StoresOut(CamelModel):
    ranking: List[StoreRankingOut]
    breakdown: List[StoreBreakdownOut]


class CountsOut(CamelModel):
    total_rows: int


class DashboardOverviewOut(CamelModel):
    filter: OverviewFilterOut
    metadata: OverviewMetadataOut
    totals: OverviewTotalsOut
    highlights: HighlightsOut
    charts: OverviewChartsOut
    stores: StoresOut
    counts: CountsOut


class StoreOut(CamelModel):
    id: int
    name: str
    slug: Optional[str] = None


class StoreDashboardOut(CamelModel):
    store: StoreOut
    filter: FilterOut
    metadata: MetadataOut
    totals: TotalsOut
    highlights: HighlightsOut
    charts: StoreChartsOut
    counts: CountsOut


class ErrorOut(BaseModel):
    error: str
    message: str
