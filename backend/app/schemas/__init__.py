from .metadata import StoreListOut, CategoryOut
from .sales import SalesRow, DetailedSalesRow, StoreTotalsRow, StoreRef
from .dashboard import DashboardOverviewOut, StoreDashboardOut, ErrorOut

__all__ = [
    "StoreListOut", "CategoryOut",
    "SalesRow", "DetailedSalesRow", "StoreTotalsRow", "StoreRef",
    "DashboardOverviewOut", "StoreDashboardOut", "ErrorOut",
]
