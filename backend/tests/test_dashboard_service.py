from datetime import date

import pytest

from app.exceptions import InvalidRangeError, InvalidRequestError, NotFoundError
from app.services.dashboard import build_dashboard_overview, build_store_dashboard_overview
from app.utils.sales_source import InMemorySalesRowSource


class TestDashboardOverview:
    def test_default_yearly_overview(self, source, today):
        data = build_dashboard_overview(source, {}, today)

        assert set(data) == {"filter", "metadata", "totals", "highlights", "charts", "stores", "counts"}
        assert data["filter"] == {
            "type": "yearly",
            "year": 2024,
            "month": None,
            "range": {"startDate": "2024-01-01", "endDate": "2024-12-31"},
            "appliedStoreIds": [],
        }

        meta = data["metadata"]
        assert meta["availableYears"] == [2024, 2023]
        assert meta["availableMonthsByYear"] == {"2023": [2, 11], "2024": [0, 2, 5]}
        assert meta["monthsForSelectedYear"] == [0, 2, 5]
        assert meta["defaultSelections"] == {"year": 2024, "month": 0, "stores": [1, 2]}
        assert [s["name"] for s in meta["stores"]] == ["Downtown", "Uptown"]
        assert meta["stores"][0]["totalSales"] == 23
        assert meta["totalRecords"] == 8

        totals = data["totals"]
        assert totals["totalQuantity"] == 28
        assert totals["totalStores"] == 3
        assert totals["todaySales"] == 7
        assert totals["previousPeriodSales"] == 10
        assert totals["percentageChange"] == 180
        assert totals["currentTarget"] == 1000
        assert totals["targetProgress"] == 2.8
        assert totals["remainingTarget"] == 972

        assert data["counts"] == {"totalRows": 6}

    def test_highlights_and_charts(self, source, today):
        data = build_dashboard_overview(source, {}, today)

        assert data["highlights"]["topCategories"] == [
            {"category": "Beverages", "sales": 17},
            {"category": "Snacks", "sales": 10},
        ]
        assert [p["product"] for p in data["highlights"]["topProducts"]] == ["Cola", "Pretzels", "Water"]

        charts = data["charts"]
        assert charts["categoryDistribution"] == {"labels": ["Beverages", "Snacks"], "values": [17, 10]}
        assert [p["product"] for p in charts["topProducts"]] == ["Cola", "Pretzels", "Water", "Chips"]
        assert charts["monthlySales"] == {"months": ["Jan", "Mar", "Jun"], "sales": [10, 3, 15]}
        assert charts["topStores"][0] == {"storeId": 1, "storename": "Downtown", "storeSlug": "downtown", "sales": 19}

        stats = charts["salesStats"]
        assert stats["granularity"] == "month"
        assert [s["name"] for s in stats["series"]] == ["2023", "2024"]
        assert sum(stats["series"][1]["data"]) == 28

    def test_store_sections(self, source, today):
        stores = build_dashboard_overview(source, {}, today)["stores"]

        assert [s["storename"] for s in stores["ranking"]] == ["Downtown", "Uptown", "Unknown Store"]
        assert stores["ranking"][0] == {
            "storeId": 1,
            "storename": "Downtown",
            "storeSlug": "downtown",
            "totalSales": 19,
            "topCategory": "Beverages",
            "topProduct": "Cola",
        }
        assert stores["ranking"][2]["topCategory"] == "N/A"

        downtown = stores["breakdown"][0]
        assert downtown["categorySales"] == [
            {"category": "Beverages", "sales": 12},
            {"category": "Snacks", "sales": 7},
        ]
        assert downtown["productSales"] == [
            {"product": "Cola", "sales": 12},
            {"product": "Pretzels", "sales": 7},
        ]
        assert downtown["monthlySales"] == {"months": ["Jan", "Jun"], "sales": [10, 9]}

    def test_scenario_single_year_monthly_buckets(self, today):
        rows = [
            {"id": 1, "date": "2024-01-05", "qty": 10},
            {"id": 2, "date": "2024-06-15", "qty": 5},
        ]
        data = build_dashboard_overview(InMemorySalesRowSource(rows), {"filterType": "yearly", "year": "2024"}, today)

        series = data["charts"]["salesStats"]["series"]
        assert len(series) == 1
        assert series[0]["data"] == [10, 0, 0, 0, 0, 5, 0, 0, 0, 0, 0, 0]
        assert data["totals"]["totalQuantity"] == 15

    def test_monthly_overview_compares_previous_month(self, source, today):
        data = build_dashboard_overview(source, {"filterType": "monthly", "year": "2024"}, today)

        assert data["filter"]["month"] == 0
        assert data["filter"]["range"] == {"startDate": "2024-01-01", "endDate": "2024-01-31"}
        assert data["totals"]["totalQuantity"] == 10
        assert data["totals"]["previousPeriodSales"] == 6
        assert data["totals"]["percentageChange"] == 66.67
        assert data["charts"]["salesStats"]["granularity"] == "week"
        assert [s["name"] for s in data["charts"]["salesStats"]["series"]] == ["Jan", "Mar", "Jun"]

    def test_daily_weekly_tomorrow_use_request_today(self, source, today):
        daily = build_dashboard_overview(source, {"filterType": "daily"}, today)
        assert daily["totals"]["totalQuantity"] == 7
        assert daily["totals"]["todaySales"] == 7
        assert daily["totals"]["percentageChange"] == 0
        assert daily["charts"]["salesStats"]["labels"] == ["2024-06-12"]

        weekly = build_dashboard_overview(source, {"filterType": "weekly"}, today)
        assert weekly["filter"]["range"] == {"startDate": "2024-06-09", "endDate": "2024-06-15"}
        assert weekly["charts"]["salesStats"]["labels"] == ["2024-06-10", "2024-06-12", "2024-06-13"]
        assert weekly["charts"]["salesStats"]["series"][0]["data"] == [7, 7, 1]

        tomorrow = build_dashboard_overview(source, {"filterType": "tomorrow"}, today)
        assert tomorrow["totals"]["totalQuantity"] == 1
        assert tomorrow["totals"]["todaySales"] == 0
        assert tomorrow["stores"]["ranking"][0]["storename"] == "Unknown Store"

    def test_all_filter_is_unbounded(self, source, today):
        data = build_dashboard_overview(source, {"filterType": "all"}, today)
        assert data["filter"]["range"] == {"startDate": None, "endDate": None}
        assert data["totals"]["totalQuantity"] == 38
        assert data["totals"]["previousPeriodSales"] == 0

    def test_custom_range(self, source, today):
        data = build_dashboard_overview(
            source, {"filterType": "custom", "fromDate": "2024-03-01", "toDate": "2024-06-10"}, today,
        )
        assert data["totals"]["totalQuantity"] == 10
        assert data["counts"]["totalRows"] == 2

    def test_custom_inverted_range_aborts(self, source, today):
        with pytest.raises(InvalidRangeError):
            build_dashboard_overview(
                source, {"filterType": "custom", "fromDate": "2024-03-10", "toDate": "2024-03-01"}, today,
            )

    def test_store_filter(self, source, today):
        data = build_dashboard_overview(source, {"storeIds": "2,x"}, today)
        assert data["filter"]["appliedStoreIds"] == [2]
        assert data["totals"]["totalQuantity"] == 8
        assert [s["storeId"] for s in data["stores"]["ranking"]] == [2]
        # store metadata ignores the active filter
        assert len(data["metadata"]["stores"]) == 2

    def test_no_data(self, today):
        data = build_dashboard_overview(InMemorySalesRowSource([]), {}, today)
        assert data["filter"]["year"] is None
        assert data["metadata"]["availableYears"] == []
        assert data["metadata"]["defaultSelections"] == {"year": None, "month": None, "stores": []}
        assert data["totals"]["currentTarget"] == 0
        assert data["charts"]["salesStats"]["series"] == []

    def test_each_call_is_independent(self, source, today):
        first = build_dashboard_overview(source, {}, today)
        second = build_dashboard_overview(source, {}, today)
        assert first == second


class TestStoreDashboardOverview:
    def test_scoped_to_store(self, source, today):
        data = build_store_dashboard_overview(source, "downtown", {"storeIds": "2"}, today)

        assert set(data) == {"store", "filter", "metadata", "totals", "highlights", "charts", "counts"}
        assert data["store"] == {"id": 1, "name": "Downtown", "slug": "downtown"}
        assert "appliedStoreIds" not in data["filter"]
        assert "stores" not in data["metadata"]["defaultSelections"]
        assert data["metadata"]["totalRecords"] == 4

        totals = data["totals"]
        assert totals["totalQuantity"] == 19
        assert totals["previousPeriodSales"] == 4
        assert totals["percentageChange"] == 375
        assert "totalStores" not in totals

        charts = data["charts"]
        assert charts["productDistribution"] == {"labels": ["Cola", "Pretzels"], "values": [12, 7]}
        assert "topStores" not in charts
        assert charts["salesStats"]["series"][0]["data"][2] == 4     # 2023, Mar

    def test_store_without_sales(self, source, today):
        data = build_store_dashboard_overview(source, "harbour", {}, today)

        assert data["totals"] == {
            "totalQuantity": 0,
            "todaySales": 0,
            "previousPeriodSales": 0,
            "percentageChange": 0,
            "currentTarget": 0,
            "targetProgress": 0,
            "remainingTarget": 0,
        }
        assert data["counts"]["totalRows"] == 0

    def test_unknown_slug(self, source, today):
        with pytest.raises(NotFoundError, match="nowhere"):
            build_store_dashboard_overview(source, "nowhere", {}, today)

    def test_blank_slug(self, source, today):
        with pytest.raises(InvalidRequestError):
            build_store_dashboard_overview(source, "  ", {}, today)

    def test_invalid_custom_range(self, source, today):
        with pytest.raises(InvalidRangeError):
            build_store_dashboard_overview(source, "downtown", {"filterType": "custom", "fromDate": "2024-01-01"}, today)
