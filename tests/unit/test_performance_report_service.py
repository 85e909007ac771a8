"""
Unit tests for Performance Report Service.

Tests:
1. List rows (band label, percentile, stock days, season figures)
2. Detail view (expected line, campaigns, price feedback, outlook)
3. Sorting (stable, sentinels for missing values)
"""

import pytest

from models.performance import PerformanceLabel, SalesBandLabel
from models.pricing import PriceTone
from models.report import (
    CampaignSnapshot,
    CampaignStatus,
    PerformanceSortKey,
    SortDirection,
)
from services.performance_report_service import PerformanceReportService, sort_rows
from tests.factories import ProductInputFactory, SeasonCurveFactory


@pytest.fixture
def service(rule_book, today) -> PerformanceReportService:
    return PerformanceReportService(
        rule_book=rule_book,
        warehouse_tier=3,
        current_week_index=0,
        as_of=today,
    )


@pytest.fixture
def seasonal_product(today):
    """Worked example: 25/day against band 10..30, curve flat 40 until week 10."""
    return ProductInputFactory.create(
        today,
        units_per_day=[25] * 30,
        stock=500,
        season_curve=SeasonCurveFactory.flat(40, zero_weeks=[10, 11, 12]),
        baseline=5,
    )


# ===================
# TEST 1: LIST ROWS
# ===================

class TestBuildRow:
    """Tests for build_row and build_rows."""

    def test_worked_example_row(self, service, seasonal_product):
        row = service.build_row(seasonal_product)

        assert row.label == PerformanceLabel.GOOD
        assert row.rank == 70
        assert row.performance_note == "On target"
        assert row.sales_band_evaluation.label == SalesBandLabel.VERY_GOOD
        assert row.sales_band_evaluation.pct == 75
        assert row.avg_daily_sales == 25
        assert row.stock_days_remaining == 20
        assert row.season_score == 40
        assert row.expected_sold_season == pytest.approx(140)
        assert row.expected_leftover_season == pytest.approx(360)

    def test_missing_band(self, service, today):
        product = ProductInputFactory.create(today, units_per_day=[3] * 30, category_key="SHOES")
        row = service.build_row(product)

        assert row.label == PerformanceLabel.AVERAGE
        assert row.performance_note.startswith("Band not configured")
        assert row.sales_band_evaluation.label == SalesBandLabel.BAND_NOT_FOUND

    def test_no_sales(self, service, today):
        product = ProductInputFactory.create(today, units_per_day=[], stock=40)
        row = service.build_row(product)

        assert row.label == PerformanceLabel.POOR
        assert row.stock_days_remaining is None
        assert row.sales_band_evaluation.label == SalesBandLabel.WEAK

    def test_without_curve(self, service, today):
        product = ProductInputFactory.create(today, units_per_day=[12] * 30)
        row = service.build_row(product)

        assert row.season_score == 50
        assert row.expected_sold_season is None
        assert row.expected_leftover_season is None

    def test_low_stock_note(self, service, today):
        product = ProductInputFactory.create(today, units_per_day=[20] * 30, stock=100)
        row = service.build_row(product)

        assert row.stock_days_remaining == 5
        assert row.performance_note == "On target · Low stock risk"

    def test_tier_picks_band(self, rule_book, today):
        product = ProductInputFactory.create(today, units_per_day=[5] * 30, quality_tier="PREMIUM")
        low = PerformanceReportService(rule_book, 1, 0, today).build_row(product)
        high = PerformanceReportService(rule_book, 4, 0, today).build_row(product)

        # Premium 2..6 at tier 1, 5..15 at tier 3+
        assert low.label == PerformanceLabel.GOOD
        assert high.label == PerformanceLabel.AVERAGE

    def test_tier_defaults_and_clamps(self, rule_book, today):
        assert PerformanceReportService(rule_book, None, 0, today).warehouse_tier == 1
        assert PerformanceReportService(rule_book, 9, 0, today).warehouse_tier == 5

    def test_build_rows_keeps_input_order(self, service, today):
        products = [
            ProductInputFactory.create(today, units_per_day=[n] * 30) for n in (1, 40, 20)
        ]
        rows = service.build_rows(products)
        assert [row.product_id for row in rows] == [p.product_id for p in products]


# ===================
# TEST 2: DETAIL VIEW
# ===================

class TestBuildDetail:
    """Tests for build_detail."""

    def test_expected_vs_actual_line(self, service, seasonal_product):
        detail = service.build_detail(seasonal_product)

        assert detail.expected_mode == 18
        assert detail.expected_vs_actual_line == "Expected ~18.0/day · Actual 25.0/day"
        assert detail.band is not None
        assert detail.warehouse_tier == 3

    def test_no_band_line(self, service, today):
        product = ProductInputFactory.create(today, units_per_day=[3] * 30, category_key="SHOES")
        detail = service.build_detail(product)

        assert detail.expected_mode is None
        assert detail.expected_vs_actual_line == "Actual 3.0/day (no band)"

    def test_detail_matches_row(self, service, seasonal_product):
        row = service.build_row(seasonal_product)
        detail = service.build_detail(seasonal_product)

        assert detail.label == row.label
        assert detail.rank == row.rank
        assert detail.expected_sold_season == row.expected_sold_season
        assert detail.stock_on_hand == 500

    def test_campaign_summary(self, service, today):
        product = ProductInputFactory.create(
            today,
            units_per_day=[10] * 30,
            campaigns=[
                CampaignSnapshot(status=CampaignStatus.ACTIVE, package_price=100),
                CampaignSnapshot(status=CampaignStatus.SCHEDULED, package_price=40),
                CampaignSnapshot(status=CampaignStatus.COMPLETED, package_price=75),
            ],
        )
        campaigns = service.build_detail(product).campaigns

        assert campaigns.active_count == 2
        assert campaigns.spend_total == 140
        assert campaigns.note == "Responds well to ads"

    def test_no_campaigns(self, service, seasonal_product):
        campaigns = service.build_detail(seasonal_product).campaigns
        assert campaigns.active_count == 0
        assert campaigns.note == "No active campaign"

    def test_missing_price_index_is_neutral(self, service, seasonal_product):
        detail = service.build_detail(seasonal_product)
        assert detail.price_index is None
        assert detail.price_evaluation.tone == PriceTone.NEUTRAL

    def test_blocked_price(self, service, today):
        product = ProductInputFactory.create(
            today, units_per_day=[10] * 30, price_index=1.0, blocked_by_price=True
        )
        assert service.build_detail(product).price_evaluation.tone == PriceTone.DANGER

    def test_outlook_and_stock_note(self, service, seasonal_product):
        detail = service.build_detail(seasonal_product)

        assert len(detail.outlook.scores) == 6
        assert detail.stock_days_left == 20
        assert detail.stock_vs_peak_note == "Stock should cover through peak"

    def test_trend_in_detail(self, service, today):
        product = ProductInputFactory.create(today, units_per_day=[5] * 23 + [10] * 7)
        detail = service.build_detail(product)

        assert detail.sales.avg_daily_sales_short == 10
        assert detail.sales.short_vs_long_pct > 0

    def test_forecast_attached(self, service, seasonal_product):
        forecast = service.build_detail(seasonal_product).season_forecast
        assert [m.weeks_count for m in forecast.months] == [4, 4, 2]


# ===================
# TEST 3: SORTING
# ===================

class TestSortRows:
    """Tests for sort_rows."""

    @pytest.fixture
    def rows(self, service, today):
        products = [
            ProductInputFactory.create(today, units_per_day=[20] * 30, product_name="banana"),
            ProductInputFactory.create(today, units_per_day=[40] * 30, product_name="Cherry"),
            ProductInputFactory.create(today, units_per_day=[], product_name="apple"),
            ProductInputFactory.create(
                today,
                units_per_day=[25] * 30,
                product_name="date",
                stock=500,
                season_curve=SeasonCurveFactory.flat(40, zero_weeks=[10]),
                baseline=5,
            ),
        ]
        return service.build_rows(products)

    def test_default_lists_poor_first(self, rows):
        """The plain call runs Poor -> Excellent; equal labels keep input order."""
        ordered = sort_rows(rows)
        assert [row.label for row in ordered] == [
            PerformanceLabel.POOR,
            PerformanceLabel.GOOD,
            PerformanceLabel.GOOD,
            PerformanceLabel.EXCELLENT,
        ]
        assert [row.product_name for row in ordered] == ["apple", "banana", "date", "Cherry"]

    def test_default_with_two_rows(self, service, today):
        rows = service.build_rows([
            ProductInputFactory.create(today, units_per_day=[40] * 30),
            ProductInputFactory.create(today, units_per_day=[1] * 30),
        ])
        assert [row.label for row in sort_rows(rows)] == [
            PerformanceLabel.POOR,
            PerformanceLabel.EXCELLENT,
        ]

    def test_ties_keep_input_order_descending(self, rows):
        ordered = sort_rows(rows, PerformanceSortKey.PERFORMANCE, SortDirection.DESC)
        assert [row.product_name for row in ordered] == ["Cherry", "banana", "date", "apple"]

    def test_default_direction_per_key(self, rows):
        """Stock risk defaults to ascending, sales to descending."""
        by_stock = sort_rows(rows, PerformanceSortKey.STOCK_RISK)
        by_sales = sort_rows(rows, PerformanceSortKey.AVG_DAILY_SALES)
        assert by_stock[0].product_name == "Cherry"
        assert [row.avg_daily_sales for row in by_sales] == [40, 25, 20, 0]

    def test_name_is_case_insensitive(self, rows):
        ordered = sort_rows(rows, PerformanceSortKey.NAME, SortDirection.ASC)
        assert [row.product_name for row in ordered] == ["apple", "banana", "Cherry", "date"]

    def test_missing_stock_days_sort_last_ascending(self, rows):
        ordered = sort_rows(rows, PerformanceSortKey.STOCK_RISK, SortDirection.ASC)
        assert ordered[-1].product_name == "apple"
        assert ordered[0].product_name == "Cherry"

    def test_missing_forecast_sorts_last_descending(self, rows):
        ordered = sort_rows(rows, PerformanceSortKey.EXPECTED_SOLD, SortDirection.DESC)
        assert ordered[0].product_name == "date"
        assert [row.product_name for row in ordered[1:]] == ["banana", "Cherry", "apple"]

    def test_accepts_string_keys(self, rows):
        ordered = sort_rows(rows, "avg_daily_sales", "asc")
        assert [row.avg_daily_sales for row in ordered] == [0, 20, 25, 40]

    def test_input_untouched(self, rows):
        before = list(rows)
        sort_rows(rows, PerformanceSortKey.NAME)
        assert rows == before
