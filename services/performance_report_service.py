"""
Performance report service: list rows and detail view per product.

Combines band scoring, price evaluation, the season forecast and the
sales window for one warehouse on one simulated day. All inputs are
loaded by the caller; this service does no I/O.
"""

import math
from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, List, Optional, Sequence

import structlog

from config import settings
from models.performance import BandConfig, BandScore, SalesBandEvaluation
from models.report import (
    CampaignSummary,
    PerformanceDetail,
    PerformanceListRow,
    PerformanceSortKey,
    ProductPerformanceInput,
    SortDirection,
)
from models.sales import SalesWindowStats
from models.season import SeasonForecast
from services.band_scoring_service import (
    BandRuleBook,
    clamp_tier,
    evaluate_against_band,
    score_performance,
)
from services.price_evaluation_service import NEUTRAL_PRICE_INDEX, evaluate_price
from services.sales_window_service import (
    profit_margin,
    stock_days_left,
    stock_days_remaining,
    summarize_sales,
)
from services.season_forecast_service import (
    forecast_season,
    monthly_outlook,
    season_score_for_week,
    stock_vs_peak_note,
)

logger = structlog.get_logger(__name__)

# Sort sentinels for missing values
STOCK_DAYS_MISSING = math.inf      # nothing sells -> stock never runs out
EXPECTED_MISSING = -1.0            # no curve -> below any real forecast
NUMERIC_MISSING = -math.inf


@dataclass
class _ProductFigures:
    """Everything computed once per product and shared by row and detail."""

    stats: SalesWindowStats
    band: Optional[BandConfig]
    score: BandScore
    band_evaluation: SalesBandEvaluation
    margin: float
    days_remaining: Optional[float]
    season_score: float
    forecast: Optional[SeasonForecast]


class PerformanceReportService:
    """
    Builds performance list rows and detail views for one warehouse.

    Usage:
        service = PerformanceReportService(
            rule_book=BandRuleBook(bands),
            warehouse_tier=3,
            current_week_index=week_index,
            as_of=current_day,
        )
        rows = sort_rows(service.build_rows(products), PerformanceSortKey.PERFORMANCE)
    """

    def __init__(
        self,
        rule_book: BandRuleBook,
        warehouse_tier: Optional[int],
        current_week_index: int,
        as_of: date,
    ):
        self.rule_book = rule_book
        self.warehouse_tier = clamp_tier(
            settings.default_warehouse_tier if warehouse_tier is None else warehouse_tier
        )
        self.current_week_index = current_week_index
        self.as_of = as_of

    def _figures(self, product: ProductPerformanceInput) -> _ProductFigures:
        stock_on_hand = product.stock.on_hand
        stats = summarize_sales(product.sales, self.as_of)
        avg_daily = stats.avg_daily_sales
        days_remaining = stock_days_remaining(stock_on_hand, avg_daily)

        band = self.rule_book.match(product.category_key, product.quality_tier, self.warehouse_tier)
        score = score_performance(avg_daily, band, stock_on_hand, days_remaining)

        curve = product.season_curve
        if curve is not None and curve.is_complete:
            season_score = season_score_for_week(curve, self.current_week_index).score
        else:
            season_score = settings.default_season_score

        forecast = forecast_season(
            curve,
            self.current_week_index,
            product.demand_baseline.units_per_day_at_full_score,
            stock_on_hand,
        )

        return _ProductFigures(
            stats=stats,
            band=band,
            score=score,
            band_evaluation=evaluate_against_band(avg_daily, band, product.player_level),
            margin=profit_margin(stats, product.sale_price),
            days_remaining=days_remaining,
            season_score=season_score,
            forecast=forecast,
        )

    @staticmethod
    def _row(product: ProductPerformanceInput, figures: _ProductFigures) -> PerformanceListRow:
        forecast = figures.forecast
        return PerformanceListRow(
            product_id=product.product_id,
            product_name=product.product_name,
            market_zone=product.market_zone,
            label=figures.score.label,
            rank=figures.score.rank,
            performance_note=figures.score.note,
            sales_band_evaluation=figures.band_evaluation,
            avg_daily_sales=figures.stats.avg_daily_sales,
            profit_margin=figures.margin,
            stock_days_remaining=figures.days_remaining,
            season_score=figures.season_score,
            expected_sold_season=forecast.expected_sold if forecast else None,
            expected_leftover_season=forecast.expected_leftover if forecast else None,
        )

    def build_row(self, product: ProductPerformanceInput) -> PerformanceListRow:
        """Build the list row for one product."""
        return self._row(product, self._figures(product))

    def build_rows(self, products: Sequence[ProductPerformanceInput]) -> List[PerformanceListRow]:
        """Build list rows for every product, in input order."""
        rows = [self.build_row(product) for product in products]
        logger.info(
            "performance_rows_built",
            products=len(rows),
            warehouse_tier=self.warehouse_tier,
            current_week_index=self.current_week_index,
        )
        return rows

    def build_detail(self, product: ProductPerformanceInput) -> PerformanceDetail:
        """
        Build the detail view for one product.

        Adds the 7 vs 30 day trend, marketing snapshot, price feedback and
        the six-month outlook against stock days left.
        """
        figures = self._figures(product)
        row = self._row(product, figures)
        stats = figures.stats
        band = figures.band

        expected_mode = band.effective_expected if band is not None else None
        if expected_mode is not None:
            expected_vs_actual_line = (
                f"Expected ~{expected_mode:.1f}/day · Actual {stats.avg_daily_sales:.1f}/day"
            )
        else:
            expected_vs_actual_line = f"Actual {stats.avg_daily_sales:.1f}/day (no band)"

        running = [campaign for campaign in product.campaigns if campaign.is_running]
        campaigns = CampaignSummary(
            active_count=len(running),
            spend_total=sum(campaign.package_price for campaign in running),
            note="Responds well to ads" if running else "No active campaign",
        )

        outlook = monthly_outlook(product.season_curve, self.current_week_index)
        days_left = stock_days_left(product.stock.on_hand, stats.avg_daily_sales)

        price_index = product.price_index
        price_evaluation = evaluate_price(
            NEUTRAL_PRICE_INDEX if price_index is None else price_index,
            product.blocked_by_price,
        )

        logger.debug(
            "performance_detail_built",
            product_id=product.product_id,
            label=row.label.value,
            has_band=band is not None,
            has_forecast=figures.forecast is not None,
        )

        return PerformanceDetail(
            **row.model_dump(),
            stock_on_hand=product.stock.on_hand,
            warehouse_tier=self.warehouse_tier,
            band=band,
            expected_mode=expected_mode,
            expected_vs_actual_line=expected_vs_actual_line,
            price_index=price_index,
            blocked_by_price=product.blocked_by_price,
            price_evaluation=price_evaluation,
            sales=stats,
            campaigns=campaigns,
            outlook=outlook,
            stock_days_left=days_left,
            stock_vs_peak_note=stock_vs_peak_note(days_left, outlook.peak_month_index),
            season_forecast=figures.forecast,
        )


# ===================
# SORTING
# ===================

def _number(value: Optional[float], missing: float) -> float:
    """Missing or NaN values sort as the given sentinel."""
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return missing
    return value


SORT_KEYS: Dict[PerformanceSortKey, Callable[[PerformanceListRow], object]] = {
    PerformanceSortKey.PERFORMANCE: lambda row: row.rank,
    PerformanceSortKey.NAME: lambda row: row.product_name.casefold(),
    PerformanceSortKey.AVG_DAILY_SALES: lambda row: _number(row.avg_daily_sales, NUMERIC_MISSING),
    PerformanceSortKey.PROFITABILITY: lambda row: _number(row.profit_margin, NUMERIC_MISSING),
    PerformanceSortKey.STOCK_RISK: lambda row: _number(row.stock_days_remaining, STOCK_DAYS_MISSING),
    PerformanceSortKey.SEASON_FIT: lambda row: _number(row.season_score, NUMERIC_MISSING),
    PerformanceSortKey.EXPECTED_SOLD: lambda row: _number(row.expected_sold_season, EXPECTED_MISSING),
    PerformanceSortKey.EXPECTED_LEFTOVER: lambda row: _number(row.expected_leftover_season, EXPECTED_MISSING),
}


# Direction used when the caller does not pick one
DEFAULT_DIRECTIONS: Dict[PerformanceSortKey, SortDirection] = {
    PerformanceSortKey.PERFORMANCE: SortDirection.ASC,  # Poor -> Excellent
    PerformanceSortKey.NAME: SortDirection.ASC,
    PerformanceSortKey.AVG_DAILY_SALES: SortDirection.DESC,
    PerformanceSortKey.PROFITABILITY: SortDirection.DESC,
    PerformanceSortKey.STOCK_RISK: SortDirection.ASC,
    PerformanceSortKey.SEASON_FIT: SortDirection.DESC,
    PerformanceSortKey.EXPECTED_SOLD: SortDirection.DESC,
    PerformanceSortKey.EXPECTED_LEFTOVER: SortDirection.DESC,
}


def sort_rows(
    rows: Sequence[PerformanceListRow],
    sort_key: PerformanceSortKey = PerformanceSortKey.PERFORMANCE,
    direction: Optional[SortDirection] = None,
) -> List[PerformanceListRow]:
    """
    Sort list rows without touching the input.

    Without a direction each key uses its default from DEFAULT_DIRECTIONS,
    so the plain call lists Poor first and most stock-at-risk first.
    Sorting is stable in both directions, so rows with equal keys (e.g.
    the same performance label) keep their input order. Performance
    sorts on the fixed rank per label.
    """
    sort_key = PerformanceSortKey(sort_key)
    direction = DEFAULT_DIRECTIONS[sort_key] if direction is None else SortDirection(direction)
    return sorted(
        rows,
        key=SORT_KEYS[sort_key],
        reverse=direction == SortDirection.DESC,
    )
