"""
Engine services.

Each service handles one domain area.
"""

from services.band_scoring_service import (
    BandRuleBook,
    score_performance,
    evaluate_sales_band,
    evaluate_against_band,
)
from services.price_evaluation_service import (
    evaluate_price,
    compute_price_index,
    price_demand_multiplier,
)
from services.season_forecast_service import (
    forecast_season,
    season_score_for_week,
    monthly_outlook,
)
from services.capacity_allocation_service import (
    CapacityAllocationService,
    get_capacity_allocation_service,
)
from services.sales_window_service import summarize_sales
from services.performance_report_service import PerformanceReportService, sort_rows

__all__ = [
    "BandRuleBook",
    "score_performance",
    "evaluate_sales_band",
    "evaluate_against_band",
    "evaluate_price",
    "compute_price_index",
    "price_demand_multiplier",
    "forecast_season",
    "season_score_for_week",
    "monthly_outlook",
    "CapacityAllocationService",
    "get_capacity_allocation_service",
    "summarize_sales",
    "PerformanceReportService",
    "sort_rows",
]
