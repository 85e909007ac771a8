"""
Pydantic models for engine inputs and computed results.
"""

from models.base import BaseSchema
from models.performance import (
    PerformanceLabel,
    SalesBandLabel,
    SalesBandTone,
    BandConfig,
    BandScore,
    SalesBandEvaluation,
)
from models.pricing import (
    PriceTone,
    PriceEvaluation,
)
from models.season import (
    ForecastOutlook,
    SeasonCurve,
    DemandBaseline,
    StockSnapshot,
    ForecastMonth,
    SeasonForecast,
    SeasonScore,
    MonthlyOutlook,
)
from models.capacity import (
    CapacityConfig,
    BacklogEntry,
    AllocationLine,
    AllocationResult,
    TemporaryStaffQuote,
)
from models.trends import (
    TrendDirection,
    TrendStrength,
)
from models.sales import (
    SalesObservation,
    SalesWindowStats,
)
from models.report import (
    PerformanceSortKey,
    SortDirection,
    CampaignStatus,
    CampaignSnapshot,
    CampaignSummary,
    ProductPerformanceInput,
    PerformanceListRow,
    PerformanceDetail,
)

__all__ = [
    # Base
    "BaseSchema",

    # Performance
    "PerformanceLabel",
    "SalesBandLabel",
    "SalesBandTone",
    "BandConfig",
    "BandScore",
    "SalesBandEvaluation",

    # Pricing
    "PriceTone",
    "PriceEvaluation",

    # Season
    "ForecastOutlook",
    "SeasonCurve",
    "DemandBaseline",
    "StockSnapshot",
    "ForecastMonth",
    "SeasonForecast",
    "SeasonScore",
    "MonthlyOutlook",

    # Capacity
    "CapacityConfig",
    "BacklogEntry",
    "AllocationLine",
    "AllocationResult",
    "TemporaryStaffQuote",

    # Trends
    "TrendDirection",
    "TrendStrength",

    # Sales
    "SalesObservation",
    "SalesWindowStats",

    # Report
    "PerformanceSortKey",
    "SortDirection",
    "CampaignStatus",
    "CampaignSnapshot",
    "CampaignSummary",
    "ProductPerformanceInput",
    "PerformanceListRow",
    "PerformanceDetail",
]
