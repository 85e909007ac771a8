"""
Report models: per-product inputs, list rows and the detail view.

ProductPerformanceInput is what the host application loads for one
listed product; everything else in this module is computed from it.
"""

from enum import Enum
from typing import List, Optional

from pydantic import Field

from models.base import BaseSchema
from models.performance import (
    BandConfig,
    PerformanceLabel,
    SalesBandEvaluation,
)
from models.pricing import PriceEvaluation
from models.sales import SalesObservation, SalesWindowStats
from models.season import (
    DemandBaseline,
    MonthlyOutlook,
    SeasonCurve,
    SeasonForecast,
    StockSnapshot,
)


class PerformanceSortKey(str, Enum):
    """Columns the performance list can be sorted by."""

    PERFORMANCE = "performance"
    NAME = "name"
    AVG_DAILY_SALES = "avg_daily_sales"
    PROFITABILITY = "profitability"
    STOCK_RISK = "stock_risk"
    SEASON_FIT = "season_fit"
    EXPECTED_SOLD = "expected_sold"
    EXPECTED_LEFTOVER = "expected_leftover"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class CampaignStatus(str, Enum):
    """Marketing campaign lifecycle."""

    SCHEDULED = "SCHEDULED"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class CampaignSnapshot(BaseSchema):
    """Marketing campaign attached to a listing."""

    status: CampaignStatus
    package_price: float = Field(default=0.0, ge=0, description="Package price at purchase")

    @property
    def is_running(self) -> bool:
        return self.status in (CampaignStatus.ACTIVE, CampaignStatus.SCHEDULED)


class CampaignSummary(BaseSchema):
    """Marketing impact card."""

    active_count: int = Field(default=0, ge=0)
    spend_total: float = Field(default=0.0, ge=0)
    note: str


class ProductPerformanceInput(BaseSchema):
    """Everything the report needs for one listed product in one warehouse."""

    product_id: str
    product_name: str = "Unknown"
    category_key: str = Field(default="", description="Band category the product rolls up to")
    quality_tier: str = Field(default="STANDARD", description="Product quality")
    market_zone: Optional[str] = None

    stock: StockSnapshot = Field(default_factory=StockSnapshot)
    sales: List[SalesObservation] = Field(default_factory=list)
    sale_price: float = Field(default=0.0, ge=0)

    price_index: Optional[float] = Field(None, description="Stored price index; None when never priced")
    blocked_by_price: bool = False

    season_curve: Optional[SeasonCurve] = None
    demand_baseline: DemandBaseline = Field(default_factory=DemandBaseline)

    campaigns: List[CampaignSnapshot] = Field(default_factory=list)
    player_level: Optional[int] = Field(None, description="Player level, selects supportive notes")


class PerformanceListRow(BaseSchema):
    """One row of the performance list."""

    product_id: str
    product_name: str
    market_zone: Optional[str] = None

    label: PerformanceLabel
    rank: int = Field(..., description="Fixed scalar per label, used for sorting")
    performance_note: str
    sales_band_evaluation: SalesBandEvaluation

    avg_daily_sales: float = Field(default=0.0, ge=0)
    profit_margin: float = 0.0
    stock_days_remaining: Optional[float] = Field(None, ge=0, description="None when nothing sells")
    season_score: float = Field(default=0.0, ge=0, le=100)

    expected_sold_season: Optional[float] = Field(None, description="None when no curve is loaded")
    expected_leftover_season: Optional[float] = Field(None, description="None when no curve is loaded")


class PerformanceDetail(PerformanceListRow):
    """Single-product detail view."""

    stock_on_hand: int = Field(default=0, ge=0)
    warehouse_tier: int = Field(..., ge=1, le=5)
    band: Optional[BandConfig] = None
    expected_mode: Optional[float] = None
    expected_vs_actual_line: str

    price_index: Optional[float] = None
    blocked_by_price: bool = False
    price_evaluation: PriceEvaluation

    sales: SalesWindowStats
    campaigns: CampaignSummary

    outlook: MonthlyOutlook
    stock_days_left: float = Field(..., ge=0, description="Stock over max(avg daily, 0.1)")
    stock_vs_peak_note: str
    season_forecast: Optional[SeasonForecast] = None
