"""
Season models: demand curves and remaining-season forecasts.

A season curve holds 52 weekly demand-strength scores (0-100) for one
season scenario in one market zone. Index 0 is the first week of the year.
"""

from enum import Enum
from typing import List, Optional

from pydantic import Field, field_validator

from config.thresholds import WEEKS_PER_YEAR
from models.base import BaseSchema


class ForecastOutlook(str, Enum):
    """Six-month demand outlook."""

    STRONG = "Strong"
    NEUTRAL = "Neutral"
    WEAK = "Weak"


class SeasonCurve(BaseSchema):
    """Weekly demand-strength curve for a (scenario, market zone) scope."""

    definition_key: str = Field(..., description="Season scenario definition")
    market_zone: str = Field(..., description="Market zone the curve applies to")
    weeks: List[float] = Field(default_factory=list, description="Weekly scores, index 0 = week 1")

    @field_validator("weeks")
    @classmethod
    def clamp_scores(cls, v: List[float]) -> List[float]:
        """Scores outside 0..100 are clamped, not rejected."""
        return [min(100.0, max(0.0, float(score))) for score in v]

    @property
    def scope_key(self) -> str:
        return f"{self.definition_key}|{self.market_zone}"

    @property
    def is_complete(self) -> bool:
        """Curves shorter than a full year are treated as no curve."""
        return len(self.weeks) >= WEEKS_PER_YEAR


class DemandBaseline(BaseSchema):
    """Units sold per day when the curve score is 100."""

    units_per_day_at_full_score: float = 0.0

    @property
    def has_estimate(self) -> bool:
        return self.units_per_day_at_full_score > 0


class StockSnapshot(BaseSchema):
    """On-hand stock at forecast time. Read-only input."""

    on_hand: int = Field(default=0, ge=0)


class ForecastMonth(BaseSchema):
    """One 4-week forecast bucket."""

    index: int = Field(..., ge=0, description="Bucket position, 0 = current month")
    week_indices: List[int] = Field(default_factory=list, description="Curve weeks included")
    weeks_count: int = Field(..., ge=0, le=4)
    score_avg: float = Field(..., ge=0, le=100)
    potential_units: float = Field(..., ge=0)


class SeasonForecast(BaseSchema):
    """Remaining-season demand against current stock."""

    current_week_index: int
    out_of_season: bool = Field(default=False, description="Current week score is zero")
    no_demand_estimate: bool = Field(default=False, description="Baseline demand is not positive")

    first_zero_step: Optional[int] = Field(
        None, description="Weeks ahead of the first zero score; None if the season never ends"
    )
    end_week_index: Optional[int] = Field(None, description="Curve index of the first zero score")
    weeks_remaining: int = Field(default=0, ge=0, le=WEEKS_PER_YEAR)

    months: List[ForecastMonth] = Field(default_factory=list)

    potential_units: float = Field(default=0.0, ge=0)
    expected_sold: float = Field(default=0.0, ge=0)
    expected_leftover: float = Field(default=0.0, ge=0)

    stockout_month_index: Optional[int] = Field(
        None, description="First month whose cumulative potential covers current stock"
    )


class SeasonScore(BaseSchema):
    """Curve score for a single week."""

    score: float = Field(..., ge=0, le=100)
    missing_curve: bool = False


class MonthlyOutlook(BaseSchema):
    """Next six 4-week periods, averaged without stopping at season end."""

    scores: List[float] = Field(default_factory=list)
    outlook: ForecastOutlook
    peak_month_index: int = Field(..., ge=0)
    peak_month_score: float = Field(..., ge=0, le=100)
