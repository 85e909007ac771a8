"""
Performance models: band configuration and band-based scoring results.

A band is the expected daily-sales range for a category + quality + tier
combination. Scores are always relative to the band that matched.
"""

from enum import Enum
from typing import Optional

from pydantic import Field, model_validator

from config.thresholds import TIER_MAX, TIER_MIN
from exceptions.errors import InvalidBandConfigError
from models.base import BaseSchema


class PerformanceLabel(str, Enum):
    """Coarse performance label shown on list and detail pages."""

    POOR = "Poor"
    AVERAGE = "Average"
    GOOD = "Good"
    EXCELLENT = "Excellent"


class SalesBandLabel(str, Enum):
    """Band-relative percentile bucket for list display."""

    WEAK = "Weak"
    BAD = "Bad"
    GOOD = "Good"
    VERY_GOOD = "Very good"
    SUPER = "Super"
    BAND_NOT_FOUND = "Band not found"


class SalesBandTone(str, Enum):
    """Display tone of a sales band evaluation."""

    DANGER = "danger"
    WARNING = "warning"
    NEUTRAL = "neutral"
    SUCCESS = "success"


class BandConfig(BaseSchema):
    """One expected-sales band row.

    Rows are matched in list order; see BandRuleBook.
    """

    category_key: str = Field(..., min_length=1, description="Band category (L2 category id)")
    quality_tier: str = Field(..., min_length=1, description="Product quality, e.g. STANDARD")
    tier_min: int = Field(..., description="Lowest warehouse tier this band applies to")
    tier_max: int = Field(..., description="Highest warehouse tier this band applies to")
    min_daily: float = Field(..., ge=0, description="Lower edge of expected daily sales")
    max_daily: float = Field(..., ge=0, description="Upper edge of expected daily sales")
    expected_mode: Optional[float] = Field(
        None, ge=0, description="Most likely daily sales; midpoint when missing"
    )

    @model_validator(mode="after")
    def check_ranges(self) -> "BandConfig":
        """Tier range must sit inside 1..5 and min_daily must not exceed max_daily."""
        if not (TIER_MIN <= self.tier_min <= self.tier_max <= TIER_MAX):
            raise InvalidBandConfigError(
                self.category_key,
                self.quality_tier,
                f"tier range {self.tier_min}..{self.tier_max} outside {TIER_MIN}..{TIER_MAX}",
            )
        if self.min_daily > self.max_daily:
            raise InvalidBandConfigError(
                self.category_key,
                self.quality_tier,
                f"min_daily {self.min_daily} exceeds max_daily {self.max_daily}",
            )
        return self

    @property
    def effective_expected(self) -> float:
        """expected_mode, or the band midpoint when not configured."""
        if self.expected_mode is not None:
            return self.expected_mode
        return (self.min_daily + self.max_daily) / 2

    def covers(self, category_key: str, quality_tier: str, tier: int) -> bool:
        return (
            self.category_key == category_key
            and self.quality_tier == quality_tier
            and self.tier_min <= tier <= self.tier_max
        )


class BandScore(BaseSchema):
    """Band-based performance label with its note and sort rank."""

    label: PerformanceLabel
    note: str = Field(..., description="One-line rule-based note for overview and list")
    rank: int = Field(..., ge=0, le=100, description="Fixed scalar per label, for sorting only")


class SalesBandEvaluation(BaseSchema):
    """Where actual daily sales sit inside the band (0-100)."""

    pct: float = Field(..., ge=0, le=100, description="Position inside the band")
    label: SalesBandLabel
    note: str
    tone: SalesBandTone
