"""
Sales observation schemas.

One observation per product per simulated day, as logged by the day tick.
"""

from datetime import date, datetime
from typing import Optional

from pydantic import Field, field_validator

from models.base import BaseSchema
from models.trends import TrendDirection, TrendStrength


class SalesObservation(BaseSchema):
    """Daily shipped/returned units for one product."""

    day: date = Field(..., description="Simulated day")
    units_shipped: int = Field(default=0, ge=0, description="Units shipped that day")
    units_returned: int = Field(default=0, ge=0, description="Units returned that day")
    gross_revenue: float = Field(default=0.0, ge=0, description="Revenue booked that day")
    gross_profit: float = Field(default=0.0, description="Gross profit booked that day")

    @field_validator("day", mode="before")
    @classmethod
    def parse_date(cls, v):
        """Parse date from string or datetime."""
        if isinstance(v, str):
            return date.fromisoformat(v)
        if isinstance(v, datetime):
            return v.date()
        return v


class SalesWindowStats(BaseSchema):
    """Trailing-window sales figures for one product."""

    days_with_data: int = Field(default=0, ge=0)
    total_shipped: int = Field(default=0, ge=0)
    total_returned: int = Field(default=0, ge=0)

    avg_daily_sales: float = Field(default=0.0, ge=0, description="Primary (30-day) average")
    avg_daily_sales_short: float = Field(default=0.0, ge=0, description="Secondary (7-day) average")

    short_vs_long_pct: Optional[float] = Field(
        None, description="% difference of short vs primary average; None without sales"
    )
    trend_direction: TrendDirection = TrendDirection.STABLE
    trend_strength: TrendStrength = TrendStrength.WEAK

    return_rate_pct: Optional[float] = Field(None, ge=0, le=100)
    avg_gross_profit: float = 0.0
    avg_gross_revenue: float = Field(default=0.0, ge=0)
