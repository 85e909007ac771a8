"""
Sales window service: trailing average daily sales and short-term trend.

Reads daily sales observations for one product and reports the primary
(30-day) and secondary (7-day) averages, their % difference, return rate
and profit margin.
"""

from datetime import date, timedelta
from typing import Optional, Sequence, Tuple

from config import settings
from config.thresholds import MIN_DAILY_SALES_FOR_DAYS_LEFT, TREND_THRESHOLD_STRONG, TREND_THRESHOLD_WEAK
from models.sales import SalesObservation, SalesWindowStats
from models.trends import TrendDirection, TrendStrength


def classify_trend(
    change_pct: Optional[float],
    threshold_strong: float = TREND_THRESHOLD_STRONG,
    threshold_weak: float = TREND_THRESHOLD_WEAK,
) -> Tuple[TrendDirection, TrendStrength]:
    """
    Classify trend direction and strength based on percentage change.

    - STRONG: |change| >= 20%
    - MODERATE: 5% <= |change| < 20%
    - WEAK: |change| < 5% (or no comparison possible)
    """
    if change_pct is None:
        return TrendDirection.STABLE, TrendStrength.WEAK

    abs_change = abs(change_pct)

    if abs_change < threshold_weak:
        return TrendDirection.STABLE, TrendStrength.WEAK
    elif abs_change < threshold_strong:
        direction = TrendDirection.UP if change_pct > 0 else TrendDirection.DOWN
        return direction, TrendStrength.MODERATE
    else:
        direction = TrendDirection.UP if change_pct > 0 else TrendDirection.DOWN
        return direction, TrendStrength.STRONG


def summarize_sales(
    observations: Sequence[SalesObservation],
    as_of: date,
    window_days: Optional[int] = None,
    trend_window_days: Optional[int] = None,
) -> SalesWindowStats:
    """
    Summarize a product's trailing sales window.

    Observations between as_of - window_days and as_of (inclusive) count.
    The primary average divides by the days that have data, between 1 and
    window_days. The short average uses the last trend_window_days
    observations and falls back to the primary average when there are none.

    Args:
        observations: Daily observations, any order
        as_of: Current simulated day
        window_days: Primary window (default from settings, 30)
        trend_window_days: Secondary window (default from settings, 7)

    Returns:
        SalesWindowStats
    """
    window_days = settings.sales_window_days if window_days is None else window_days
    trend_window_days = (
        settings.sales_trend_window_days if trend_window_days is None else trend_window_days
    )

    start = as_of - timedelta(days=window_days)
    in_window = sorted(
        (obs for obs in observations if start <= obs.day <= as_of),
        key=lambda obs: obs.day,
    )

    total_shipped = sum(obs.units_shipped for obs in in_window)
    total_returned = sum(obs.units_returned for obs in in_window)
    days_with_data = len(in_window)

    avg_daily = total_shipped / max(1, min(window_days, days_with_data))

    recent = in_window[-trend_window_days:] if trend_window_days > 0 else []
    if recent:
        avg_daily_short = sum(obs.units_shipped for obs in recent) / len(recent)
    else:
        avg_daily_short = avg_daily

    short_vs_long_pct = (
        (avg_daily_short - avg_daily) / avg_daily * 100 if avg_daily > 0 else None
    )
    direction, strength = classify_trend(short_vs_long_pct)

    return_rate_pct = (
        total_returned / (total_shipped + total_returned) * 100
        if total_shipped > 0 and total_returned > 0
        else None
    )

    if in_window:
        avg_gross_profit = sum(obs.gross_profit for obs in in_window) / days_with_data
        avg_gross_revenue = sum(obs.gross_revenue for obs in in_window) / days_with_data
    else:
        avg_gross_profit = 0.0
        avg_gross_revenue = 0.0

    return SalesWindowStats(
        days_with_data=days_with_data,
        total_shipped=total_shipped,
        total_returned=total_returned,
        avg_daily_sales=avg_daily,
        avg_daily_sales_short=avg_daily_short,
        short_vs_long_pct=short_vs_long_pct,
        trend_direction=direction,
        trend_strength=strength,
        return_rate_pct=return_rate_pct,
        avg_gross_profit=avg_gross_profit,
        avg_gross_revenue=avg_gross_revenue,
    )


def profit_margin(stats: SalesWindowStats, sale_price: float) -> float:
    """
    Average gross profit over average revenue.

    Revenue falls back to sale_price * avg daily sales when no revenue was logged.
    """
    avg_revenue = stats.avg_gross_revenue or sale_price * stats.avg_daily_sales
    if avg_revenue <= 0:
        return 0.0
    return stats.avg_gross_profit / avg_revenue


def stock_days_remaining(stock_on_hand: int, avg_daily_sales: float) -> Optional[float]:
    """Days the stock lasts at the current rate; None when nothing sells."""
    if avg_daily_sales <= 0:
        return None
    return stock_on_hand / avg_daily_sales


def stock_days_left(stock_on_hand: int, avg_daily_sales: float) -> float:
    """Like stock_days_remaining but floors the rate at 0.1 so it is always finite."""
    return stock_on_hand / max(avg_daily_sales, MIN_DAILY_SALES_FOR_DAYS_LEFT)
