"""
Season forecast service: remaining seasonal demand from a 52-week curve.

Algorithm:
1. SKIP curves shorter than 52 weeks (no forecast)
2. SCAN forward from the current week with wraparound (51 -> 0) to the
   first zero-score week; that is where the season ends
3. BUCKET the remaining weeks into up to six 4-week "months", stopping
   at the season end
4. PRICE each bucket: baseline * 7 * weeks * (avg score / 100)
5. COMPARE total potential with stock on hand for expected sold/leftover
6. LOCATE the month where cumulative potential first covers the stock

Every function here is pure; nothing is cached between calls.
"""

from typing import List, Optional, Sequence, Union

import structlog

from config.thresholds import (
    DAYS_PER_FORECAST_MONTH,
    DAYS_PER_WEEK,
    FORECAST_MONTHS,
    MISSING_CURVE_SCORE,
    OUTLOOK_MISSING_SCORE,
    OUTLOOK_NEUTRAL_MIN,
    OUTLOOK_STRONG_MIN,
    STOCK_DAYS_HORIZON,
    WEEKS_PER_FORECAST_MONTH,
    WEEKS_PER_YEAR,
)
from models.season import (
    ForecastMonth,
    ForecastOutlook,
    MonthlyOutlook,
    SeasonCurve,
    SeasonForecast,
    SeasonScore,
)

logger = structlog.get_logger(__name__)

CurveInput = Union[SeasonCurve, Sequence[float], None]


def _weeks_of(curve: CurveInput) -> Optional[List[float]]:
    """Plain list of weekly scores clamped to 0..100, or None when there is no curve."""
    if curve is None:
        return None
    if isinstance(curve, SeasonCurve):
        return list(curve.weeks)
    return [min(100.0, max(0.0, float(score))) for score in curve]


def _wrap_week(week_index: int) -> int:
    return int(week_index) % WEEKS_PER_YEAR


def find_first_zero_step(weeks: Sequence[float], current_week_index: int) -> Optional[int]:
    """
    Steps ahead of the current week to the first zero score, with wraparound.

    Returns:
        0..51, or None when no week in the next 52 is zero
    """
    start = _wrap_week(current_week_index)
    for step in range(WEEKS_PER_YEAR):
        if weeks[(start + step) % WEEKS_PER_YEAR] == 0:
            return step
    return None


def build_forecast_months(
    weeks: Sequence[float],
    current_week_index: int,
    first_zero_step: Optional[int],
    baseline_units_per_day: float,
) -> List[ForecastMonth]:
    """
    Up to six 4-week buckets ending at the season boundary.

    Bucket construction stops for good at the first step that reaches
    first_zero_step (or hits a zero score). Empty buckets are not emitted.
    """
    start = _wrap_week(current_week_index)
    months: List[ForecastMonth] = []

    for month in range(FORECAST_MONTHS):
        week_indices: List[int] = []
        season_ended = False

        for offset in range(WEEKS_PER_FORECAST_MONTH):
            step = month * WEEKS_PER_FORECAST_MONTH + offset
            if first_zero_step is not None and step >= first_zero_step:
                season_ended = True
                break
            week = (start + step) % WEEKS_PER_YEAR
            if weeks[week] == 0:
                season_ended = True
                break
            week_indices.append(week)

        if week_indices:
            weeks_count = len(week_indices)
            score_avg = sum(weeks[w] for w in week_indices) / weeks_count
            potential = baseline_units_per_day * DAYS_PER_WEEK * weeks_count * (score_avg / 100)
            months.append(ForecastMonth(
                index=month,
                week_indices=week_indices,
                weeks_count=weeks_count,
                score_avg=score_avg,
                potential_units=max(0.0, potential),
            ))

        if season_ended:
            break

    return months


def find_stockout_month(months: Sequence[ForecastMonth], stock_on_hand: int) -> Optional[int]:
    """First month index whose cumulative potential reaches stock; None if stock lasts."""
    cumulative = 0.0
    for month in months:
        cumulative += month.potential_units
        if cumulative >= stock_on_hand:
            return month.index
    return None


def forecast_season(
    curve: CurveInput,
    current_week_index: int,
    baseline_units_per_day: float,
    stock_on_hand: int,
) -> Optional[SeasonForecast]:
    """
    Forecast remaining-season demand against stock on hand.

    Args:
        curve: 52 weekly demand scores (SeasonCurve or plain sequence)
        current_week_index: Week index 0..51 from the caller's calendar;
            other values wrap modulo 52
        baseline_units_per_day: Units sold per day at score 100
        stock_on_hand: Current stock, read only; negative values count as 0

    Returns:
        SeasonForecast, or None when no full curve is available
    """
    stock_on_hand = max(0, int(stock_on_hand))
    weeks = _weeks_of(curve)
    if weeks is None or len(weeks) < WEEKS_PER_YEAR:
        logger.debug(
            "season_curve_missing",
            weeks=None if weeks is None else len(weeks),
        )
        return None

    weeks = weeks[:WEEKS_PER_YEAR]
    current = _wrap_week(current_week_index)
    out_of_season = weeks[current] == 0

    first_zero_step = find_first_zero_step(weeks, current)
    end_week_index = (
        (current + first_zero_step) % WEEKS_PER_YEAR
        if first_zero_step is not None
        else None
    )
    if out_of_season:
        weeks_remaining = 0
    elif first_zero_step is not None:
        weeks_remaining = first_zero_step
    else:
        weeks_remaining = WEEKS_PER_YEAR

    if baseline_units_per_day <= 0:
        return SeasonForecast(
            current_week_index=current,
            out_of_season=out_of_season,
            no_demand_estimate=True,
            first_zero_step=first_zero_step,
            end_week_index=end_week_index,
            weeks_remaining=weeks_remaining,
            expected_leftover=float(stock_on_hand),
        )

    months = build_forecast_months(weeks, current, first_zero_step, baseline_units_per_day)
    potential_units = sum(month.potential_units for month in months)

    # Preserves the "could sell" == "will sell" simplification; returns are not modelled
    expected_sold = min(float(stock_on_hand), potential_units)
    expected_leftover = max(0.0, stock_on_hand - potential_units)

    forecast = SeasonForecast(
        current_week_index=current,
        out_of_season=out_of_season,
        first_zero_step=first_zero_step,
        end_week_index=end_week_index,
        weeks_remaining=weeks_remaining,
        months=months,
        potential_units=potential_units,
        expected_sold=expected_sold,
        expected_leftover=expected_leftover,
        stockout_month_index=find_stockout_month(months, stock_on_hand),
    )

    logger.debug(
        "season_forecast_complete",
        current_week_index=current,
        first_zero_step=first_zero_step,
        months=len(months),
        potential_units=round(potential_units, 2),
        stockout_month_index=forecast.stockout_month_index,
    )

    return forecast


# ===================
# WEEK SCORE & OUTLOOK
# ===================

def season_score_for_week(curve: CurveInput, week_index: int) -> SeasonScore:
    """
    Demand score for one week.

    No curve (or a short one) means the product is treated as always in
    season: score 100 with missing_curve set.
    """
    weeks = _weeks_of(curve)
    if weeks is None or len(weeks) < WEEKS_PER_YEAR:
        return SeasonScore(score=MISSING_CURVE_SCORE, missing_curve=True)
    score = weeks[_wrap_week(week_index)]
    return SeasonScore(score=min(100.0, max(0.0, score)))


def monthly_outlook(curve: CurveInput, current_week_index: int) -> MonthlyOutlook:
    """
    Average score of the next six 4-week periods, wrapping past year end.

    Unlike the season forecast this does not stop at zero weeks; weeks the
    curve does not cover score 50.
    """
    weeks = _weeks_of(curve)
    start = _wrap_week(current_week_index)
    scores: List[float] = []

    for month in range(FORECAST_MONTHS):
        total = 0.0
        for offset in range(WEEKS_PER_FORECAST_MONTH):
            week = (start + month * WEEKS_PER_FORECAST_MONTH + offset) % WEEKS_PER_YEAR
            if weeks is not None and week < len(weeks):
                total += weeks[week]
            else:
                total += OUTLOOK_MISSING_SCORE
        scores.append(min(100.0, max(0.0, total / WEEKS_PER_FORECAST_MONTH)))

    average = sum(scores) / len(scores)
    if average >= OUTLOOK_STRONG_MIN:
        outlook = ForecastOutlook.STRONG
    elif average >= OUTLOOK_NEUTRAL_MIN:
        outlook = ForecastOutlook.NEUTRAL
    else:
        outlook = ForecastOutlook.WEAK

    # First maximum wins on ties
    peak_index = 0
    for index, score in enumerate(scores):
        if score > scores[peak_index]:
            peak_index = index

    return MonthlyOutlook(
        scores=scores,
        outlook=outlook,
        peak_month_index=peak_index,
        peak_month_score=scores[peak_index],
    )


def stock_vs_peak_note(stock_days_left: float, peak_month_index: int) -> str:
    """Whether stock lasts until the peak month (month midpoint, 28-day months)."""
    days_to_peak = (peak_month_index + 0.5) * DAYS_PER_FORECAST_MONTH
    if stock_days_left < days_to_peak and stock_days_left < STOCK_DAYS_HORIZON:
        return "Stock may run out before peak demand"
    return "Stock should cover through peak"
