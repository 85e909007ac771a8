"""
Band scoring service: how well a product sells against its expected band.

Two views of the same number:
1. Performance label (Poor/Average/Good/Excellent) with a rule-based note
   and a fixed sort rank per label.
2. Band percentile (Weak/Bad/Good/Very good/Super) for list display.

Missing band configuration never raises; it degrades to a coarse ladder.
"""

import math
from typing import Iterable, Iterator, Optional, Tuple

import structlog

from config import settings
from config.thresholds import (
    AVERAGE_EXPECTED_FACTOR,
    BAND_PCT_BAD_BELOW,
    BAND_PCT_GOOD_BELOW,
    BAND_PCT_VERY_GOOD_BELOW,
    GOOD_MAX_DAILY_FACTOR,
    POOR_MIN_DAILY_FACTOR,
    RANK_AVERAGE,
    RANK_EXCELLENT,
    RANK_GOOD,
    RANK_POOR,
    SUPPORTIVE_PLAYER_LEVEL_MAX,
    TIER_MAX,
    TIER_MIN,
    UNCONFIGURED_AVERAGE_BELOW,
    UNCONFIGURED_POOR_BELOW,
)
from models.performance import (
    BandConfig,
    BandScore,
    PerformanceLabel,
    SalesBandEvaluation,
    SalesBandLabel,
    SalesBandTone,
)

logger = structlog.get_logger(__name__)

LABEL_RANKS = {
    PerformanceLabel.POOR: RANK_POOR,
    PerformanceLabel.AVERAGE: RANK_AVERAGE,
    PerformanceLabel.GOOD: RANK_GOOD,
    PerformanceLabel.EXCELLENT: RANK_EXCELLENT,
}

NOTE_SEPARATOR = " · "


def clamp_tier(tier: int) -> int:
    """Clamp a warehouse tier into the 1..5 range bands are keyed by."""
    return min(TIER_MAX, max(TIER_MIN, int(tier)))


def finite_sales(actual_avg_daily: float) -> float:
    """NaN or infinite averages count as no sales."""
    if actual_avg_daily is None or not math.isfinite(actual_avg_daily):
        return 0.0
    return actual_avg_daily


class BandRuleBook:
    """
    Ordered band rules with a first-match-wins contract.

    Rules are evaluated in the order given to the constructor. When two
    rules overlap for the same category and quality, the earlier one
    wins. Callers loading rules from storage must pass them in a
    deterministic order (e.g. by priority, then id).
    """

    def __init__(self, rules: Iterable[BandConfig] = ()):
        self._rules: Tuple[BandConfig, ...] = tuple(rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[BandConfig]:
        return iter(self._rules)

    def match(
        self,
        category_key: str,
        quality_tier: str,
        tier: int
    ) -> Optional[BandConfig]:
        """
        Find the band for a product.

        Args:
            category_key: Band category the product rolls up to
            quality_tier: Product quality (e.g. STANDARD)
            tier: Warehouse tier; clamped into 1..5 first

        Returns:
            First matching BandConfig, or None when nothing is configured
        """
        clamped = clamp_tier(tier)
        for rule in self._rules:
            if rule.covers(category_key, quality_tier, clamped):
                return rule

        logger.debug(
            "band_not_found",
            category_key=category_key,
            quality_tier=quality_tier,
            tier=clamped,
        )
        return None


# ===================
# PERFORMANCE LABEL
# ===================

def classify_performance(
    actual_avg_daily: float,
    band: Optional[BandConfig]
) -> PerformanceLabel:
    """
    Classify average daily sales against a band.

    With a band (expected = expected_mode or midpoint):
    - <= 0 or < min_daily * 0.6 -> Poor
    - < expected * 0.9 -> Average
    - <= max_daily * 1.1 -> Good
    - else -> Excellent

    Without a band: <= 0 or < 2 -> Poor, < 5 -> Average, else Good.
    """
    actual_avg_daily = finite_sales(actual_avg_daily)
    if actual_avg_daily <= 0:
        return PerformanceLabel.POOR

    if band is None:
        if actual_avg_daily < UNCONFIGURED_POOR_BELOW:
            return PerformanceLabel.POOR
        if actual_avg_daily < UNCONFIGURED_AVERAGE_BELOW:
            return PerformanceLabel.AVERAGE
        return PerformanceLabel.GOOD

    if actual_avg_daily < band.min_daily * POOR_MIN_DAILY_FACTOR:
        return PerformanceLabel.POOR
    if actual_avg_daily < band.effective_expected * AVERAGE_EXPECTED_FACTOR:
        return PerformanceLabel.AVERAGE
    if actual_avg_daily <= band.max_daily * GOOD_MAX_DAILY_FACTOR:
        return PerformanceLabel.GOOD
    return PerformanceLabel.EXCELLENT


def build_performance_note(
    actual_avg_daily: float,
    band: Optional[BandConfig],
    stock_days_remaining: Optional[float],
    low_stock_days: Optional[int] = None,
    overstock_days: Optional[int] = None,
) -> str:
    """One-line note: position against the band, then stock risk if any."""
    actual_avg_daily = finite_sales(actual_avg_daily)
    low_stock_days = settings.low_stock_days if low_stock_days is None else low_stock_days
    overstock_days = settings.overstock_days if overstock_days is None else overstock_days

    parts = []
    if band is not None:
        if actual_avg_daily < band.effective_expected * AVERAGE_EXPECTED_FACTOR:
            parts.append("Below expected band")
        elif actual_avg_daily <= band.max_daily * GOOD_MAX_DAILY_FACTOR:
            parts.append("On target")
        else:
            parts.append("Above target")
    else:
        parts.append("No sales" if actual_avg_daily <= 0 else "Band not configured")

    if stock_days_remaining is not None:
        if stock_days_remaining < low_stock_days:
            parts.append("Low stock risk")
        elif stock_days_remaining > overstock_days:
            parts.append("Overstock risk")

    return NOTE_SEPARATOR.join(parts)


def score_performance(
    actual_avg_daily: float,
    band: Optional[BandConfig],
    stock_on_hand: int,
    stock_days_remaining: Optional[float],
) -> BandScore:
    """
    Score a product against its band.

    Args:
        actual_avg_daily: Trailing average daily sales
        band: Matched band, or None when not configured
        stock_on_hand: Units on hand (logged with the result)
        stock_days_remaining: stock / avg daily sales; None when nothing sells

    Returns:
        BandScore with label, note and fixed rank
    """
    label = classify_performance(actual_avg_daily, band)
    note = build_performance_note(actual_avg_daily, band, stock_days_remaining)

    logger.debug(
        "performance_scored",
        actual_avg_daily=actual_avg_daily,
        has_band=band is not None,
        stock_on_hand=stock_on_hand,
        label=label.value,
    )

    return BandScore(label=label, note=note, rank=LABEL_RANKS[label])


# ===================
# BAND PERCENTILE
# ===================

def band_percentile(actual_avg_daily: float, min_daily: float, max_daily: float) -> float:
    """
    Position of actual sales inside the band, 0..100.

    Degenerate band (min == max) resolves to 100 at or above the edge, else 0.
    """
    if max_daily == min_daily:
        return 100.0 if actual_avg_daily >= max_daily else 0.0
    ratio = (actual_avg_daily - min_daily) / (max_daily - min_daily)
    return max(0.0, min(1.0, ratio)) * 100


def evaluate_sales_band(
    actual_avg_daily: float,
    min_daily: float,
    max_daily: float,
    player_level: Optional[int] = None,
) -> SalesBandEvaluation:
    """
    Interpret average daily sales against the band as pct, label, note and tone.

    Rules:
    - actual <= min_daily -> Weak (danger)
    - actual > max_daily or pct >= 100 -> Super (success)
    - pct < 35 -> Bad (danger)
    - pct < 70 -> Good (neutral)
    - pct < 95 -> Very good (success)
    - else -> Super (success)

    Players at level 3 or below get gentler wording on the weaker buckets.
    """
    actual_avg_daily = finite_sales(actual_avg_daily)
    supportive = player_level is not None and player_level <= SUPPORTIVE_PLAYER_LEVEL_MAX
    pct = round(band_percentile(actual_avg_daily, min_daily, max_daily), 2)

    if actual_avg_daily <= min_daily:
        return SalesBandEvaluation(
            pct=pct,
            label=SalesBandLabel.WEAK,
            note=(
                "Below band. Review price, season or visibility."
                if supportive
                else "Below-band sales. Check price / season / visibility."
            ),
            tone=SalesBandTone.DANGER,
        )
    if actual_avg_daily > max_daily or pct >= 100:
        return SalesBandEvaluation(
            pct=100.0,
            label=SalesBandLabel.SUPER,
            note="Above-band performance.",
            tone=SalesBandTone.SUCCESS,
        )
    if pct < BAND_PCT_BAD_BELOW:
        return SalesBandEvaluation(
            pct=pct,
            label=SalesBandLabel.BAD,
            note=(
                "Below band. Small improvements can make a difference."
                if supportive
                else "Below band. Review price or campaign."
            ),
            tone=SalesBandTone.DANGER,
        )
    if pct < BAND_PCT_GOOD_BELOW:
        return SalesBandEvaluation(
            pct=pct,
            label=SalesBandLabel.GOOD,
            note=(
                "Within band. Some optimization still possible."
                if supportive
                else "Within band. Stable performance."
            ),
            tone=SalesBandTone.NEUTRAL,
        )
    if pct < BAND_PCT_VERY_GOOD_BELOW:
        return SalesBandEvaluation(
            pct=pct,
            label=SalesBandLabel.VERY_GOOD,
            note="In the upper segment of the band.",
            tone=SalesBandTone.SUCCESS,
        )
    return SalesBandEvaluation(
        pct=pct,
        label=SalesBandLabel.SUPER,
        note="Above-band performance.",
        tone=SalesBandTone.SUCCESS,
    )


def missing_band_evaluation() -> SalesBandEvaluation:
    """Evaluation shown when no band matched the product."""
    return SalesBandEvaluation(
        pct=0.0,
        label=SalesBandLabel.BAND_NOT_FOUND,
        note="Define a sales band for this category/quality.",
        tone=SalesBandTone.WARNING,
    )


def evaluate_against_band(
    actual_avg_daily: float,
    band: Optional[BandConfig],
    player_level: Optional[int] = None,
) -> SalesBandEvaluation:
    """evaluate_sales_band for a matched band, or the missing-band evaluation."""
    if band is None:
        return missing_band_evaluation()
    return evaluate_sales_band(actual_avg_daily, band.min_daily, band.max_daily, player_level)
