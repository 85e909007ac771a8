"""
Price evaluation service: qualitative feedback on a listing's price index.

price_index = sale_price / (suggested_price * market zone multiplier).
The player sees a label and tone, never the index itself.
"""

import math

from config.thresholds import (
    PRICE_ABOVE_AVERAGE,
    PRICE_AT_MARKET_FLOOR,
    PRICE_BELOW_MARKET_FLOOR,
    PRICE_COMPETITIVE_FLOOR,
    PRICE_HIGH,
    PRICE_MULTIPLIER_ABOVE_AVERAGE,
    PRICE_MULTIPLIER_AT_MARKET,
    PRICE_MULTIPLIER_BELOW_MARKET,
    PRICE_MULTIPLIER_BLOCKED,
    PRICE_MULTIPLIER_COMPETITIVE,
    PRICE_MULTIPLIER_HIGH,
    PRICE_MULTIPLIER_VERY_LOW,
    PRICE_WELL_ABOVE_MARKET,
)
from models.pricing import PriceEvaluation, PriceTone

NEUTRAL_PRICE_INDEX = 1.0


def evaluate_price(price_index: float, blocked_by_price: bool) -> PriceEvaluation:
    """
    Interpret a stored price index as a short label and tone.

    Ladder (first match wins):
    - blocked or > 1.15 -> danger
    - > 1.10 -> danger
    - > 1.05 -> warning
    - > 0.90 -> neutral
    - > 0.80 -> positive
    - > 0.70 -> positive
    - else -> warning (margin at risk)
    """
    if blocked_by_price or price_index > PRICE_WELL_ABOVE_MARKET:
        return PriceEvaluation(
            label="Price is well above market. Demand is not forming.",
            tone=PriceTone.DANGER,
        )
    if price_index > PRICE_HIGH:
        return PriceEvaluation(
            label="Price is high. Demand is dropping significantly.",
            tone=PriceTone.DANGER,
        )
    if price_index > PRICE_ABOVE_AVERAGE:
        return PriceEvaluation(
            label="Price is above market average.",
            tone=PriceTone.WARNING,
        )
    if price_index > PRICE_AT_MARKET_FLOOR:
        return PriceEvaluation(
            label="Price is at market level.",
            tone=PriceTone.NEUTRAL,
        )
    if price_index > PRICE_COMPETITIVE_FLOOR:
        return PriceEvaluation(
            label="Competitive price. Demand is rising.",
            tone=PriceTone.POSITIVE,
        )
    if price_index > PRICE_BELOW_MARKET_FLOOR:
        return PriceEvaluation(
            label="Below-market price. Demand is strong.",
            tone=PriceTone.POSITIVE,
        )
    return PriceEvaluation(
        label="Very low price. Demand is peaking; margin at risk.",
        tone=PriceTone.WARNING,
    )


def compute_price_index(
    sale_price: float,
    suggested_price: float,
    zone_multiplier: float
) -> float:
    """
    Compute price_index = sale_price / normal_price.

    Returns 1.0 when the normal price is not positive or the ratio is not
    finite, so a bad reference price never blocks demand.
    """
    normal_price = suggested_price * zone_multiplier
    if normal_price <= 0:
        return NEUTRAL_PRICE_INDEX
    price_index = sale_price / normal_price
    if not math.isfinite(price_index):
        return NEUTRAL_PRICE_INDEX
    return price_index


def price_demand_multiplier(price_index: float) -> float:
    """
    Stepped demand multiplier for a price index.

    > 1.15 -> 0 (blocked), > 1.10 -> 0.60, > 1.05 -> 0.85,
    <= 0.70 -> 1.30, <= 0.80 -> 1.20, <= 0.90 -> 1.10, else 1.00.
    """
    if price_index > PRICE_WELL_ABOVE_MARKET:
        return PRICE_MULTIPLIER_BLOCKED
    if price_index > PRICE_HIGH:
        return PRICE_MULTIPLIER_HIGH
    if price_index > PRICE_ABOVE_AVERAGE:
        return PRICE_MULTIPLIER_ABOVE_AVERAGE
    if price_index <= PRICE_BELOW_MARKET_FLOOR:
        return PRICE_MULTIPLIER_VERY_LOW
    if price_index <= PRICE_COMPETITIVE_FLOOR:
        return PRICE_MULTIPLIER_BELOW_MARKET
    if price_index <= PRICE_AT_MARKET_FLOOR:
        return PRICE_MULTIPLIER_COMPETITIVE
    return PRICE_MULTIPLIER_AT_MARKET
