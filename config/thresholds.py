"""
Rule thresholds for performance scoring, pricing and season forecasting.

These are fixed business rules, not tunables. Changing one changes the
meaning of a label shown to players, so they are kept out of Settings.
"""

# =============================================================================
# BAND SCORING (label ladder)
# =============================================================================

# Below min_daily * 0.6 the product is Poor even inside a configured band
POOR_MIN_DAILY_FACTOR = 0.6

# Below expected * 0.9 the product is Average
AVERAGE_EXPECTED_FACTOR = 0.9

# Up to max_daily * 1.1 still counts as Good; above is Excellent
GOOD_MAX_DAILY_FACTOR = 1.1

# Coarse ladder used when no band is configured
UNCONFIGURED_POOR_BELOW = 2.0
UNCONFIGURED_AVERAGE_BELOW = 5.0

# Sort rank per label (fixed scalar, ties break on this and nothing finer)
RANK_POOR = 20
RANK_AVERAGE = 45
RANK_GOOD = 70
RANK_EXCELLENT = 95

# Tier range accepted by band rules
TIER_MIN = 1
TIER_MAX = 5


# =============================================================================
# SALES BAND PERCENTILE (list display)
# =============================================================================

BAND_PCT_BAD_BELOW = 35
BAND_PCT_GOOD_BELOW = 70
BAND_PCT_VERY_GOOD_BELOW = 95

# Players at or below this level get the supportive note wording
SUPPORTIVE_PLAYER_LEVEL_MAX = 3


# =============================================================================
# PRICE INDEX LADDER
# =============================================================================

PRICE_WELL_ABOVE_MARKET = 1.15
PRICE_HIGH = 1.10
PRICE_ABOVE_AVERAGE = 1.05
PRICE_AT_MARKET_FLOOR = 0.90
PRICE_COMPETITIVE_FLOOR = 0.80
PRICE_BELOW_MARKET_FLOOR = 0.70

# Demand multipliers applied by the stepped price ladder
PRICE_MULTIPLIER_BLOCKED = 0.0
PRICE_MULTIPLIER_HIGH = 0.60
PRICE_MULTIPLIER_ABOVE_AVERAGE = 0.85
PRICE_MULTIPLIER_VERY_LOW = 1.30
PRICE_MULTIPLIER_BELOW_MARKET = 1.20
PRICE_MULTIPLIER_COMPETITIVE = 1.10
PRICE_MULTIPLIER_AT_MARKET = 1.0


# =============================================================================
# SEASON CURVE
# =============================================================================

WEEKS_PER_YEAR = 52
DAYS_PER_WEEK = 7
WEEKS_PER_FORECAST_MONTH = 4
FORECAST_MONTHS = 6

# Score assumed for a week when no curve is loaded (outlook only)
OUTLOOK_MISSING_SCORE = 50.0

# Score assumed when a product has no curve at all (demand step treats it as full season)
MISSING_CURVE_SCORE = 100.0

OUTLOOK_STRONG_MIN = 60
OUTLOOK_NEUTRAL_MIN = 35

# Days approximated per forecast month when comparing stock days against the peak
DAYS_PER_FORECAST_MONTH = 28

# Stock lasting a year or more never "runs out before peak"
STOCK_DAYS_HORIZON = 365

# Floor on average daily sales when turning stock into days left
MIN_DAILY_SALES_FOR_DAYS_LEFT = 0.1


# =============================================================================
# TREND
# =============================================================================

TREND_THRESHOLD_WEAK = 5
TREND_THRESHOLD_STRONG = 20
