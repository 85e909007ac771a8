"""
Trend models for short-versus-long window sales comparison.
"""

from enum import Enum


class TrendDirection(str, Enum):
    """Direction of a trend."""

    UP = "up"
    DOWN = "down"
    STABLE = "stable"


class TrendStrength(str, Enum):
    """Strength/magnitude of a trend."""

    STRONG = "strong"
    MODERATE = "moderate"
    WEAK = "weak"
