"""
Pricing feedback models.

The price index is sale price over the zone's normal price; the player
never sees the number, only the label and tone.
"""

from enum import Enum

from models.base import BaseSchema


class PriceTone(str, Enum):
    """Display tone of a price evaluation."""

    DANGER = "danger"
    WARNING = "warning"
    NEUTRAL = "neutral"
    POSITIVE = "positive"


class PriceEvaluation(BaseSchema):
    """Qualitative pricing feedback."""

    label: str
    tone: PriceTone
