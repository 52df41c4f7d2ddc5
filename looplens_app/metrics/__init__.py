"""Scoring functions for proposal generation"""

from .confidence import (
    calculate_milestone_confidence,
    calculate_price_confidence,
    calculate_relative_confidence,
    calculate_volatility_confidence,
    calculate_weekend_confidence,
)
from .sentiment import derive_sentiment
from .targets import next_milestone, price_target, round_half_up, volatility_threshold

__all__ = [
    "calculate_price_confidence",
    "calculate_relative_confidence",
    "calculate_volatility_confidence",
    "calculate_milestone_confidence",
    "calculate_weekend_confidence",
    "derive_sentiment",
    "next_milestone",
    "price_target",
    "round_half_up",
    "volatility_threshold",
]
