"""Confidence scoring for generated proposals

Every score starts from a rule-specific base, receives additive
adjustments, and is clamped to the rule's range. Scores are integers
between 52 and 88.
"""

from typing import Literal

from ..data.models import Sentiment

PRICE_CONFIDENCE_RANGE = (55, 88)
RELATIVE_CONFIDENCE_RANGE = (58, 85)
VOLATILITY_CONFIDENCE_RANGE = (55, 82)
MILESTONE_CONFIDENCE_RANGE = (52, 80)
WEEKEND_CONFIDENCE_RANGE = (58, 78)


def _clamp(value: int, bounds: tuple[int, int]) -> int:
    low, high = bounds
    return max(low, min(high, value))


def calculate_price_confidence(
    price_change: float,
    sentiment: Sentiment,
    timeframe: Literal["short", "long"] = "short"
) -> int:
    """
    Confidence for a directional price target.

    Args:
        price_change: 24h change in percent
        sentiment: Market sentiment label
        timeframe: "long" horizons lose 5 points

    Returns:
        Confidence clamped to [55, 88]
    """
    confidence = 60

    magnitude = abs(price_change)
    if magnitude > 5:
        confidence += 12
    elif magnitude > 3:
        confidence += 8
    elif magnitude > 1:
        confidence += 4

    if sentiment == Sentiment.BULLISH and price_change > 0:
        confidence += 8
    if sentiment == Sentiment.BEARISH and price_change < 0:
        confidence += 8
    if sentiment == Sentiment.NEUTRAL:
        confidence += 3

    if timeframe == "long":
        confidence -= 5

    return _clamp(confidence, PRICE_CONFIDENCE_RANGE)


def calculate_relative_confidence(eth_change: float, btc_change: float, sentiment: Sentiment) -> int:
    """Confidence for an ETH vs BTC outperformance question, clamped to [58, 85]."""
    difference = abs(eth_change - btc_change)
    confidence = 62

    if difference > 3:
        confidence += 10
    elif difference > 1.5:
        confidence += 6
    elif difference > 0.5:
        confidence += 3

    if sentiment in (Sentiment.BULLISH, Sentiment.BEARISH):
        confidence += 5

    return _clamp(confidence, RELATIVE_CONFIDENCE_RANGE)


def calculate_volatility_confidence(recent_change: float, sentiment: Sentiment) -> int:
    """Confidence for a volatility band question, clamped to [55, 82]."""
    confidence = 65

    magnitude = abs(recent_change)
    if magnitude > 5:
        confidence += 12
    elif magnitude > 3:
        confidence += 7
    else:
        confidence -= 5

    if sentiment != Sentiment.NEUTRAL:
        confidence += 5

    return _clamp(confidence, VOLATILITY_CONFIDENCE_RANGE)


def calculate_milestone_confidence(current: float, milestone: float, momentum: float) -> int:
    """
    Confidence for a "will it reach" milestone question.

    Args:
        current: Current price (positive)
        milestone: Target price level
        momentum: 24h change in percent

    Returns:
        Confidence clamped to [52, 80]
    """
    distance = abs(milestone - current) / current
    confidence = 58

    if distance < 0.05:
        confidence += 15
    elif distance < 0.10:
        confidence += 10
    elif distance < 0.15:
        confidence += 5

    if (milestone > current and momentum > 0) or (milestone < current and momentum < 0):
        confidence += 8

    return _clamp(confidence, MILESTONE_CONFIDENCE_RANGE)


def calculate_weekend_confidence(sentiment: Sentiment, momentum: float) -> int:
    """Confidence for the weekend volatility pattern, clamped to [58, 78]."""
    confidence = 64

    if abs(momentum) > 3:
        confidence += 7
    if sentiment != Sentiment.NEUTRAL:
        confidence += 5

    return _clamp(confidence, WEEKEND_CONFIDENCE_RANGE)
