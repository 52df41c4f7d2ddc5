"""Market sentiment derivation"""

import math
from typing import Optional

from ..config.defaults import SentimentParams
from ..data.models import AssetQuote, Sentiment


def _sign(value: float) -> int:
    if value == 0:
        return 0
    return int(math.copysign(1, value))


def derive_sentiment(
    btc: Optional[AssetQuote],
    eth: Optional[AssetQuote],
    params: Optional[SentimentParams] = None
) -> Sentiment:
    """
    Derive a sentiment label from BTC and ETH momentum and BTC volume.

    Score = momentum points (+/-2 beyond the strong threshold, +/-1 beyond
    the mild one, on the average 24h change) plus the sign of that change
    when BTC volume is above the high-volume ratio of its typical level.
    A score of +2 or more is bullish, -2 or less bearish.

    Args:
        btc: BTC quote, None if absent
        eth: ETH quote, None if absent
        params: Thresholds, defaults if not given

    Returns:
        Sentiment label, neutral when either asset is absent
    """
    if btc is None or eth is None:
        return Sentiment.NEUTRAL

    if params is None:
        params = SentimentParams()

    avg_change = (btc.change24h + eth.change24h) / 2
    volume_ratio = btc.volume24h / params.typical_btc_volume

    score = 0
    if avg_change > params.strong_move_pct:
        score += 2
    elif avg_change > params.mild_move_pct:
        score += 1
    elif avg_change < -params.strong_move_pct:
        score -= 2
    elif avg_change < -params.mild_move_pct:
        score -= 1

    # High volume = strong conviction
    if volume_ratio > params.high_volume_ratio:
        score += _sign(avg_change)

    if score >= 2:
        return Sentiment.BULLISH
    if score <= -2:
        return Sentiment.BEARISH
    return Sentiment.NEUTRAL
