"""Price target and milestone construction"""

import math

MILESTONE_LADDER = (2500, 3000, 3500, 4000, 4500, 5000, 5500, 6000)
MILESTONE_STEP = 500


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards +infinity."""
    return math.floor(value + 0.5)


def target_move_pct(price_change: float) -> float:
    """
    Size of the target move for a short-term price question.

    2% for quiet markets (|change| < 2), 5% for volatile ones
    (|change| > 5), 3% otherwise.
    """
    magnitude = abs(price_change)
    if magnitude > 5:
        return 0.05
    if magnitude < 2:
        return 0.02
    return 0.03


def price_target(current_price: int, price_change: float) -> tuple[str, int]:
    """
    Directional target rounded to the nearest 100.

    Args:
        current_price: Current price in whole dollars
        price_change: 24h change in percent; its sign sets the direction

    Returns:
        Tuple of (direction, target_price), direction "above" or "below"
    """
    move = target_move_pct(price_change)
    if price_change > 0:
        return "above", round_half_up(current_price * (1 + move) / 100) * 100
    return "below", round_half_up(current_price * (1 - move) / 100) * 100


def next_milestone(current_price: int) -> int:
    """
    Smallest ladder level strictly above the current price.

    Above the top of the ladder, the next multiple of 500 strictly above
    the current price.
    """
    for milestone in MILESTONE_LADDER:
        if milestone > current_price:
            return milestone

    return (current_price // MILESTONE_STEP + 1) * MILESTONE_STEP


def volatility_threshold(price_change: float) -> str:
    """Band label for a volatility question: "5%" after a >3% move, else "3%"."""
    return "5%" if abs(price_change) > 3 else "3%"
