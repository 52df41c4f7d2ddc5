"""
Proposal generator.

Pure and deterministic: the only inputs are the snapshot's quotes, its
sentiment label and the weekday of its timestamp. Rules run in a fixed
order and the first MAX_PROPOSALS results are kept, by position rather
than by confidence.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Optional

import structlog

from ..data.models import SignalSnapshot
from ..metrics.confidence import (
    calculate_milestone_confidence,
    calculate_price_confidence,
    calculate_relative_confidence,
    calculate_volatility_confidence,
    calculate_weekend_confidence,
)
from ..metrics.targets import next_milestone, price_target, round_half_up, volatility_threshold
from ..utils.time import is_late_week
from .models import (
    MAX_PROPOSALS,
    ONE_DAY,
    ONE_WEEK,
    THREE_DAYS,
    TWO_DAYS,
    Proposal,
    ProposalCategory,
)

logger = structlog.get_logger(__name__)

HIGH_BTC_VOLUME = 25_000_000_000


def format_usd(amount: int) -> str:
    """Whole-dollar amount with thousands separators, e.g. $97,900."""
    return f"${amount:,}"


def format_tenths(value: float) -> str:
    """One decimal place, exact halves rounded away from zero."""
    return f"{Decimal(value).quantize(Decimal('0.1'), rounding=ROUND_HALF_UP):f}"


def format_change(pct: float) -> str:
    """Percentage with one decimal and an explicit sign for gains."""
    sign = "+" if pct > 0 else ""
    return f"{sign}{format_tenths(pct)}%"


class ProposalGenerator:
    """Generates scored market proposals from a signal snapshot."""

    def __init__(self, max_proposals: int = MAX_PROPOSALS) -> None:
        self.max_proposals = max_proposals
        self.logger = logger
        self._rules: list[Callable[[SignalSnapshot], Optional[Proposal]]] = [
            self._btc_price_move,
            self._relative_performance,
            self._volatility_band,
            self._eth_milestone,
            self._weekend_volatility,
        ]

    def generate(self, snapshot: SignalSnapshot) -> list[Proposal]:
        """
        Run every rule in order and keep the first proposals.

        Rules whose assets are absent are skipped silently.

        Args:
            snapshot: Market signals for this run

        Returns:
            Between 0 and max_proposals proposals, in generation order
        """
        proposals = []
        for rule in self._rules:
            proposal = rule(snapshot)
            if proposal is not None:
                proposals.append(proposal)

        kept = proposals[:self.max_proposals]

        self.logger.debug(
            "Generated proposals",
            candidates=len(proposals),
            kept=len(kept),
            categories=[p.category.value for p in kept],
        )
        return kept

    def _btc_price_move(self, snapshot: SignalSnapshot) -> Optional[Proposal]:
        """Will BTC close above/below a target within 24 hours."""
        btc = snapshot.get("BTC")
        if btc is None:
            return None

        current_price = round_half_up(btc.price)
        direction, target = price_target(current_price, btc.change24h)
        confidence = calculate_price_confidence(btc.change24h, snapshot.sentiment, "short")

        return Proposal(
            title=f"Will BTC close {direction} {format_usd(target)} in 24 hours?",
            duration=ONE_DAY,
            confidence=confidence,
            reasoning=(
                f"Current: {format_usd(current_price)}, "
                f"24h: {format_change(btc.change24h)}, "
                f"Momentum: {snapshot.sentiment.value}"
            ),
            category=ProposalCategory.CRYPTO_PRICE,
        )

    def _relative_performance(self, snapshot: SignalSnapshot) -> Optional[Proposal]:
        """Will the stronger of ETH/BTC keep outperforming over 3 days."""
        btc = snapshot.get("BTC")
        eth = snapshot.get("ETH")
        if btc is None or eth is None:
            return None

        confidence = calculate_relative_confidence(eth.change24h, btc.change24h, snapshot.sentiment)
        winner, opposite = ("ETH", "BTC") if eth.change24h > btc.change24h else ("BTC", "ETH")

        return Proposal(
            title=f"Will {winner} outperform {opposite} over the next 3 days?",
            duration=THREE_DAYS,
            confidence=confidence,
            reasoning=(
                f"ETH 24h: {format_change(eth.change24h)}, "
                f"BTC 24h: {format_change(btc.change24h)}"
            ),
            category=ProposalCategory.RELATIVE_PERFORMANCE,
        )

    def _volatility_band(self, snapshot: SignalSnapshot) -> Optional[Proposal]:
        """Will BTC move more than a band in either direction within 48h."""
        btc = snapshot.get("BTC")
        if btc is None:
            return None

        confidence = calculate_volatility_confidence(btc.change24h, snapshot.sentiment)
        volume_trend = "high" if btc.volume24h > HIGH_BTC_VOLUME else "normal"

        return Proposal(
            title=(
                f"Will BTC price move more than {volatility_threshold(btc.change24h)} "
                f"in either direction within 48h?"
            ),
            duration=TWO_DAYS,
            confidence=confidence,
            reasoning=f"Recent volatility: {format_tenths(abs(btc.change24h))}%, Volume trending {volume_trend}",
            category=ProposalCategory.VOLATILITY,
        )

    def _eth_milestone(self, snapshot: SignalSnapshot) -> Optional[Proposal]:
        """Will ETH reach the next round-number level within a week."""
        eth = snapshot.get("ETH")
        if eth is None:
            return None

        current_price = round_half_up(eth.price)
        if current_price <= 0:
            self.logger.debug("Skipping milestone rule for sub-dollar price", price=eth.price)
            return None

        milestone = next_milestone(current_price)
        confidence = calculate_milestone_confidence(current_price, milestone, eth.change24h)
        distance_pct = (milestone - current_price) / current_price * 100
        trend = "bullish" if eth.change24h > 0 else "bearish"

        return Proposal(
            title=f"Will ETH reach {format_usd(milestone)} within the next week?",
            duration=ONE_WEEK,
            confidence=confidence,
            reasoning=(
                f"Current: {format_usd(current_price)}, "
                f"Distance: {format_tenths(distance_pct)}%, "
                f"Trend: {trend}"
            ),
            category=ProposalCategory.MILESTONE,
        )

    def _weekend_volatility(self, snapshot: SignalSnapshot) -> Optional[Proposal]:
        """From Thursday on: will the weekend be more volatile than weekdays."""
        btc = snapshot.get("BTC")
        if btc is None or not is_late_week(snapshot.fetched_at):
            return None

        confidence = calculate_weekend_confidence(snapshot.sentiment, btc.change24h)

        return Proposal(
            title="Will crypto markets see higher volatility this weekend vs weekdays?",
            duration=TWO_DAYS,
            confidence=confidence,
            reasoning=(
                "Historical weekend pattern: increased retail activity, "
                f"Sentiment: {snapshot.sentiment.value}"
            ),
            category=ProposalCategory.TEMPORAL_PATTERN,
        )
