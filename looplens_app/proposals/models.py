"""Data models for market proposals"""

from dataclasses import dataclass
from enum import Enum

from ..metrics.confidence import (
    MILESTONE_CONFIDENCE_RANGE,
    PRICE_CONFIDENCE_RANGE,
    RELATIVE_CONFIDENCE_RANGE,
    VOLATILITY_CONFIDENCE_RANGE,
    WEEKEND_CONFIDENCE_RANGE,
)

ONE_DAY = 86400
TWO_DAYS = 172800
THREE_DAYS = 259200
ONE_WEEK = 604800

ALLOWED_DURATIONS = frozenset({ONE_DAY, TWO_DAYS, THREE_DAYS, ONE_WEEK})
MAX_PROPOSALS = 3


class ProposalCategory(str, Enum):
    """Generation rule that produced a proposal."""
    CRYPTO_PRICE = "crypto-price"
    RELATIVE_PERFORMANCE = "relative-performance"
    VOLATILITY = "volatility"
    MILESTONE = "milestone"
    TEMPORAL_PATTERN = "temporal-pattern"


CONFIDENCE_BOUNDS: dict[ProposalCategory, tuple[int, int]] = {
    ProposalCategory.CRYPTO_PRICE: PRICE_CONFIDENCE_RANGE,
    ProposalCategory.RELATIVE_PERFORMANCE: RELATIVE_CONFIDENCE_RANGE,
    ProposalCategory.VOLATILITY: VOLATILITY_CONFIDENCE_RANGE,
    ProposalCategory.MILESTONE: MILESTONE_CONFIDENCE_RANGE,
    ProposalCategory.TEMPORAL_PATTERN: WEEKEND_CONFIDENCE_RANGE,
}


@dataclass(frozen=True)
class Proposal:
    """Candidate prediction market question"""
    title: str
    duration: int          # Seconds, one of ALLOWED_DURATIONS
    confidence: int        # Within the rule's CONFIDENCE_BOUNDS
    reasoning: str
    category: ProposalCategory

    def __post_init__(self):
        if self.duration not in ALLOWED_DURATIONS:
            raise ValueError(f"Unsupported duration: {self.duration}")
        low, high = CONFIDENCE_BOUNDS[self.category]
        if not low <= self.confidence <= high:
            raise ValueError(
                f"Confidence {self.confidence} outside [{low}, {high}] for {self.category.value}"
            )

    @property
    def duration_hours(self) -> float:
        return self.duration / 3600

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "duration": self.duration,
            "confidence": self.confidence,
            "reasoning": self.reasoning,
            "category": self.category.value,
        }
