"""
Canonical data models for market signal snapshots.

This module defines immutable data structures that represent one
point-in-time read of the market feeds after parsing. A snapshot lives
for exactly one pipeline run.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class Sentiment(str, Enum):
    """Coarse three-way market sentiment label."""
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class SnapshotSource(str, Enum):
    """Where the price data of a snapshot came from."""
    LIVE = "live"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class AssetQuote:
    """Normalized per-asset market data."""
    symbol: str            # Uppercase canonical ticker (BTC, ETH, ...)
    price: float           # USD price, positive
    change24h: float       # Signed 24h change in percent
    volume24h: float       # 24h USD volume
    market_cap: float = 0.0  # Zero when unknown


@dataclass(frozen=True)
class SignalSnapshot:
    """Point-in-time read of all market signals used for generation."""
    quotes: tuple[AssetQuote, ...]
    sentiment: Sentiment
    fetched_at: datetime                   # Local, timezone-aware
    fear_greed_index: int = 50
    trending: tuple[str, ...] = field(default_factory=tuple)
    source: SnapshotSource = SnapshotSource.LIVE

    def get(self, symbol: str) -> Optional[AssetQuote]:
        """Quote for a ticker, None if the asset is absent."""
        for quote in self.quotes:
            if quote.symbol == symbol:
                return quote
        return None

    @property
    def symbols(self) -> list[str]:
        return [quote.symbol for quote in self.quotes]

    @property
    def total_volume(self) -> float:
        return sum(quote.volume24h for quote in self.quotes)

    @property
    def total_market_cap(self) -> float:
        return sum(quote.market_cap for quote in self.quotes)


# Substituted when the price feed is unavailable
FALLBACK_QUOTES: tuple[AssetQuote, ...] = (
    AssetQuote(
        symbol="BTC",
        price=95000.0,
        change24h=2.5,
        volume24h=28_000_000_000.0,
        market_cap=1_900_000_000_000.0,
    ),
    AssetQuote(
        symbol="ETH",
        price=3500.0,
        change24h=1.8,
        volume24h=15_000_000_000.0,
        market_cap=420_000_000_000.0,
    ),
    AssetQuote(
        symbol="SOL",
        price=150.0,
        change24h=3.2,
        volume24h=2_500_000_000.0,
        market_cap=70_000_000_000.0,
    ),
)

FALLBACK_TRENDING: tuple[str, ...] = ("Bitcoin", "Ethereum", "Solana")
