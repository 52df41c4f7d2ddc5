"""Default configuration parameters for the market proposal agent."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class MarketDataParams:
    """Market data feed parameters."""
    prices_url: str = "https://api.coingecko.com/api/v3/simple/price"
    trending_url: str = "https://api.coingecko.com/api/v3/search/trending"
    fear_greed_url: str = "https://api.alternative.me/fng/"
    vs_currency: str = "usd"
    # CoinGecko id -> canonical ticker
    assets: dict[str, str] = field(default_factory=lambda: {
        "bitcoin": "BTC",
        "ethereum": "ETH",
        "solana": "SOL",
        "binancecoin": "BNB",
    })
    trending_limit: int = 5
    timeout_seconds: float = 10.0


@dataclass(frozen=True)
class SentimentParams:
    """Sentiment derivation parameters."""
    typical_btc_volume: float = 30_000_000_000.0   # Volume normalizer
    high_volume_ratio: float = 1.2                 # Conviction threshold
    strong_move_pct: float = 3.0                   # Avg change for +/-2
    mild_move_pct: float = 1.0                     # Avg change for +/-1
    neutral_fear_greed: int = 50


@dataclass(frozen=True)
class ArbitrationParams:
    """Decision service parameters."""
    base_url: str = "https://api.groq.com/openai/v1"
    model: str = "llama-3.3-70b-versatile"
    temperature: float = 0.7
    max_tokens: int = 100
    timeout_seconds: float = 30.0
    max_retries: int = 0


@dataclass(frozen=True)
class LedgerParams:
    """Ledger commit parameters."""
    confirmation_timeout_seconds: float = 120.0
    poll_interval_seconds: float = 2.0
    explorer_tx_url: str = "https://sepolia.basescan.org/tx/{tx_hash}"
    faucet_url: str = "https://www.coinbase.com/faucets/base-ethereum-sepolia-faucet"


@dataclass(frozen=True)
class ScheduleParams:
    """Pipeline trigger cadence."""
    interval_seconds: int = 6 * 60 * 60
    run_on_start: bool = True
    align_to_clock: bool = True


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    market_data: MarketDataParams
    sentiment: SentimentParams
    arbitration: ArbitrationParams
    ledger: LedgerParams
    schedule: ScheduleParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        market_data=MarketDataParams(),
        sentiment=SentimentParams(),
        arbitration=ArbitrationParams(),
        ledger=LedgerParams(),
        schedule=ScheduleParams(),
    )
