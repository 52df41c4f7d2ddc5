"""Credentials and resolved runtime settings."""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from .defaults import (
    ArbitrationParams,
    LedgerParams,
    MarketDataParams,
    ScheduleParams,
    SentimentParams,
)

# Environment variable names
DECISION_API_KEY_ENV = "GROQ_API_KEY"
RPC_URL_ENV = "BASE_SEPOLIA_RPC"
PRIVATE_KEY_ENV = "DEPLOYER_PRIVATE_KEY"
CONTRACT_ADDRESS_ENV = "PREDICTION_MARKET_ADDRESS"


@dataclass(frozen=True)
class Credentials:
    """Secrets and endpoints read from the process environment."""
    decision_api_key: Optional[str] = field(default=None, repr=False)
    rpc_url: Optional[str] = None
    private_key: Optional[str] = field(default=None, repr=False)
    contract_address: Optional[str] = None


@dataclass(frozen=True)
class AgentSettings:
    """Fully resolved settings for one agent process."""
    market_data: MarketDataParams
    sentiment: SentimentParams
    arbitration: ArbitrationParams
    ledger: LedgerParams
    schedule: ScheduleParams
    credentials: Credentials


def load_credentials(environ: Optional[Mapping[str, str]] = None) -> Credentials:
    """
    Read credentials from the environment.

    Empty values are treated as missing.
    """
    if environ is None:
        environ = os.environ

    def _get(name: str) -> Optional[str]:
        value = environ.get(name, "").strip()
        return value or None

    return Credentials(
        decision_api_key=_get(DECISION_API_KEY_ENV),
        rpc_url=_get(RPC_URL_ENV),
        private_key=_get(PRIVATE_KEY_ENV),
        contract_address=_get(CONTRACT_ADDRESS_ENV),
    )
