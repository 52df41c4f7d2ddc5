"""Pytest configuration and shared fixtures."""

import asyncio
from datetime import datetime, timezone
from typing import Optional

import pytest

from looplens_app.arbitration.decision_client import BaseDecisionClient
from looplens_app.data.models import AssetQuote, Sentiment, SignalSnapshot, SnapshotSource
from looplens_app.ledger.base import BaseLedger
from looplens_app.ledger.models import LedgerReceipt

# 2024-01-01 is a Monday, 2024-01-05 a Friday
MONDAY_NOON = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
FRIDAY_NOON = datetime(2024, 1, 5, 12, 0, 0, tzinfo=timezone.utc)

VALID_ENV = {
    "GROQ_API_KEY": "gsk_test_key",
    "BASE_SEPOLIA_RPC": "https://sepolia.base.org",
    "DEPLOYER_PRIVATE_KEY": "0x" + "11" * 32,
    "PREDICTION_MARKET_ADDRESS": "0x" + "ab" * 20,
}


class ScriptedDecisionClient(BaseDecisionClient):
    """Decision service double returning a fixed reply or raising a fixed error."""

    def __init__(self, reply: Optional[str] = "1", error: Optional[BaseException] = None) -> None:
        self.reply = reply
        self.error = error
        self.prompts: list[str] = []
        self.closed = False

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply

    async def aclose(self) -> None:
        self.closed = True


class FakeLedger(BaseLedger):
    """In-memory append-only market contract."""

    def __init__(self, initial_count: int = 0) -> None:
        self.initial_count = initial_count
        self.connected = True
        self.submit_error: Optional[BaseException] = None
        self.confirm_error: Optional[BaseException] = None
        self.count_error: Optional[BaseException] = None
        self.receipt_status = 1
        self.block_number = 1234
        self.gas_used = 210000
        self.submissions: list[tuple[str, int, int]] = []
        self.submitted: Optional[asyncio.Event] = None
        self.confirm_gate: Optional[asyncio.Event] = None
        self.closed = False

    @property
    def signer_address(self) -> str:
        return "0x" + "a1" * 20

    @property
    def contract_address(self) -> str:
        return "0x" + "b2" * 20

    async def is_connected(self) -> bool:
        return self.connected

    async def submit_create_market(self, title: str, duration: int, confidence: int) -> str:
        if self.submit_error is not None:
            raise self.submit_error
        self.submissions.append((title, duration, confidence))
        if self.submitted is not None:
            self.submitted.set()
        return "0x" + f"{len(self.submissions):064x}"

    async def wait_for_confirmation(
        self,
        transaction_hash: str,
        timeout_seconds: float,
        poll_interval_seconds: float
    ) -> LedgerReceipt:
        if self.confirm_gate is not None:
            await self.confirm_gate.wait()
        if self.confirm_error is not None:
            raise self.confirm_error
        return LedgerReceipt(
            transaction_hash=transaction_hash,
            block_number=self.block_number,
            gas_used=self.gas_used,
            status=self.receipt_status,
        )

    async def market_count(self) -> int:
        if self.count_error is not None:
            raise self.count_error
        return self.initial_count + len(self.submissions)

    async def aclose(self) -> None:
        self.closed = True


class StaticFetcher:
    """Snapshot source returning the same snapshot every run."""

    def __init__(self, snapshot: SignalSnapshot) -> None:
        self.snapshot = snapshot
        self.calls = 0

    async def fetch_snapshot(self) -> SignalSnapshot:
        self.calls += 1
        return self.snapshot


@pytest.fixture
def make_snapshot():
    """Factory for snapshots with explicit quotes, sentiment and timestamp."""
    def _make(*quotes: AssetQuote, sentiment: Sentiment = Sentiment.NEUTRAL,
              fetched_at: datetime = MONDAY_NOON,
              source: SnapshotSource = SnapshotSource.LIVE) -> SignalSnapshot:
        return SignalSnapshot(
            quotes=tuple(quotes),
            sentiment=sentiment,
            fetched_at=fetched_at,
            source=source,
        )
    return _make


@pytest.fixture
def btc_quote() -> AssetQuote:
    """BTC at 95000, +2.5% on normal volume."""
    return AssetQuote(symbol="BTC", price=95000.0, change24h=2.5,
                      volume24h=20_000_000_000.0, market_cap=1_880_000_000_000.0)


@pytest.fixture
def eth_quote() -> AssetQuote:
    """ETH at 3600, +4.0%."""
    return AssetQuote(symbol="ETH", price=3600.0, change24h=4.0,
                      volume24h=15_000_000_000.0, market_cap=430_000_000_000.0)


@pytest.fixture
def fake_ledger() -> FakeLedger:
    return FakeLedger(initial_count=4)


@pytest.fixture
def decision_client() -> ScriptedDecisionClient:
    return ScriptedDecisionClient(reply="1")


@pytest.fixture
def static_fetcher_factory():
    return StaticFetcher


@pytest.fixture
def decision_client_factory():
    return ScriptedDecisionClient


@pytest.fixture
def ledger_factory():
    return FakeLedger


@pytest.fixture
def valid_env() -> dict[str, str]:
    return dict(VALID_ENV)


@pytest.fixture
def monday_noon() -> datetime:
    return MONDAY_NOON


@pytest.fixture
def friday_noon() -> datetime:
    return FRIDAY_NOON
