"""Data models for ledger commits"""

from dataclasses import dataclass

RECEIPT_STATUS_SUCCESS = 1


@dataclass(frozen=True)
class LedgerReceipt:
    """Confirmation data for a mined transaction."""
    transaction_hash: str
    block_number: int
    gas_used: int
    status: int

    @property
    def succeeded(self) -> bool:
        return self.status == RECEIPT_STATUS_SUCCESS


@dataclass(frozen=True)
class CommitResult:
    """Durable result of a confirmed market creation."""
    market_id: str           # str(marketCount() - 1) after confirmation
    transaction_hash: str    # 0x-prefixed hex
    block_number: int
    gas_used: int

    def __post_init__(self):
        if self.block_number < 0 or self.gas_used < 0:
            raise ValueError("block_number and gas_used must be non-negative")

    def to_dict(self) -> dict:
        return {
            "market_id": self.market_id,
            "transaction_hash": self.transaction_hash,
            "block_number": self.block_number,
            "gas_used": self.gas_used,
        }
