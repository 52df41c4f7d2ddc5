"""Base class for ledger connections."""

from abc import ABC, abstractmethod

from .models import LedgerReceipt


class BaseLedger(ABC):
    """
    Signing identity plus connection to the prediction market contract.

    The contract surface is exactly ``createMarket(title, duration,
    confidence)`` and ``marketCount()``.
    """

    @property
    @abstractmethod
    def signer_address(self) -> str:
        """Address of the signing account."""
        pass

    @property
    @abstractmethod
    def contract_address(self) -> str:
        """Address of the market contract."""
        pass

    @abstractmethod
    async def is_connected(self) -> bool:
        """Check that the ledger node is reachable."""
        pass

    @abstractmethod
    async def submit_create_market(self, title: str, duration: int, confidence: int) -> str:
        """
        Sign and send a createMarket transaction.

        Returns:
            Transaction hash as 0x-prefixed hex
        """
        pass

    @abstractmethod
    async def wait_for_confirmation(
        self,
        transaction_hash: str,
        timeout_seconds: float,
        poll_interval_seconds: float
    ) -> LedgerReceipt:
        """Block until the transaction is mined (one confirmation)."""
        pass

    @abstractmethod
    async def market_count(self) -> int:
        """Current number of markets on the contract."""
        pass

    async def aclose(self) -> None:
        """Release the connection."""
        return None
