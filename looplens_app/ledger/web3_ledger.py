"""EVM ledger connection backed by web3.py."""

from typing import Optional

import structlog
from eth_account import Account
from web3 import AsyncHTTPProvider, AsyncWeb3

from .base import BaseLedger
from .models import LedgerReceipt

logger = structlog.get_logger(__name__)

PREDICTION_MARKET_ABI = [
    {
        "type": "function",
        "name": "createMarket",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "_title", "type": "string"},
            {"name": "_duration", "type": "uint256"},
            {"name": "_aiConfidence", "type": "uint8"},
        ],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "name": "marketCount",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
    },
]


class Web3Ledger(BaseLedger):
    """Prediction market contract reached over JSON-RPC."""

    def __init__(
        self,
        rpc_url: str,
        private_key: str,
        contract_address: str,
        w3: Optional[AsyncWeb3] = None
    ) -> None:
        self.w3 = w3 or AsyncWeb3(AsyncHTTPProvider(rpc_url))
        self.account = Account.from_key(private_key)
        self._contract_address = AsyncWeb3.to_checksum_address(contract_address)
        self.contract = self.w3.eth.contract(
            address=self._contract_address,
            abi=PREDICTION_MARKET_ABI,
        )

        logger.info(
            "Ledger connection configured",
            signer=self.account.address,
            contract=self._contract_address,
        )

    @property
    def signer_address(self) -> str:
        return self.account.address

    @property
    def contract_address(self) -> str:
        return self._contract_address

    async def is_connected(self) -> bool:
        return await self.w3.is_connected()

    async def submit_create_market(self, title: str, duration: int, confidence: int) -> str:
        # Pending nonce so a still-unconfirmed transaction is not replaced
        nonce = await self.w3.eth.get_transaction_count(self.account.address, "pending")
        transaction = await self.contract.functions.createMarket(
            title, duration, confidence
        ).build_transaction({
            "from": self.account.address,
            "nonce": nonce,
        })

        signed = self.account.sign_transaction(transaction)
        tx_hash = await self.w3.eth.send_raw_transaction(signed.raw_transaction)
        return AsyncWeb3.to_hex(tx_hash)

    async def wait_for_confirmation(
        self,
        transaction_hash: str,
        timeout_seconds: float,
        poll_interval_seconds: float
    ) -> LedgerReceipt:
        receipt = await self.w3.eth.wait_for_transaction_receipt(
            transaction_hash,
            timeout=timeout_seconds,
            poll_latency=poll_interval_seconds,
        )
        return LedgerReceipt(
            transaction_hash=transaction_hash,
            block_number=int(receipt["blockNumber"]),
            gas_used=int(receipt["gasUsed"]),
            status=int(receipt["status"]),
        )

    async def market_count(self) -> int:
        return int(await self.contract.functions.marketCount().call())

    async def aclose(self) -> None:
        await self.w3.provider.disconnect()
