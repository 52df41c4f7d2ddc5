"""
Ledger commit of the selected proposal.

Steps run strictly in order: check the connection, submit createMarket,
wait for one confirmation, read marketCount and derive the market id.
Every failure is raised as a CommitError subclass and is never retried
here; the next scheduled run is the only recovery path.
"""

from typing import Optional

from web3.exceptions import ContractLogicError

from ..config.defaults import LedgerParams
from ..errors import (
    CommitError,
    ConfirmationError,
    ContractRevertError,
    InsufficientFundsError,
    SubmissionError,
)
from ..logging.config import get_ledger_logger, log_commit_result
from ..proposals.models import Proposal
from .base import BaseLedger
from .models import CommitResult, LedgerReceipt

ledger_logger = get_ledger_logger(__name__)

INSUFFICIENT_FUNDS_CODE = "INSUFFICIENT_FUNDS"


def is_insufficient_funds(error: BaseException) -> bool:
    """Recognize a node rejection caused by an unfunded signer."""
    if getattr(error, "code", None) == INSUFFICIENT_FUNDS_CODE:
        return True
    return "insufficient funds" in str(error).lower()


class ChainCommitter:
    """Creates one market per call on the prediction market contract."""

    def __init__(self, ledger: BaseLedger, params: Optional[LedgerParams] = None) -> None:
        self.ledger = ledger
        self.params = params or LedgerParams()
        self.logger = ledger_logger

    def explorer_url(self, transaction_hash: str) -> str:
        return self.params.explorer_tx_url.format(tx_hash=transaction_hash)

    async def commit(self, proposal: Proposal) -> CommitResult:
        """
        Create a market for the proposal and wait for it to be mined.

        Args:
            proposal: The arbitrated proposal

        Returns:
            Complete commit result

        Raises:
            InsufficientFundsError: Signer cannot pay network fees
            SubmissionError: Node unreachable or submission rejected
            ConfirmationError: Confirmation wait or market count read failed
            ContractRevertError: Transaction mined with failed status
        """
        context = {
            "title": proposal.title,
            "duration": proposal.duration,
            "confidence": proposal.confidence,
            "signer": self.ledger.signer_address,
            "contract": self.ledger.contract_address,
        }
        log = self.logger.bind(**context)
        log.info("Creating market on-chain", duration_hours=proposal.duration_hours)

        await self._ensure_connected(context)
        transaction_hash = await self._submit(proposal, context)
        log.info("Transaction sent", transaction_hash=transaction_hash)

        receipt = await self._confirm(transaction_hash, context)
        market_id = await self._derive_market_id(transaction_hash, context)

        result = CommitResult(
            market_id=market_id,
            transaction_hash=transaction_hash,
            block_number=receipt.block_number,
            gas_used=receipt.gas_used,
        )
        log_commit_result(
            log,
            market_id=result.market_id,
            transaction_hash=result.transaction_hash,
            block_number=result.block_number,
            gas_used=result.gas_used,
            explorer_url=self.explorer_url(transaction_hash),
        )
        return result

    async def _ensure_connected(self, context: dict) -> None:
        try:
            connected = await self.ledger.is_connected()
        except Exception as e:
            raise SubmissionError(
                f"Ledger node connection check failed: {e!r}",
                stage="connect",
                context=context
            ) from e

        if not connected:
            raise SubmissionError(
                "Ledger node is unreachable",
                stage="connect",
                context=context
            )

    async def _submit(self, proposal: Proposal, context: dict) -> str:
        try:
            return await self.ledger.submit_create_market(
                proposal.title,
                proposal.duration,
                proposal.confidence,
            )
        except Exception as e:
            raise self._classify_submission_error(e, context) from e

    def _classify_submission_error(self, error: Exception, context: dict) -> CommitError:
        if is_insufficient_funds(error):
            guidance = (
                f"Not enough native balance for gas fees. Fund {self.ledger.signer_address} "
                f"with testnet ETH: {self.params.faucet_url}"
            )
            return InsufficientFundsError(
                f"Signer has insufficient funds: {error}",
                stage="submit",
                signer_address=self.ledger.signer_address,
                guidance=guidance,
                context=context
            )

        if isinstance(error, ContractLogicError):
            return ContractRevertError(
                f"createMarket reverted during submission: {error}",
                stage="submit",
                context=context
            )

        return SubmissionError(
            f"createMarket submission failed: {error!r}",
            stage="submit",
            context=context
        )

    async def _confirm(self, transaction_hash: str, context: dict) -> LedgerReceipt:
        try:
            receipt = await self.ledger.wait_for_confirmation(
                transaction_hash,
                self.params.confirmation_timeout_seconds,
                self.params.poll_interval_seconds,
            )
        except Exception as e:
            raise ConfirmationError(
                f"Transaction {transaction_hash} was not confirmed: {e!r}",
                stage="confirm",
                transaction_hash=transaction_hash,
                timeout_seconds=self.params.confirmation_timeout_seconds,
                context=context
            ) from e

        if not receipt.succeeded:
            raise ContractRevertError(
                f"Transaction {transaction_hash} reverted in block {receipt.block_number}",
                stage="confirm",
                transaction_hash=transaction_hash,
                block_number=receipt.block_number,
                context=context
            )

        return receipt

    async def _derive_market_id(self, transaction_hash: str, context: dict) -> str:
        """The new market is the most recent one: id = marketCount - 1."""
        try:
            count = await self.ledger.market_count()
        except Exception as e:
            raise ConfirmationError(
                f"Could not read marketCount after {transaction_hash}: {e!r}",
                stage="market_count",
                transaction_hash=transaction_hash,
                context=context
            ) from e

        if count < 1:
            raise ConfirmationError(
                f"marketCount is {count} after confirmed transaction {transaction_hash}",
                stage="market_count",
                transaction_hash=transaction_hash,
                context=context
            )

        return str(count - 1)
