"""
System failure error classifications for unrecoverable errors.

These exceptions end the current pipeline run. Ledger commit failures are
never retried in-process; the next scheduled run is the recovery path.
"""

from typing import Optional, Dict, Any


class SystemFailureError(Exception):
    """Base class for unrecoverable system failures."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class ConfigurationError(SystemFailureError):
    """Invalid or incomplete configuration detected at startup."""

    def __init__(self, message: str, errors: Optional[list] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.errors = errors or []


class CommitError(SystemFailureError):
    """Market creation on the ledger failed."""

    def __init__(self, message: str, stage: Optional[str] = None,
                 transaction_hash: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.stage = stage
        self.transaction_hash = transaction_hash


class InsufficientFundsError(CommitError):
    """The signing account cannot pay the network fees."""

    def __init__(self, message: str, signer_address: Optional[str] = None,
                 guidance: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.signer_address = signer_address
        self.guidance = guidance


class SubmissionError(CommitError):
    """The ledger node was unreachable or rejected the submission."""


class ConfirmationError(CommitError):
    """The submission was accepted but could not be confirmed."""

    def __init__(self, message: str, timeout_seconds: Optional[float] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.timeout_seconds = timeout_seconds


class ContractRevertError(CommitError):
    """The transaction was mined but the contract call reverted."""

    def __init__(self, message: str, block_number: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.block_number = block_number
