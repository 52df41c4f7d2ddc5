"""
Ledger commit module.

Creates the selected market on the prediction market contract and derives
the ledger-assigned market id.
"""

from .base import BaseLedger
from .committer import ChainCommitter
from .models import CommitResult, LedgerReceipt

__all__ = [
    "BaseLedger",
    "ChainCommitter",
    "CommitResult",
    "LedgerReceipt",
]
