"""
Error classification for the market proposal pipeline.

This module provides a structured exception hierarchy separating failures
the pipeline degrades around (market data, sentiment, arbitration) from
failures that end the current run (configuration, ledger commit).
"""

from .data_quality import (
    DataQualityError,
    DataUnavailableError,
    SentimentUnavailableError,
    MalformedDataError,
)
from .system_failures import (
    SystemFailureError,
    ConfigurationError,
    CommitError,
    InsufficientFundsError,
    SubmissionError,
    ConfirmationError,
    ContractRevertError,
)
from .recovery import (
    GracefulDegradationError,
    ArbitrationError,
)

__all__ = [
    # Data Quality Errors
    "DataQualityError",
    "DataUnavailableError",
    "SentimentUnavailableError",
    "MalformedDataError",
    # System Failures
    "SystemFailureError",
    "ConfigurationError",
    "CommitError",
    "InsufficientFundsError",
    "SubmissionError",
    "ConfirmationError",
    "ContractRevertError",
    # Recovery Categories
    "GracefulDegradationError",
    "ArbitrationError",
]
