"""
Recovery strategy classifications for error handling.

Errors in this module allow the pipeline to continue with reduced
functionality instead of ending the run.
"""

from typing import Optional


class GracefulDegradationError(Exception):
    """Mixin for errors that allow continued operation with reduced functionality."""

    def __init__(self, message: str, degraded_functionality: Optional[str] = None,
                 fallback_strategy: Optional[str] = None, **kwargs):
        super().__init__(message)
        self.degraded_functionality = degraded_functionality
        self.fallback_strategy = fallback_strategy
        self.allows_degradation = True


class ArbitrationError(GracefulDegradationError):
    """The decision service failed or its reply could not be used."""

    def __init__(self, message: str, raw_reply: Optional[str] = None,
                 proposal_count: Optional[int] = None, **kwargs):
        kwargs.setdefault("degraded_functionality", "arbitration")
        kwargs.setdefault("fallback_strategy", "first_proposal")
        super().__init__(message, **kwargs)
        self.raw_reply = raw_reply
        self.proposal_count = proposal_count
