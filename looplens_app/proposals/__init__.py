"""
Proposal generation module.

Turns a SignalSnapshot into at most three scored market proposals.
"""

from .generator import ProposalGenerator
from .models import ALLOWED_DURATIONS, MAX_PROPOSALS, Proposal, ProposalCategory

__all__ = [
    "ProposalGenerator",
    "Proposal",
    "ProposalCategory",
    "ALLOWED_DURATIONS",
    "MAX_PROPOSALS",
]
