"""Data models for arbitration results"""

from dataclasses import dataclass
from typing import Optional

from ..proposals.models import Proposal


@dataclass(frozen=True)
class ArbitrationOutcome:
    """The proposal chosen for this run and how it was chosen."""
    selected_proposal: Proposal
    selected_index: int                       # Zero-based position in the input list
    raw_decision_text: Optional[str] = None   # None whenever the fallback was used
    fallback_reason: Optional[str] = None     # None when the service's choice was used

    @property
    def used_fallback(self) -> bool:
        return self.fallback_reason is not None
