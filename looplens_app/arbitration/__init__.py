"""
Arbitration module.

Narrows the generated proposals to one via an external decision service,
falling back to the first proposal on any failure.
"""

from .arbiter import Arbiter, build_prompt, parse_selection
from .decision_client import BaseDecisionClient, OpenAIDecisionClient
from .models import ArbitrationOutcome

__all__ = [
    "Arbiter",
    "ArbitrationOutcome",
    "BaseDecisionClient",
    "OpenAIDecisionClient",
    "build_prompt",
    "parse_selection",
]
