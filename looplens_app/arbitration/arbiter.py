"""
Proposal arbitration.

The decision service answers in free text. The first run of digits in the
reply is read as a 1-based proposal number. Any service error, a reply
without digits, or a number outside the list selects the first proposal.
The service is never retried and no failure propagates to the caller.
"""

import re
from typing import Sequence

from ..errors import ArbitrationError
from ..logging.config import get_pipeline_logger, log_stage_failure
from ..proposals.models import Proposal
from .decision_client import BaseDecisionClient
from .models import ArbitrationOutcome

pipeline_logger = get_pipeline_logger(__name__)

_DIGITS_RE = re.compile(r"[0-9]+")

PROMPT_HEADER = (
    "You are an AI prediction market analyst. Review these market proposals "
    "and decide which ONE is best to create right now:"
)


def _choice_list(count: int) -> str:
    """Human-readable list of valid answers: "1", "1 or 2", "1, 2, or 3"."""
    numbers = [str(i) for i in range(1, count + 1)]
    if len(numbers) == 1:
        return numbers[0]
    if len(numbers) == 2:
        return f"{numbers[0]} or {numbers[1]}"
    return ", ".join(numbers[:-1]) + f", or {numbers[-1]}"


def build_prompt(proposals: Sequence[Proposal]) -> str:
    """
    Build the arbitration prompt.

    Each proposal is listed with its 1-based number, title, confidence and
    reasoning.
    """
    entries = [
        f"{i}. {p.title}\n"
        f"   - AI Confidence: {p.confidence}%\n"
        f"   - Reasoning: {p.reasoning}\n"
        for i, p in enumerate(proposals, start=1)
    ]

    return (
        f"{PROMPT_HEADER}\n\n"
        + "\n".join(entries)
        + f"\n\nRespond with ONLY the number of the best market to create "
        f"({_choice_list(len(proposals))}). Be brief."
    )


def parse_selection(reply: str, proposal_count: int) -> int:
    """
    Extract the zero-based proposal index from a free-text reply.

    Args:
        reply: Raw reply from the decision service
        proposal_count: Number of proposals offered

    Returns:
        Zero-based index

    Raises:
        ArbitrationError: If the reply has no digits or the number is out of range
    """
    match = _DIGITS_RE.search(reply or "")
    if match is None:
        raise ArbitrationError(
            "Decision reply contains no proposal number",
            raw_reply=reply,
            proposal_count=proposal_count
        )

    try:
        index = int(match.group()) - 1
    except ValueError as e:
        raise ArbitrationError(
            "Decision reply proposal number is not a usable integer",
            raw_reply=reply,
            proposal_count=proposal_count
        ) from e

    if not 0 <= index < proposal_count:
        raise ArbitrationError(
            f"Decision reply selects proposal {match.group()} of {proposal_count}",
            raw_reply=reply,
            proposal_count=proposal_count
        )

    return index


class Arbiter:
    """Selects one proposal per run via the decision service."""

    def __init__(self, client: BaseDecisionClient) -> None:
        self.client = client
        self.pipeline_logger = pipeline_logger

    async def arbitrate(self, proposals: Sequence[Proposal]) -> ArbitrationOutcome:
        """
        Choose one of the proposals.

        Args:
            proposals: One or more proposals in generation order

        Returns:
            Outcome whose selected proposal is always an element of proposals

        Raises:
            ValueError: If proposals is empty
        """
        if not proposals:
            raise ValueError("Arbitration requires at least one proposal")

        prompt = build_prompt(proposals)

        try:
            reply = await self.client.complete(prompt)
        except Exception as e:
            return self._fallback(proposals, ArbitrationError(
                f"Decision service call failed: {e!r}",
                proposal_count=len(proposals)
            ))

        self.pipeline_logger.info("Decision service replied", decision=reply)

        try:
            index = parse_selection(reply, len(proposals))
        except ArbitrationError as e:
            return self._fallback(proposals, e)

        selected = proposals[index]
        self.pipeline_logger.info(
            "Proposal selected",
            selected_index=index,
            title=selected.title,
            confidence=selected.confidence,
        )
        return ArbitrationOutcome(
            selected_proposal=selected,
            selected_index=index,
            raw_decision_text=reply,
        )

    def _fallback(self, proposals: Sequence[Proposal], error: ArbitrationError) -> ArbitrationOutcome:
        """Select the first-generated proposal after any arbitration failure."""
        log_stage_failure(
            self.pipeline_logger,
            stage="arbitrate",
            error=error,
            recovered=True,
            context={
                "proposal_count": len(proposals),
                "raw_reply": error.raw_reply,
                "fallback_title": proposals[0].title,
            }
        )
        return ArbitrationOutcome(
            selected_proposal=proposals[0],
            selected_index=0,
            raw_decision_text=None,
            fallback_reason=str(error),
        )
