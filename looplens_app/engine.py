"""
Main pipeline coordinator.

Runs the market creation pipeline once per trigger:
Snapshot → Proposals → Arbitration → Ledger Commit

Long-lived collaborators (HTTP client, decision client, signing identity,
ledger connection) are built once into an AgentContext and shared by every
run. Runs never overlap: a trigger that arrives while a run is in progress
is rejected.
"""

import asyncio
import itertools
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

import httpx
import structlog

from .arbitration.arbiter import Arbiter
from .arbitration.decision_client import OpenAIDecisionClient
from .arbitration.models import ArbitrationOutcome
from .config.credentials import AgentSettings
from .data.fetcher import MarketDataFetcher
from .data.models import SignalSnapshot
from .errors import CommitError, InsufficientFundsError
from .ledger.committer import ChainCommitter
from .ledger.models import CommitResult
from .ledger.web3_ledger import Web3Ledger
from .logging.config import get_pipeline_logger, log_stage_failure
from .proposals.generator import ProposalGenerator
from .proposals.models import Proposal
from .utils.time import elapsed_seconds, local_now

logger = structlog.get_logger(__name__)
pipeline_logger = get_pipeline_logger(__name__)


class RunStatus(str, Enum):
    """Terminal state of one pipeline run."""
    COMMITTED = "committed"
    NO_PROPOSALS = "no_proposals"
    COMMIT_FAILED = "commit_failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class PipelineRunResult:
    """Everything one run produced, for logging and tests."""
    run_id: int
    status: RunStatus
    started_at: datetime
    snapshot: Optional[SignalSnapshot] = None
    proposals: tuple[Proposal, ...] = field(default_factory=tuple)
    outcome: Optional[ArbitrationOutcome] = None
    commit: Optional[CommitResult] = None
    error: Optional[CommitError] = None

    @property
    def succeeded(self) -> bool:
        return self.status == RunStatus.COMMITTED


@dataclass
class AgentContext:
    """Process-wide collaborators, constructed once at startup."""
    fetcher: MarketDataFetcher
    generator: ProposalGenerator
    arbiter: Arbiter
    committer: ChainCommitter
    http_client: Optional[httpx.AsyncClient] = None

    @classmethod
    def create(cls, settings: AgentSettings) -> "AgentContext":
        """
        Build the production collaborators from resolved settings.

        Args:
            settings: Validated settings including credentials

        Returns:
            Ready-to-use context; call aclose() on shutdown
        """
        credentials = settings.credentials
        http_client = httpx.AsyncClient(
            timeout=settings.market_data.timeout_seconds,
            headers={"Accept": "application/json"},
        )

        fetcher = MarketDataFetcher(
            http_client,
            params=settings.market_data,
            sentiment_params=settings.sentiment,
        )
        arbiter = Arbiter(OpenAIDecisionClient(
            credentials.decision_api_key,
            params=settings.arbitration,
        ))
        committer = ChainCommitter(
            Web3Ledger(
                credentials.rpc_url,
                credentials.private_key,
                credentials.contract_address,
            ),
            params=settings.ledger,
        )

        return cls(
            fetcher=fetcher,
            generator=ProposalGenerator(),
            arbiter=arbiter,
            committer=committer,
            http_client=http_client,
        )

    async def aclose(self) -> None:
        """Release network resources held by the collaborators."""
        try:
            await self.arbiter.client.aclose()
        finally:
            try:
                await self.committer.ledger.aclose()
            finally:
                if self.http_client is not None:
                    await self.http_client.aclose()


class MarketCreationEngine:
    """
    Main coordinator for the market creation pipeline.

    Manages one run per trigger:
    Fetch Snapshot → Generate Proposals → Arbitrate → Commit
    """

    def __init__(self, context: AgentContext) -> None:
        self.context = context
        self.logger = logger
        self.pipeline_logger = pipeline_logger

        self._run_lock = asyncio.Lock()
        self._run_ids = itertools.count(1)

        self.logger.info("Market creation engine initialized")

    @property
    def is_running(self) -> bool:
        return self._run_lock.locked()

    async def run_once(self) -> PipelineRunResult:
        """
        Execute one pipeline run.

        Commit failures end the run and are reported in the result rather
        than raised. A trigger arriving while another run holds the lock
        returns immediately with status SKIPPED.

        Returns:
            Result describing how the run ended
        """
        run_id = next(self._run_ids)
        started_at = local_now()

        if self._run_lock.locked():
            self.pipeline_logger.warning(
                "Pipeline run already in progress, rejecting trigger",
                run_id=run_id
            )
            return PipelineRunResult(run_id=run_id, status=RunStatus.SKIPPED, started_at=started_at)

        async with self._run_lock:
            log = self.pipeline_logger.bind(run_id=run_id)
            log.info("Pipeline run started")

            result = await self._run(run_id, started_at, log)

            log.info(
                "Pipeline run finished",
                status=result.status.value,
                duration_seconds=round(elapsed_seconds(started_at, local_now()), 3)
            )
            return result

    async def _run(self, run_id: int, started_at: datetime, log) -> PipelineRunResult:
        snapshot = await self.context.fetcher.fetch_snapshot()
        self._log_snapshot(log, snapshot)

        proposals = tuple(self.context.generator.generate(snapshot))
        if not proposals:
            log.warning("No proposals generated, skipping arbitration and commit")
            return PipelineRunResult(
                run_id=run_id,
                status=RunStatus.NO_PROPOSALS,
                started_at=started_at,
                snapshot=snapshot,
            )

        for index, proposal in enumerate(proposals, start=1):
            log.info(
                "Proposal generated",
                number=index,
                title=proposal.title,
                confidence=proposal.confidence,
                duration_hours=proposal.duration_hours,
                category=proposal.category.value,
                reasoning=proposal.reasoning,
            )

        outcome = await self.context.arbiter.arbitrate(proposals)

        try:
            commit = await self.context.committer.commit(outcome.selected_proposal)
        except CommitError as e:
            context = {
                "title": outcome.selected_proposal.title,
                "transaction_hash": e.transaction_hash,
                "commit_stage": e.stage,
            }
            if isinstance(e, InsufficientFundsError):
                context["guidance"] = e.guidance
            log_stage_failure(log, stage="commit", error=e, recovered=False, context=context)

            return PipelineRunResult(
                run_id=run_id,
                status=RunStatus.COMMIT_FAILED,
                started_at=started_at,
                snapshot=snapshot,
                proposals=proposals,
                outcome=outcome,
                error=e,
            )

        return PipelineRunResult(
            run_id=run_id,
            status=RunStatus.COMMITTED,
            started_at=started_at,
            snapshot=snapshot,
            proposals=proposals,
            outcome=outcome,
            commit=commit,
        )

    def _log_snapshot(self, log, snapshot: SignalSnapshot) -> None:
        log.info(
            "Market snapshot",
            source=snapshot.source.value,
            sentiment=snapshot.sentiment.value,
            symbols=snapshot.symbols,
            total_volume_billions=round(snapshot.total_volume / 1e9, 2),
            total_market_cap_billions=round(snapshot.total_market_cap / 1e9, 2),
            fear_greed_index=snapshot.fear_greed_index,
            trending=list(snapshot.trending),
        )
