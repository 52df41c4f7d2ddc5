"""
Integration tests for the full market creation pipeline.

Market feeds and the decision service are served over httpx.MockTransport;
only the ledger is replaced by an in-memory contract.
"""

import asyncio

import httpx
import orjson
from openai import AsyncOpenAI

from looplens_app.arbitration import Arbiter, OpenAIDecisionClient
from looplens_app.config.defaults import ArbitrationParams
from looplens_app.data.fetcher import MarketDataFetcher
from looplens_app.data.models import Sentiment, SnapshotSource
from looplens_app.engine import AgentContext, MarketCreationEngine, RunStatus
from looplens_app.ledger import ChainCommitter
from looplens_app.proposals import ProposalGenerator

DECISION_URL = "https://api.groq.test/openai/v1"

PRICES = {
    "bitcoin": {"usd": 95000, "usd_24h_change": 2.5, "usd_24h_vol": 3.7e10, "usd_market_cap": 1.88e12},
    "ethereum": {"usd": 3600, "usd_24h_change": 4.0, "usd_24h_vol": 1.5e10, "usd_market_cap": 4.3e11},
    "solana": {"usd": 150, "usd_24h_change": 3.2, "usd_24h_vol": 2.5e9, "usd_market_cap": 7.0e10},
}


def market_handler(healthy: bool):
    def handler(request: httpx.Request) -> httpx.Response:
        if not healthy:
            return httpx.Response(502, text="Bad Gateway")
        if request.url.path == "/api/v3/simple/price":
            return httpx.Response(200, json=PRICES)
        if request.url.path == "/fng/":
            return httpx.Response(200, json={"data": [{"value": "64"}]})
        return httpx.Response(200, json={"coins": [{"item": {"name": "Pepe"}}]})
    return handler


def decision_handler(reply, prompts):
    def handler(request: httpx.Request) -> httpx.Response:
        prompts.append(orjson.loads(request.content)["messages"][0]["content"])
        if reply is None:
            return httpx.Response(500, json={"error": {"message": "internal error"}})
        return httpx.Response(200, json={
            "id": "chatcmpl-test",
            "object": "chat.completion",
            "created": 1704456000,
            "model": "llama-3.3-70b-versatile",
            "choices": [{"index": 0, "message": {"role": "assistant", "content": reply},
                         "finish_reason": "stop"}],
        })
    return handler


def run_pipeline(ledger, clock, feeds_healthy=True, reply="2"):
    prompts = []

    async def scenario():
        market_client = httpx.AsyncClient(transport=httpx.MockTransport(market_handler(feeds_healthy)))
        openai_client = AsyncOpenAI(
            api_key="gsk_test_key",
            base_url=DECISION_URL,
            max_retries=0,
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(decision_handler(reply, prompts))),
        )
        context = AgentContext(
            fetcher=MarketDataFetcher(market_client, clock=clock),
            generator=ProposalGenerator(),
            arbiter=Arbiter(OpenAIDecisionClient(
                "gsk_test_key", params=ArbitrationParams(base_url=DECISION_URL), client=openai_client
            )),
            committer=ChainCommitter(ledger),
            http_client=market_client,
        )
        try:
            return await MarketCreationEngine(context).run_once()
        finally:
            await context.aclose()

    return asyncio.run(scenario()), prompts


class TestFullPipeline:
    """End-to-end runs"""

    def test_live_data_service_choice(self, ledger_factory, friday_noon):
        ledger = ledger_factory(initial_count=41)

        result, prompts = run_pipeline(ledger, lambda: friday_noon, reply="Option 2")

        assert result.status == RunStatus.COMMITTED
        assert result.snapshot.source == SnapshotSource.LIVE
        assert result.snapshot.sentiment == Sentiment.BULLISH
        assert result.snapshot.fear_greed_index == 64
        assert [p.title for p in result.proposals] == [
            "Will BTC close above $97,900 in 24 hours?",
            "Will ETH outperform BTC over the next 3 days?",
            "Will BTC price move more than 3% in either direction within 48h?",
        ]
        assert ledger.submissions == [("Will ETH outperform BTC over the next 3 days?", 259200, 70)]
        assert result.commit.market_id == "41"
        assert result.outcome.raw_decision_text == "Option 2"

        assert len(prompts) == 1
        assert "1. Will BTC close above $97,900 in 24 hours?" in prompts[0]
        assert "(1, 2, or 3)" in prompts[0]
        assert ledger.closed

    def test_degraded_run_commits_first_proposal(self, ledger_factory, monday_noon):
        """Feeds down and decision service failing: fallback snapshot, first proposal"""
        ledger = ledger_factory(initial_count=0)

        result, _ = run_pipeline(ledger, lambda: monday_noon, feeds_healthy=False, reply=None)

        assert result.status == RunStatus.COMMITTED
        assert result.snapshot.source == SnapshotSource.FALLBACK
        assert result.snapshot.sentiment == Sentiment.NEUTRAL
        assert result.outcome.used_fallback
        assert ledger.submissions == [("Will BTC close above $97,900 in 24 hours?", 86400, 67)]
        assert result.commit.market_id == "0"

    def test_commit_failure_after_arbitration(self, ledger_factory, monday_noon):
        ledger = ledger_factory()
        ledger.confirm_error = TimeoutError("receipt not found")

        result, _ = run_pipeline(ledger, lambda: monday_noon, reply="3")

        assert result.status == RunStatus.COMMIT_FAILED
        assert result.commit is None
        assert result.error.stage == "confirm"
        assert result.outcome.selected_index == 2
        assert len(ledger.submissions) == 1
