"""Tests for the OpenAI-compatible decision client"""

import asyncio

import httpx
import orjson
import pytest
from openai import APIStatusError, AsyncOpenAI

from looplens_app.arbitration import Arbiter, OpenAIDecisionClient
from looplens_app.config.defaults import ArbitrationParams
from looplens_app.proposals.models import Proposal, ProposalCategory

BASE_URL = "https://api.groq.test/openai/v1"


def _completion(content):
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "created": 1704110400,
        "model": "llama-3.3-70b-versatile",
        "choices": [{
            "index": 0,
            "message": {"role": "assistant", "content": content},
            "finish_reason": "stop",
        }],
        "usage": {"prompt_tokens": 120, "completion_tokens": 1, "total_tokens": 121},
    }


def _client(handler) -> OpenAIDecisionClient:
    params = ArbitrationParams(base_url=BASE_URL)
    openai_client = AsyncOpenAI(
        api_key="gsk_test_key",
        base_url=BASE_URL,
        max_retries=0,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )
    return OpenAIDecisionClient("gsk_test_key", params=params, client=openai_client)


class TestOpenAIDecisionClient:
    """Test request shape and reply extraction"""

    def test_sends_chat_completion_request(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=_completion("2"))

        reply = asyncio.run(_client(handler).complete("Pick one"))

        assert reply == "2"
        assert len(requests) == 1
        request = requests[0]
        assert request.url.path.endswith("/chat/completions")
        assert request.headers["authorization"] == "Bearer gsk_test_key"

        body = orjson.loads(request.content)
        assert body["model"] == "llama-3.3-70b-versatile"
        assert body["temperature"] == 0.7
        assert body["max_tokens"] == 100
        assert body["messages"] == [{"role": "user", "content": "Pick one"}]

    def test_null_content_becomes_empty(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=_completion(None))

        assert asyncio.run(_client(handler).complete("Pick one")) == ""

    def test_server_error_raises_without_retry(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(500, json={"error": {"message": "upstream down"}})

        with pytest.raises(APIStatusError):
            asyncio.run(_client(handler).complete("Pick one"))
        assert len(calls) == 1


class TestArbiterWithService:
    """Arbiter wired to the HTTP-backed client"""

    def _proposals(self):
        return [
            Proposal(title="first", duration=86400, confidence=60, reasoning="a",
                     category=ProposalCategory.CRYPTO_PRICE),
            Proposal(title="second", duration=259200, confidence=80, reasoning="b",
                     category=ProposalCategory.RELATIVE_PERFORMANCE),
        ]

    def test_service_choice(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=_completion("2"))

        outcome = asyncio.run(Arbiter(_client(handler)).arbitrate(self._proposals()))
        assert outcome.selected_proposal.title == "second"
        assert outcome.raw_decision_text == "2"

    def test_auth_failure_falls_back(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, json={"error": {"message": "invalid api key"}})

        outcome = asyncio.run(Arbiter(_client(handler)).arbitrate(self._proposals()))
        assert outcome.selected_proposal.title == "first"
        assert outcome.used_fallback

    def test_transport_failure_falls_back(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        outcome = asyncio.run(Arbiter(_client(handler)).arbitrate(self._proposals()))
        assert outcome.selected_proposal.title == "first"
