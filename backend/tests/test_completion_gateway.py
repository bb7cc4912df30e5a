"""Tests for the completion gateway against a fake upstream."""

import json

import httpx
import pytest

from config import Settings
from models.requests import AnalysisRequest
from models.responses import FALLBACK_RESULT, AnalysisOutcome
from services.completion_gateway import CompletionGateway, classify_status, extract_content
from services.errors import (
    ConfigurationError,
    EmptyUpstreamResponse,
    UpstreamError,
    UpstreamFailure,
    UpstreamTimeout,
)

REQUEST = AnalysisRequest(
    resume_text="Backend engineer: Python, FastAPI, PostgreSQL, Docker.",
    job_description="Looking for a Python engineer with Kubernetes experience.",
)


class TestClassifyStatus:
    @pytest.mark.parametrize(
        "status, failure",
        [
            (400, UpstreamFailure.BAD_REQUEST),
            (401, UpstreamFailure.AUTH),
            (429, UpstreamFailure.RATE_LIMIT),
            (403, UpstreamFailure.UNAVAILABLE),
            (500, UpstreamFailure.UNAVAILABLE),
            (503, UpstreamFailure.UNAVAILABLE),
        ],
    )
    def test_lookup(self, status, failure):
        assert classify_status(status) is failure


class TestExtractContent:
    def test_happy_path(self):
        assert extract_content({"choices": [{"message": {"content": "hi"}}]}) == "hi"

    @pytest.mark.parametrize(
        "data",
        [
            {},
            {"choices": []},
            {"choices": [{}]},
            {"choices": [{"message": {}}]},
            {"choices": [{"message": {"content": ""}}]},
            {"choices": [{"message": {"content": None}}]},
            [],
        ],
    )
    def test_missing_links(self, data):
        assert extract_content(data) is None


class TestGatewayConfig:
    def test_from_settings(self):
        s = Settings(openrouter_api_key="k", completion_model="some/model", request_timeout=5)
        gw = CompletionGateway.from_settings(s)
        assert gw.api_key == "k"
        assert gw.model == "some/model"
        assert gw.timeout == 5
        assert gw.is_configured

    def test_payload_shape(self):
        gw = CompletionGateway("k")
        payload = gw.build_payload("PROMPT")
        assert payload == {
            "model": "qwen/qwen-2.5-72b-instruct",
            "messages": [{"role": "user", "content": "PROMPT"}],
            "temperature": 0.3,
            "max_tokens": 1000,
        }

    @pytest.mark.asyncio
    async def test_missing_key_makes_no_call(self, upstream):
        gw = upstream.gateway(api_key="")
        with pytest.raises(ConfigurationError):
            await gw.analyze(REQUEST)
        assert upstream.requests == []


class TestGatewayAnalyze:
    @pytest.mark.asyncio
    async def test_success(self, upstream):
        outcome = await upstream.gateway().analyze(REQUEST)
        assert isinstance(outcome, AnalysisOutcome)
        assert outcome.degraded is False
        assert outcome.result.match_score == 82
        assert outcome.result.missing_skills == ["Kubernetes"]

    @pytest.mark.asyncio
    async def test_single_outbound_request(self, upstream):
        await upstream.gateway(api_key="secret").analyze(REQUEST)
        assert len(upstream.requests) == 1
        sent = upstream.requests[0]
        assert sent.method == "POST"
        assert str(sent.url) == "https://openrouter.ai/api/v1/chat/completions"
        assert sent.headers["authorization"] == "Bearer secret"
        assert sent.headers["x-title"] == "JobSnip Resume Analyzer"
        body = json.loads(sent.content)
        assert body["temperature"] == 0.3
        assert body["max_tokens"] == 1000
        assert body["messages"][0]["role"] == "user"
        assert REQUEST.resume_text in body["messages"][0]["content"]

    @pytest.mark.asyncio
    async def test_score_normalized(self, upstream):
        upstream.reply('{"matchScore": 72.6, "missingSkills": [], "improvements": []}')
        outcome = await upstream.gateway().analyze(REQUEST)
        assert outcome.result.match_score == 73

    @pytest.mark.asyncio
    async def test_fenced_reply(self, upstream):
        upstream.reply('\n\n```json\n{"matchScore": 137, "missingSkills": ["Go"], "improvements": []}\n```')
        outcome = await upstream.gateway().analyze(REQUEST)
        assert outcome.degraded is False
        assert outcome.result.match_score == 100

    @pytest.mark.asyncio
    async def test_prose_reply_falls_back(self, upstream):
        upstream.reply("I think this candidate is a decent match overall.")
        outcome = await upstream.gateway().analyze(REQUEST)
        assert outcome.degraded is True
        assert outcome.result == FALLBACK_RESULT

    @pytest.mark.asyncio
    async def test_empty_content(self, upstream):
        upstream.json_body = {"choices": [{"message": {"role": "assistant", "content": ""}}]}
        with pytest.raises(EmptyUpstreamResponse):
            await upstream.gateway().analyze(REQUEST)

    @pytest.mark.asyncio
    async def test_non_json_envelope(self, upstream):
        upstream.text_body = "<html>oops</html>"
        with pytest.raises(EmptyUpstreamResponse):
            await upstream.gateway().analyze(REQUEST)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status, failure, client_status",
        [
            (401, UpstreamFailure.AUTH, 400),
            (429, UpstreamFailure.RATE_LIMIT, 400),
            (400, UpstreamFailure.BAD_REQUEST, 400),
            (404, UpstreamFailure.UNAVAILABLE, 400),
            (502, UpstreamFailure.UNAVAILABLE, 500),
        ],
    )
    async def test_upstream_status(self, upstream, status, failure, client_status):
        upstream.fail(status, text="upstream body")
        with pytest.raises(UpstreamError) as exc:
            await upstream.gateway().analyze(REQUEST)
        assert exc.value.failure is failure
        assert exc.value.status_code == client_status
        assert exc.value.upstream_status == status
        assert exc.value.details == "upstream body"
        assert len(upstream.requests) == 1

    @pytest.mark.asyncio
    async def test_slow_upstream_times_out(self, upstream):
        upstream.delay = 1.0
        with pytest.raises(UpstreamTimeout):
            await upstream.gateway(timeout=0.05).analyze(REQUEST)
        assert len(upstream.requests) == 1

    @pytest.mark.asyncio
    async def test_transport_timeout(self, upstream):
        upstream.error = httpx.ReadTimeout("read timed out")
        with pytest.raises(UpstreamTimeout):
            await upstream.gateway().analyze(REQUEST)

    @pytest.mark.asyncio
    async def test_connection_error_is_unavailable(self, upstream):
        upstream.error = httpx.ConnectError("connection refused")
        with pytest.raises(UpstreamError) as exc:
            await upstream.gateway().analyze(REQUEST)
        assert exc.value.failure is UpstreamFailure.UNAVAILABLE
        assert exc.value.status_code == 500
        assert len(upstream.requests) == 1
