"""Tests for the Gemini client."""
import json

import httpx
import pytest

from spendguard.errors import UpstreamError
from spendguard.services.llm import GeminiClient, RateLimiter


def _client(handler, limiter=None, api_key="test-key"):
    return GeminiClient(
        api_key=api_key,
        model="gemini-test",
        timeout=5,
        rate_limiter=limiter or RateLimiter(daily_limit=100, per_minute_limit=100),
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_generate_returns_first_candidate_text() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={
            "candidates": [{"content": {"parts": [{"text": " food \n"}]}}]
        })

    client = _client(handler)
    assert await client.generate("Categorize pizza", max_tokens=16) == "food"
    assert "models/gemini-test:generateContent" in seen["url"]
    assert "key=test-key" in seen["url"]
    assert seen["body"]["contents"][0]["parts"][0]["text"] == "Categorize pizza"
    assert seen["body"]["generationConfig"]["maxOutputTokens"] == 16
    assert client.rate_limiter.requests_today == 1


@pytest.mark.asyncio
async def test_http_error_raises_upstream_error() -> None:
    def handler(request):
        return httpx.Response(503, json={"error": {"message": "overloaded"}})

    with pytest.raises(UpstreamError, match="503 - overloaded"):
        await _client(handler).generate("hi")


@pytest.mark.asyncio
async def test_transport_error_raises_upstream_error() -> None:
    def handler(request):
        raise httpx.ConnectError("no route", request=request)

    with pytest.raises(UpstreamError):
        await _client(handler).generate("hi")


@pytest.mark.asyncio
async def test_empty_candidates_raise_upstream_error() -> None:
    with pytest.raises(UpstreamError, match="empty"):
        await _client(lambda request: httpx.Response(200, json={"candidates": []})).generate("hi")


@pytest.mark.asyncio
async def test_missing_api_key_raises_without_calling_out() -> None:
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={})

    with pytest.raises(UpstreamError, match="not configured"):
        await _client(handler, api_key=None).generate("hi")
    assert calls == []


@pytest.mark.asyncio
async def test_rate_limit_blocks_calls() -> None:
    limiter = RateLimiter(daily_limit=100, per_minute_limit=1)
    ok = lambda request: httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": "ok"}]}}]})
    client = _client(ok, limiter=limiter)

    assert await client.generate("first") == "ok"
    with pytest.raises(UpstreamError, match="Rate limit"):
        await client.generate("second")
    assert client.rate_limit_status()["minute_remaining"] == 0


def test_daily_limit_reported() -> None:
    limiter = RateLimiter(daily_limit=1, per_minute_limit=10)
    limiter.record()
    allowed, status = limiter.check()
    assert allowed is False
    assert status["daily_remaining"] == 0
    assert "Daily limit" in status["error"]
