"""Gemini text-generation client.

One client is built per process (see ``get_llm_client``) and handed to the
categorizer and the spending evaluator. Every failure is raised as
``UpstreamError``; callers decide how to recover.
"""

import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Protocol, Tuple

import httpx

from .. import config
from ..errors import UpstreamError

logger = logging.getLogger(__name__)

GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"


class TextGenerator(Protocol):
    """Anything that turns a prompt into text."""

    async def generate(self, prompt: str, max_tokens: int = 256) -> str:
        ...


class RateLimiter:
    """In-memory daily and per-minute quota for the free Gemini tier."""

    def __init__(self, daily_limit: int, per_minute_limit: int):
        self.daily_limit = daily_limit
        self.per_minute_limit = per_minute_limit
        self.requests_today = 0
        self.last_reset = date.today()
        self.requests_per_minute: List[datetime] = []

    def check(self) -> Tuple[bool, Dict[str, Any]]:
        """Check if we're within rate limits. Returns (allowed, status_info)."""
        today = date.today()

        # Reset daily counter if new day
        if self.last_reset != today:
            self.requests_today = 0
            self.last_reset = today

        # Clean up old minute timestamps
        now = datetime.now()
        self.requests_per_minute = [
            ts for ts in self.requests_per_minute
            if (now - ts).total_seconds() < 60
        ]

        daily_remaining = self.daily_limit - self.requests_today
        minute_remaining = self.per_minute_limit - len(self.requests_per_minute)

        status = {
            "daily_remaining": daily_remaining,
            "minute_remaining": minute_remaining,
            "daily_limit": self.daily_limit,
            "minute_limit": self.per_minute_limit,
        }

        if daily_remaining <= 0:
            return False, {**status, "error": "Daily limit reached. Resets at midnight."}
        if minute_remaining <= 0:
            return False, {**status, "error": "Rate limit reached. Wait a minute."}

        return True, status

    def record(self) -> None:
        self.requests_today += 1
        self.requests_per_minute.append(datetime.now())


class GeminiClient:
    """Thin async wrapper around the Gemini ``generateContent`` endpoint."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str = config.GEMINI_MODEL,
        timeout: float = config.GEMINI_TIMEOUT,
        rate_limiter: Optional[RateLimiter] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self.rate_limiter = rate_limiter or RateLimiter(
            config.LLM_DAILY_LIMIT, config.LLM_PER_MINUTE_LIMIT
        )
        self._transport = transport

    async def generate(
        self,
        prompt: str,
        max_tokens: int = 256,
        temperature: float = 0.7,
        system_instruction: str = "",
    ) -> str:
        """Send ``prompt`` and return the first candidate's text.

        Args:
            prompt: The prompt to send to the model
            max_tokens: Upper bound on generated tokens
            temperature: Model temperature (0 = deterministic, 1 = creative)
            system_instruction: Optional system instruction for the model

        Raises:
            UpstreamError: missing key, quota exhausted, HTTP/transport
                failure, or a reply without text.
        """
        if not self.api_key:
            logger.warning("[LLM] GEMINI_API_KEY not configured")
            raise UpstreamError("Text generation is not configured")

        allowed, status = self.rate_limiter.check()
        if not allowed:
            logger.warning(f"[LLM] Rate limit exceeded: {status}")
            raise UpstreamError(f"Rate limit exceeded: {status.get('error', 'Try again later.')}")

        logger.debug(f"[LLM] Making API call (rate limit status: {status})")

        payload: Dict[str, Any] = {
            "contents": [
                {
                    "parts": [{"text": prompt}]
                }
            ],
            "generationConfig": {
                "temperature": temperature,
                "maxOutputTokens": max_tokens,
            },
        }
        if system_instruction:
            payload["systemInstruction"] = {"parts": [{"text": system_instruction}]}

        url = GEMINI_URL.format(model=self.model)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(url, params={"key": self.api_key}, json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            try:
                error_detail = e.response.json().get("error", {}).get("message", "")
            except ValueError:
                error_detail = e.response.text[:200] if e.response.text else ""
            logger.error(f"[LLM] HTTP error: {e.response.status_code} - {error_detail}")
            raise UpstreamError(f"API error: {e.response.status_code} - {error_detail}") from e
        except httpx.HTTPError as e:
            logger.error(f"[LLM] Transport error: {e!r}")
            raise UpstreamError(f"Error calling LLM: {e}") from e

        self.rate_limiter.record()

        text = _first_candidate_text(data)
        if not text:
            raise UpstreamError("LLM returned an empty response")
        return text

    def rate_limit_status(self) -> Dict[str, Any]:
        _, status = self.rate_limiter.check()
        return status


def _first_candidate_text(data: Dict[str, Any]) -> str:
    candidates = data.get("candidates") or []
    if not candidates:
        return ""
    parts = candidates[0].get("content", {}).get("parts") or []
    return "".join(part.get("text", "") for part in parts).strip()


_client: Optional[GeminiClient] = None


def get_llm_client() -> GeminiClient:
    """Process-wide client; also used as a FastAPI dependency."""
    global _client
    if _client is None:
        _client = GeminiClient(api_key=config.GEMINI_API_KEY)
    return _client
