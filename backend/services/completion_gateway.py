"""OpenRouter-style chat-completion gateway with error classification.

One analyze call issues exactly one outbound request. Nothing is retried:
a failed or timed-out attempt is reported to the caller as-is.
"""

import asyncio
import logging

import httpx

from config import Settings
from models.requests import AnalysisRequest
from models.responses import FALLBACK_RESULT, AnalysisOutcome
from services import prompt_builder, response_parser
from services.errors import (
    ConfigurationError,
    EmptyUpstreamResponse,
    UpstreamError,
    UpstreamFailure,
    UpstreamTimeout,
)

logger = logging.getLogger(__name__)

# upstream status -> failure variant; unlisted statuses are UNAVAILABLE
UPSTREAM_FAILURES: dict[int, UpstreamFailure] = {
    400: UpstreamFailure.BAD_REQUEST,
    401: UpstreamFailure.AUTH,
    429: UpstreamFailure.RATE_LIMIT,
}


def classify_status(status_code: int) -> UpstreamFailure:
    return UPSTREAM_FAILURES.get(status_code, UpstreamFailure.UNAVAILABLE)


def extract_content(data) -> str | None:
    """Return ``choices[0].message.content`` or None if any link is missing."""
    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    message = first.get("message") if isinstance(first, dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, str) or not content:
        return None
    return content


class CompletionGateway:
    def __init__(
        self,
        api_key: str,
        *,
        url: str = "https://openrouter.ai/api/v1/chat/completions",
        model: str = "qwen/qwen-2.5-72b-instruct",
        temperature: float = 0.3,
        max_tokens: int = 1000,
        timeout: float = 30.0,
        referer: str = "http://localhost:3000",
        title: str = "JobSnip Resume Analyzer",
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.url = url
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.referer = referer
        self.title = title
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "CompletionGateway":
        return cls(
            settings.openrouter_api_key,
            url=settings.completion_url,
            model=settings.completion_model,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
            timeout=settings.request_timeout,
            referer=settings.http_referer,
            title=settings.app_title,
            **kwargs,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
            "HTTP-Referer": self.referer,
            "X-Title": self.title,
        }

    def build_payload(self, prompt: str) -> dict:
        return {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }

    async def _post(self, payload: dict) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            return await asyncio.wait_for(
                client.post(self.url, headers=self._headers(), json=payload),
                timeout=self.timeout,
            )

    async def analyze(self, request: AnalysisRequest) -> AnalysisOutcome:
        """Run one completion call for ``request`` and shape the reply."""
        if not self.is_configured:
            logger.error("Completion API key is not configured")
            raise ConfigurationError()

        prompt = prompt_builder.build_analysis_prompt(request)
        payload = self.build_payload(prompt)

        try:
            response = await self._post(payload)
        except (asyncio.TimeoutError, httpx.TimeoutException):
            logger.warning("Completion call exceeded %.1fs, aborted", self.timeout)
            raise UpstreamTimeout()
        except httpx.RequestError as e:
            logger.error("Completion service unreachable: %s", e)
            raise UpstreamError(UpstreamFailure.UNAVAILABLE, details=str(e))

        if not response.is_success:
            failure = classify_status(response.status_code)
            logger.error(
                "Completion service returned %s (%s)", response.status_code, failure.value
            )
            raise UpstreamError(failure, response.status_code, details=response.text)

        try:
            data = response.json()
        except ValueError:
            logger.error("Completion service returned a non-JSON body")
            raise EmptyUpstreamResponse()

        content = extract_content(data)
        if content is None:
            logger.error("Completion service returned no message content")
            raise EmptyUpstreamResponse()

        result = response_parser.parse_analysis(content)
        if result is None:
            logger.warning(
                "Unparseable model reply, returning fallback result: %.200s", content
            )
            return AnalysisOutcome(FALLBACK_RESULT, degraded=True)

        return AnalysisOutcome(result)
