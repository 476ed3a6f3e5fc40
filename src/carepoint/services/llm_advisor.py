"""LLM-backed health advice via the OpenAI chat completions API.

Learn: Same interface as RuleBasedAdvisor (async advise(symptoms)), so
the API layer doesn't care which backend is configured. The model is
asked for a JSON object with advice / severity / seekMedicalAttention.

Rate limiting (HTTP 429) is retried with exponential backoff, three
attempts total. Every other failure — and a 429 that outlasts the
retries — surfaces as AdviceUnavailableError.
"""

import json
from typing import Optional

import structlog
from openai import AsyncOpenAI, RateLimitError
from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from carepoint.config import Settings
from carepoint.services.health_advisor import HealthAdvice, RuleBasedAdvisor

logger = structlog.get_logger()

SYSTEM_PROMPT = (
    "You are a helpful medical AI assistant. Provide general health advice based "
    "on symptoms. Always encourage users to seek professional medical help for "
    "serious concerns. Format response as JSON with fields: advice (string), "
    "severity (low/medium/high), seekMedicalAttention (boolean)."
)

_SEVERITIES = ("low", "medium", "high")


class AdviceUnavailableError(Exception):
    """Raised when the advice backend cannot produce an answer."""


class LLMHealthAdvisor:
    def __init__(
        self,
        client: AsyncOpenAI,
        model: str = "gpt-4o",
        max_attempts: int = 3,
        wait=None,
    ):
        self.client = client
        self.model = model
        self.max_attempts = max_attempts
        self.wait = wait or wait_exponential(multiplier=1, min=1, max=8)

    async def advise(self, symptoms: str) -> HealthAdvice:
        try:
            content = await self._complete_with_retry(symptoms)
            return _parse_advice(content)
        except AdviceUnavailableError:
            logger.warning("advice.llm_rate_limited", model=self.model)
            raise
        except Exception as e:
            logger.warning("advice.llm_failed", model=self.model, error=str(e))
            raise AdviceUnavailableError(f"Failed to get health advice: {e}") from e

    async def _complete_with_retry(self, symptoms: str) -> str:
        try:
            async for attempt in AsyncRetrying(
                retry=retry_if_exception_type(RateLimitError),
                stop=stop_after_attempt(self.max_attempts),
                wait=self.wait,
            ):
                with attempt:
                    return await self._complete(symptoms)
        except RetryError as e:
            raise AdviceUnavailableError(
                "Rate limit exceeded. Please try again in a few minutes."
            ) from e

    async def _complete(self, symptoms: str) -> str:
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": f"What advice can you give for these symptoms: {symptoms}",
                },
            ],
            response_format={"type": "json_object"},
        )
        content = response.choices[0].message.content
        if not content:
            raise ValueError("No response received from OpenAI")
        return content


def _parse_advice(content: str) -> HealthAdvice:
    data = json.loads(content)
    severity = data.get("severity")
    if severity not in _SEVERITIES:
        raise ValueError(f"Unexpected severity: {severity!r}")
    return HealthAdvice(
        advice=str(data["advice"]),
        severity=severity,
        seek_medical_attention=bool(data.get("seekMedicalAttention", False)),
    )


def build_advisor(settings: Settings, client: Optional[AsyncOpenAI] = None):
    """Pick the advice backend from configuration."""
    if settings.advisor_backend == "openai":
        return LLMHealthAdvisor(
            client=client or AsyncOpenAI(api_key=settings.openai_api_key or None),
            model=settings.openai_model,
        )
    return RuleBasedAdvisor()
