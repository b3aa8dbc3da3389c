"""Anthropic Messages API provider.

Every call runs under the LLM retry, circuit breaker and timeout policies
from ``core.resilience``; SDK errors are mapped to their transient or
permanent counterparts before those policies see them.
"""

from typing import Any

from anthropic import AsyncAnthropic

from generative_pages.config.settings import Settings
from generative_pages.core.resilience import (
    llm_retry,
    llm_circuit_breaker,
    llm_timeout,
    wrap_anthropic_errors,
)
from generative_pages.utils.providers.base import LLMResponse
from generative_pages.utils.logging import get_logger


logger = get_logger(__name__)


class AnthropicProvider:
    """
    Claude completions addressed by tier.

    Stages ask for "haiku" (intent, entities, safety) or "sonnet" (page
    copy); ``tiers`` maps those names to model ids. Any other name is
    sent through unchanged.
    """

    name = "anthropic"

    def __init__(self, api_key: str, tiers: dict[str, str]):
        self._client = AsyncAnthropic(api_key=api_key)
        self.tiers = dict(tiers)

    @classmethod
    def from_settings(cls, settings: Settings) -> "AnthropicProvider":
        if not settings.anthropic_api_key:
            raise ValueError("ANTHROPIC_API_KEY is required for page generation")
        return cls(
            api_key=settings.anthropic_api_key,
            tiers={"haiku": settings.fast_model, "sonnet": settings.content_model},
        )

    def resolve_model(self, tier: str) -> str:
        return self.tiers.get(tier, tier)

    @llm_retry
    @llm_circuit_breaker
    @llm_timeout
    @wrap_anthropic_errors
    async def complete(
        self,
        prompt: str,
        system: str = "",
        model: str = "sonnet",
        max_tokens: int = 4096,
        temperature: float = 0.0,
    ) -> LLMResponse:
        model_id = self.resolve_model(model)
        params: dict[str, Any] = {
            "model": model_id,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            params["system"] = system

        message = await self._client.messages.create(**params)
        text = "".join(part.text for part in message.content if part.type == "text")

        logger.debug(
            "Completion received",
            model=model_id,
            input_tokens=message.usage.input_tokens,
            output_tokens=message.usage.output_tokens,
            stop_reason=message.stop_reason,
        )
        return LLMResponse(
            content=text,
            model=model_id,
            input_tokens=message.usage.input_tokens,
            output_tokens=message.usage.output_tokens,
            stop_reason=message.stop_reason or "",
            provider=self.name,
        )

    async def close(self) -> None:
        await self._client.close()
