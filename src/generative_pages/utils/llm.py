"""Completion client shared by the classifier, content generator and safety gate."""

from dataclasses import dataclass

from generative_pages.config.settings import Settings, get_settings
from generative_pages.utils.logging import get_logger
from generative_pages.utils.providers import AnthropicProvider, LLMResponse


logger = get_logger(__name__)


__all__ = ["LLMClient", "LLMResponse", "TierUsage"]


@dataclass
class TierUsage:
    calls: int = 0
    input_tokens: int = 0
    output_tokens: int = 0


class LLMClient:
    """
    Front for the Anthropic provider that totals token usage per tier.

    Built from settings unless a provider is passed in. The totals are
    logged when the client is closed at shutdown.
    """

    def __init__(
        self,
        provider: AnthropicProvider | None = None,
        settings: Settings | None = None,
    ):
        self._provider = provider or AnthropicProvider.from_settings(settings or get_settings())
        self.usage: dict[str, TierUsage] = {}
        logger.info("LLM client ready", tiers=self._provider.tiers)

    async def complete(
        self,
        prompt: str,
        system: str = "",
        model: str = "sonnet",
        max_tokens: int = 4096,
        temperature: float = 0.0,
    ) -> LLMResponse:
        """Run one completion on the tier named by ``model``."""
        response = await self._provider.complete(
            prompt=prompt,
            system=system,
            model=model,
            max_tokens=max_tokens,
            temperature=temperature,
        )
        tier = self.usage.setdefault(model, TierUsage())
        tier.calls += 1
        tier.input_tokens += response.input_tokens
        tier.output_tokens += response.output_tokens
        return response

    async def close(self) -> None:
        logger.info(
            "LLM usage",
            **{name: vars(totals) for name, totals in self.usage.items()},
        )
        await self._provider.close()
