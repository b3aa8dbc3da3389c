"""Text completion backend (Anthropic Messages API)."""

from generative_pages.utils.providers.anthropic import AnthropicProvider
from generative_pages.utils.providers.base import LLMResponse


__all__ = [
    "AnthropicProvider",
    "LLMResponse",
]
