"""Completion result shared by the Anthropic provider and its callers."""

from dataclasses import dataclass


@dataclass
class LLMResponse:
    """Text of one completion and the tokens it used."""

    content: str
    model: str
    input_tokens: int = 0
    output_tokens: int = 0
    stop_reason: str = ""
    provider: str = "anthropic"
