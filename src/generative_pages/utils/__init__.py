"""Utility modules."""

from generative_pages.utils.logging import get_logger, configure_logging
from generative_pages.utils.llm import LLMClient, LLMResponse
from generative_pages.utils.structured_llm import StructuredLLMCaller, StructuredOutputError

__all__ = [
    "get_logger",
    "configure_logging",
    "LLMClient",
    "LLMResponse",
    "StructuredLLMCaller",
    "StructuredOutputError",
]
