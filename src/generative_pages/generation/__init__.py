"""Text generation stages: intent, content, fallback pages."""

from generative_pages.generation.intent import IntentClassifier
from generative_pages.generation.content import ContentGenerator, build_content_prompt
from generative_pages.generation.fallback import (
    get_fallback_content,
    get_fallback_layout,
    is_fallback_content,
)

__all__ = [
    "IntentClassifier",
    "ContentGenerator",
    "build_content_prompt",
    "get_fallback_content",
    "get_fallback_layout",
    "is_fallback_content",
]
