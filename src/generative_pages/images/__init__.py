"""Image planning, generation and fallback."""

from generative_pages.images.fallback import apply_fallback_strategy, consistent_fallback
from generative_pages.images.generator import ImageGenerator
from generative_pages.images.prompts import build_image_prompt
from generative_pages.images.requests import build_image_requests, decide_image_strategy

__all__ = [
    "ImageGenerator",
    "apply_fallback_strategy",
    "consistent_fallback",
    "build_image_prompt",
    "build_image_requests",
    "decide_image_strategy",
]
