"""Core domain modules."""

from generative_pages.core.exceptions import (
    PageGenerationError,
    ClassificationError,
    RetrievalError,
    ContentGenerationError,
    ImageGenerationError,
    CMSError,
    PersistenceError,
    GenerationInProgressError,
)
from generative_pages.core.generation_cache import GenerationCache, GenerationEntry

__all__ = [
    # Exceptions
    "PageGenerationError",
    "ClassificationError",
    "RetrievalError",
    "ContentGenerationError",
    "ImageGenerationError",
    "CMSError",
    "PersistenceError",
    "GenerationInProgressError",
    # Cache
    "GenerationCache",
    "GenerationEntry",
]
