"""Retrieval planning and context assembly."""

from generative_pages.retrieval.planner import plan_retrieval, extract_ingredients
from generative_pages.retrieval.index import (
    Embedder,
    HttpVectorIndex,
    OpenAIEmbedder,
    VectorIndex,
)
from generative_pages.retrieval.retriever import ContextRetriever

__all__ = [
    "plan_retrieval",
    "extract_ingredients",
    "Embedder",
    "HttpVectorIndex",
    "OpenAIEmbedder",
    "VectorIndex",
    "ContextRetriever",
]
