"""Context retriever.

Executes a RetrievalPlan: embed, search, threshold, boost, dedupe, truncate.
"""

import re

from generative_pages.core.exceptions import RetrievalError
from generative_pages.data.retrieval import (
    AssembledContext,
    ContextChunk,
    DedupeMode,
    RetrievalPlan,
)
from generative_pages.retrieval.index import Embedder, VectorIndex
from generative_pages.utils.logging import get_logger


logger = get_logger(__name__)


BOOST_PER_TERM = 0.15
MAX_BOOST = 0.6
SIMILARITY_DUPLICATE_THRESHOLD = 0.8
SAME_SOURCE_PENALTY = 0.1

_WHITESPACE = re.compile(r"\s+")


class ContextRetriever:
    """
    Retrieves deduplicated evidence for a plan.

    Embedding and index errors are raised as RetrievalError; an empty result
    is not an error.
    """

    def __init__(self, embedder: Embedder, index: VectorIndex):
        self.embedder = embedder
        self.index = index

    async def retrieve(self, plan: RetrievalPlan) -> AssembledContext:
        try:
            vector = await self.embedder.embed(plan.semantic_query)
            raw = await self.index.search(vector, top_k=plan.top_k)
        except RetrievalError:
            raise
        except Exception as e:
            logger.error(
                "Retrieval failed",
                strategy=plan.strategy,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise RetrievalError(
                f"Retrieval failed: {e}", strategy=plan.strategy
            ) from e

        chunks = [chunk for chunk in raw if chunk.score >= plan.relevance_threshold]
        after_threshold = len(chunks)

        if plan.boost_terms:
            chunks = boost_by_terms(chunks, plan.boost_terms)

        chunks = deduplicate(chunks, plan.dedupe_mode)
        after_dedupe = len(chunks)

        chunks = chunks[: plan.max_results]

        logger.info(
            "Retrieval complete",
            strategy=plan.strategy,
            raw=len(raw),
            after_threshold=after_threshold,
            after_dedupe=after_dedupe,
            final=len(chunks),
        )
        return AssembledContext(chunks=chunks, strategy=plan.strategy)


# =============================================================================
# SCORING
# =============================================================================


def boost_by_terms(chunks: list[ContextChunk], terms: list[str]) -> list[ContextChunk]:
    """Multiply each score by ``1 + min(matches * 0.15, 0.6)`` and re-sort."""
    lowered = [term.lower() for term in terms]
    boosted = []
    for chunk in chunks:
        text = chunk.text.lower()
        match_count = sum(1 for term in lowered if term in text)
        boost = 1 + min(match_count * BOOST_PER_TERM, MAX_BOOST)
        boosted.append(chunk.model_copy(update={"score": chunk.score * boost}))
    return sorted(boosted, key=lambda c: c.score, reverse=True)


def text_similarity(text1: str, text2: str) -> float:
    """Jaccard similarity of lowercase whitespace-split token sets."""
    words1 = set(_WHITESPACE.split(text1.lower().strip()))
    words2 = set(_WHITESPACE.split(text2.lower().strip()))
    union = words1 | words2
    if not union:
        return 0.0
    return len(words1 & words2) / len(union)


# =============================================================================
# DEDUPLICATION
# =============================================================================


def deduplicate(chunks: list[ContextChunk], mode: DedupeMode) -> list[ContextChunk]:
    """Collapse duplicates under ``mode``; result is sorted by score, best first."""
    if mode == "by-key":
        # Falls back to source URL when the chunk has no product key.
        return _keep_best_per_key(
            chunks, lambda c: c.metadata.product_key or c.metadata.source_url
        )
    if mode == "by-source":
        return _keep_best_per_key(chunks, lambda c: c.metadata.source_url)
    return _dedupe_by_similarity(chunks)


def _keep_best_per_key(chunks, key_fn) -> list[ContextChunk]:
    best: dict[str, ContextChunk] = {}
    for chunk in chunks:
        key = key_fn(chunk)
        if key not in best or chunk.score > best[key].score:
            best[key] = chunk
    return sorted(best.values(), key=lambda c: c.score, reverse=True)


def _dedupe_by_similarity(chunks: list[ContextChunk]) -> list[ContextChunk]:
    ordered = sorted(chunks, key=lambda c: c.score, reverse=True)
    selected: list[ContextChunk] = []

    for chunk in ordered:
        if any(
            text_similarity(chunk.text, kept.text) > SIMILARITY_DUPLICATE_THRESHOLD
            for kept in selected
        ):
            continue
        if any(
            chunk.metadata.source_url == kept.metadata.source_url for kept in selected
        ):
            chunk = chunk.model_copy(
                update={"score": chunk.score * (1 - SAME_SOURCE_PENALTY)}
            )
        selected.append(chunk)

    return sorted(selected, key=lambda c: c.score, reverse=True)
