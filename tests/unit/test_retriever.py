"""Tests for context retrieval."""

import pytest

from generative_pages.core.exceptions import RetrievalError
from generative_pages.data.retrieval import RetrievalPlan
from generative_pages.retrieval.retriever import (
    ContextRetriever,
    boost_by_terms,
    deduplicate,
    text_similarity,
)

from tests.fakes import FakeEmbedder, FakeIndex, make_chunk


def plan(**overrides) -> RetrievalPlan:
    values = dict(
        strategy="semantic",
        semantic_query="green smoothie",
        top_k=10,
        relevance_threshold=0.5,
        dedupe_mode="similarity",
        max_results=5,
    )
    values.update(overrides)
    return RetrievalPlan(**values)


class TestContextRetriever:
    """Threshold, boost, dedupe and truncate."""

    @pytest.mark.asyncio
    async def test_threshold_and_truncate(self):
        chunks = [make_chunk(f"c{i}", 0.9 - i * 0.1, text=f"unique words {i} " * (i + 1)) for i in range(6)]
        index = FakeIndex(chunks)
        retriever = ContextRetriever(FakeEmbedder(), index)

        context = await retriever.retrieve(plan(relevance_threshold=0.55, max_results=3))

        assert index.top_k == 10
        assert [c.id for c in context.chunks] == ["c0", "c1", "c2"]
        assert all(c.score >= 0.55 for c in context.chunks)
        assert context.strategy == "semantic"

    @pytest.mark.asyncio
    async def test_empty_result_is_not_an_error(self):
        retriever = ContextRetriever(FakeEmbedder(), FakeIndex([]))
        context = await retriever.retrieve(plan())
        assert context.chunks == []
        assert context.total_relevance == 0.0

    @pytest.mark.asyncio
    async def test_embedding_failure_raises_retrieval_error(self):
        retriever = ContextRetriever(FakeEmbedder(error=RuntimeError("boom")), FakeIndex())
        with pytest.raises(RetrievalError) as exc_info:
            await retriever.retrieve(plan(strategy="filtered"))
        assert exc_info.value.strategy == "filtered"
        assert exc_info.value.code == "RETRIEVAL_FAILED"

    @pytest.mark.asyncio
    async def test_by_key_keeps_one_chunk_per_product(self):
        chunks = [
            make_chunk("a3500-specs", 0.9, content_type="product", product_key="a3500"),
            make_chunk("a3500-faq", 0.8, content_type="product", product_key="a3500"),
            make_chunk("a2500-specs", 0.7, content_type="product", product_key="a2500"),
        ]
        retriever = ContextRetriever(FakeEmbedder(), FakeIndex(chunks))

        context = await retriever.retrieve(plan(strategy="comprehensive", dedupe_mode="by-key"))

        keys = [c.metadata.product_key for c in context.chunks]
        assert keys == ["a3500", "a2500"]
        assert context.chunks[0].id == "a3500-specs"


class TestBoostByTerms:
    def test_boost_is_monotonic_and_capped(self):
        chunks = [
            make_chunk("none", 0.8, text="plain oat porridge"),
            make_chunk("one", 0.7, text="banana bread"),
            make_chunk("many", 0.6, text="banana kale mango spinach ginger smoothie"),
        ]
        boosted = {c.id: c.score for c in boost_by_terms(chunks, ["banana", "kale", "mango", "spinach", "ginger"])}

        assert boosted["none"] == pytest.approx(0.8)
        assert boosted["one"] == pytest.approx(0.7 * 1.15)
        assert boosted["many"] == pytest.approx(0.6 * 1.6)

    def test_boost_never_lowers_a_score(self):
        chunks = [make_chunk(f"c{i}", 0.5 + i * 0.1, text="banana") for i in range(3)]
        for before, after in zip(
            sorted(chunks, key=lambda c: c.id),
            sorted(boost_by_terms(chunks, ["banana"]), key=lambda c: c.id),
        ):
            assert after.score >= before.score

    def test_result_sorted_by_score(self):
        chunks = [
            make_chunk("low", 0.6, text="kale mango banana"),
            make_chunk("high", 0.7, text="nothing relevant"),
        ]
        assert [c.id for c in boost_by_terms(chunks, ["kale", "mango", "banana"])] == ["low", "high"]


class TestDeduplicate:
    def test_by_source_keeps_best_per_url(self):
        chunks = [
            make_chunk("a", 0.6, source_url="https://x/1"),
            make_chunk("b", 0.9, source_url="https://x/1"),
            make_chunk("c", 0.7, source_url="https://x/2"),
        ]
        result = deduplicate(chunks, "by-source")
        assert [c.id for c in result] == ["b", "c"]

    def test_by_key_falls_back_to_source_url(self):
        chunks = [
            make_chunk("a", 0.6, source_url="https://x/1"),
            make_chunk("b", 0.8, source_url="https://x/1"),
        ]
        assert [c.id for c in deduplicate(chunks, "by-key")] == ["b"]

    def test_similarity_drops_near_duplicates(self):
        chunks = [
            make_chunk("a", 0.9, text="blend spinach banana and almond milk until smooth"),
            make_chunk("b", 0.8, text="blend spinach banana and almond milk until smooth today"),
            make_chunk("c", 0.7, text="tomato soup heated by blade friction"),
        ]
        assert [c.id for c in deduplicate(chunks, "similarity")] == ["a", "c"]

    def test_similarity_penalizes_same_source(self):
        chunks = [
            make_chunk("a", 0.9, text="first part of the article", source_url="https://x/1"),
            make_chunk("b", 0.8, text="completely different second section", source_url="https://x/1"),
        ]
        result = deduplicate(chunks, "similarity")
        assert result[1].id == "b"
        assert result[1].score == pytest.approx(0.72)

    def test_text_similarity(self):
        assert text_similarity("a b c", "a b c") == 1.0
        assert text_similarity("a b", "c d") == 0.0
        assert text_similarity("A b", "a B c d") == pytest.approx(0.5)
