"""Retrieval plan and context models."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


RetrievalStrategy = Literal["semantic", "catalog", "filtered", "comprehensive", "ingredient"]
DedupeMode = Literal["similarity", "by-key", "by-source"]


class RetrievalFilters(BaseModel):
    """Category hints carried by a plan.

    These are folded into the semantic query text rather than sent to the
    vector index as metadata filters.
    """

    model_config = ConfigDict(frozen=True)

    content_types: list[str] = Field(default_factory=list)
    product_category: str | None = None
    recipe_category: str | None = None


class RetrievalPlan(BaseModel):
    """How to search for evidence for one query."""

    model_config = ConfigDict(frozen=True)

    strategy: RetrievalStrategy
    semantic_query: str
    top_k: int = Field(gt=0)
    relevance_threshold: float = Field(ge=0.0, le=1.0)
    filters: RetrievalFilters = Field(default_factory=RetrievalFilters)
    dedupe_mode: DedupeMode
    max_results: int = Field(gt=0)
    boost_terms: list[str] = Field(default_factory=list)
    reasoning: str = ""


class ChunkMetadata(BaseModel):
    """Metadata attached to an indexed chunk."""

    content_type: str = "editorial"
    source_url: str = ""
    title: str = ""
    product_key: str | None = None
    image_url: str | None = None


class ContextChunk(BaseModel):
    """A scored search hit.

    ``score`` starts as the index similarity in [0, 1]; ingredient boosting
    may lift it above 1 for ranking purposes.
    """

    id: str
    score: float = Field(ge=0.0)
    text: str = ""
    metadata: ChunkMetadata = Field(default_factory=ChunkMetadata)


class AssembledContext(BaseModel):
    """Deduplicated, ranked evidence for content generation."""

    chunks: list[ContextChunk] = Field(default_factory=list)
    strategy: RetrievalStrategy | None = None

    @property
    def total_relevance(self) -> float:
        if not self.chunks:
            return 0.0
        return sum(chunk.score for chunk in self.chunks) / len(self.chunks)

    @property
    def has_product_info(self) -> bool:
        return any(c.metadata.content_type == "product" for c in self.chunks)

    @property
    def has_recipes(self) -> bool:
        return any(c.metadata.content_type == "recipe" for c in self.chunks)

    @property
    def source_urls(self) -> list[str]:
        return list(dict.fromkeys(c.metadata.source_url for c in self.chunks))

    def count_by_type(self, content_type: str) -> int:
        return sum(1 for c in self.chunks if c.metadata.content_type == content_type)

    def find_existing_images(self, product_key: str | None = None) -> list[str]:
        """Image URLs found in the evidence, optionally for one product."""
        urls = []
        for chunk in self.chunks:
            if not chunk.metadata.image_url:
                continue
            if product_key and (chunk.metadata.product_key or "").lower() != product_key.lower():
                continue
            urls.append(chunk.metadata.image_url)
        return urls
