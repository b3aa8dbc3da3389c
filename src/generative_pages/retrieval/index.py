"""Embedding and vector index collaborators.

Resilience patterns applied:
- Retry with exponential backoff for transient failures
- Circuit breaker shared by both retrieval calls
"""

from abc import ABC, abstractmethod
from typing import Any

import httpx
from openai import AsyncOpenAI

from generative_pages.core.resilience import (
    retrieval_retry,
    retrieval_circuit_breaker,
    wrap_httpx_errors,
    wrap_openai_errors,
)
from generative_pages.data.retrieval import ChunkMetadata, ContextChunk
from generative_pages.utils.logging import get_logger


logger = get_logger(__name__)


class Embedder(ABC):
    """Turns text into a vector."""

    @abstractmethod
    async def embed(self, text: str) -> list[float]:
        ...

    async def close(self) -> None:
        pass


class VectorIndex(ABC):
    """Nearest-neighbour search over indexed content chunks."""

    @abstractmethod
    async def search(
        self,
        vector: list[float],
        top_k: int,
        filter: dict[str, Any] | None = None,
    ) -> list[ContextChunk]:
        """Return up to ``top_k`` chunks, best first."""
        ...

    async def close(self) -> None:
        pass


class OpenAIEmbedder(Embedder):
    """Embeddings via the OpenAI API (or a compatible gateway)."""

    def __init__(
        self,
        api_key: str,
        model: str = "text-embedding-3-small",
        base_url: str | None = None,
    ):
        self._client = AsyncOpenAI(api_key=api_key, base_url=base_url)
        self.model = model

    @retrieval_retry
    @retrieval_circuit_breaker
    @wrap_openai_errors
    async def embed(self, text: str) -> list[float]:
        response = await self._client.embeddings.create(model=self.model, input=[text])
        return list(response.data[0].embedding)

    async def close(self) -> None:
        await self._client.close()


class HttpVectorIndex(VectorIndex):
    """
    Vector index behind an HTTP query endpoint.

    POSTs ``{vector, topK, namespace, returnMetadata}`` to ``{base_url}/query``
    and expects ``{"matches": [{id, score, metadata}]}`` back.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        namespace: str = "",
        timeout: float = 15.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.namespace = namespace
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            headers = {"Content-Type": "application/json"}
            if self.api_key:
                headers["Authorization"] = f"Bearer {self.api_key}"
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=headers,
            )
        return self._client

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    @retrieval_retry
    @retrieval_circuit_breaker
    @wrap_httpx_errors
    async def search(
        self,
        vector: list[float],
        top_k: int,
        filter: dict[str, Any] | None = None,
    ) -> list[ContextChunk]:
        client = await self._get_client()
        payload: dict[str, Any] = {
            "vector": vector,
            "topK": top_k,
            "returnMetadata": "all",
        }
        if self.namespace:
            payload["namespace"] = self.namespace
        if filter:
            payload["filter"] = filter

        response = await client.post("/query", json=payload)
        response.raise_for_status()

        matches = response.json().get("matches", [])
        logger.debug("Vector index query", top_k=top_k, matches=len(matches))
        return [_to_chunk(match) for match in matches]


def _to_chunk(match: dict[str, Any]) -> ContextChunk:
    metadata = match.get("metadata") or {}
    return ContextChunk(
        id=str(match.get("id", "")),
        score=max(0.0, float(match.get("score", 0.0))),
        text=metadata.get("chunk_text") or "",
        metadata=ChunkMetadata(
            content_type=metadata.get("content_type") or "editorial",
            source_url=metadata.get("source_url") or "",
            title=metadata.get("page_title") or "",
            product_key=metadata.get("product_sku"),
            image_url=metadata.get("image_url"),
        ),
    )
