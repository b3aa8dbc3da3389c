"""Fake collaborators and content factories shared by the tests."""

import asyncio
from typing import Any

from generative_pages.data.content import GeneratedContent
from generative_pages.data.intent import Entities, IntentClassification
from generative_pages.data.retrieval import ChunkMetadata, ContextChunk
from generative_pages.data.safety import BrandComplianceResult, ToxicityResult
from generative_pages.events.models import Event
from generative_pages.generation.content import ContentGenerator
from generative_pages.generation.intent import IntentClassifier
from generative_pages.graph.state import PipelineServices
from generative_pages.images.generator import ImageGenerator
from generative_pages.images.providers.base import ImageAsset, ImageProvider
from generative_pages.images.storage.base import ImageStorage
from generative_pages.publishing.cms import PublishResult, PublishUrls
from generative_pages.retrieval.index import Embedder, VectorIndex
from generative_pages.retrieval.retriever import ContextRetriever
from generative_pages.safety.gate import ContentSafetyGate
from generative_pages.utils.providers.base import LLMResponse
from generative_pages.utils.structured_llm import StructuredOutputError


# =============================================================================
# FAKE COLLABORATORS
# =============================================================================


class ScriptedCaller:
    """Stands in for StructuredLLMCaller, answering by response model."""

    def __init__(
        self,
        responses: dict[type, Any] | None = None,
        delays: dict[type, float] | None = None,
    ):
        self.responses = dict(responses or {})
        self.delays = dict(delays or {})
        self.calls: list[tuple[type, str]] = []

    async def call(self, prompt: str, response_model: type, **kwargs: Any) -> Any:
        self.calls.append((response_model, prompt))
        if response_model in self.delays:
            await asyncio.sleep(self.delays[response_model])
        value = self.responses.get(response_model)
        if isinstance(value, Exception):
            raise value
        if value is None:
            raise StructuredOutputError("No scripted response", attempts=[])
        return value


class FakeLLMClient:
    """Returns canned completions in order."""

    def __init__(self, outputs: list[str]):
        self.outputs = list(outputs)
        self.prompts: list[str] = []

    async def complete(
        self,
        prompt: str,
        system: str = "",
        model: str = "sonnet",
        max_tokens: int = 4096,
        temperature: float = 0.0,
    ) -> LLMResponse:
        self.prompts.append(prompt)
        return LLMResponse(
            content=self.outputs.pop(0),
            model=model,
            input_tokens=10,
            output_tokens=20,
            stop_reason="end_turn",
            provider="fake",
        )


class FakeEmbedder(Embedder):
    def __init__(self, error: Exception | None = None):
        self.error = error
        self.texts: list[str] = []

    async def embed(self, text: str) -> list[float]:
        self.texts.append(text)
        if self.error:
            raise self.error
        return [0.1, 0.2, 0.3]


class FakeIndex(VectorIndex):
    def __init__(self, chunks: list[ContextChunk] | None = None):
        self.chunks = list(chunks or [])
        self.top_k: int | None = None

    async def search(self, vector, top_k, filter=None) -> list[ContextChunk]:
        self.top_k = top_k
        return self.chunks[:top_k]


class FakeImageProvider(ImageProvider):
    """
    Fails for any prompt containing one of ``fail_on``.

    Each call sleeps ``delay`` seconds. ``waves`` counts the calls started
    while others were still in flight, so sequential batches show up as
    separate entries.
    """

    name = "fake"

    def __init__(
        self,
        batch_size: int = 5,
        fail_on: tuple[str, ...] = (),
        delay: float = 0.0,
    ):
        self.batch_size = batch_size
        self.fail_on = fail_on
        self.delay = delay
        self.prompts: list[str] = []
        self.in_flight = 0
        self.peak_in_flight = 0
        self.waves: list[int] = []

    async def generate(self, prompt: str, size: str) -> ImageAsset:
        self.prompts.append(prompt)
        if self.in_flight == 0:
            self.waves.append(0)
        self.waves[-1] += 1
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            if any(marker in prompt for marker in self.fail_on):
                raise RuntimeError(f"provider rejected prompt: {prompt}")
            return ImageAsset(data=b"\x89PNG", content_type="image/png")
        finally:
            self.in_flight -= 1


class MemoryImageStorage(ImageStorage):
    def __init__(self):
        self.saved: dict[str, bytes] = {}

    async def save(self, slug: str, image_id: str, data: bytes, extension: str = "png") -> str:
        url = f"/images/{slug}/{image_id}.{extension}"
        self.saved[url] = data
        return url

    async def exists(self, slug: str, image_id: str, extension: str = "png") -> bool:
        return f"/images/{slug}/{image_id}.{extension}" in self.saved


class FakePublisher:
    def __init__(self, success: bool = True):
        self.success = success
        self.published: list[tuple[str, str]] = []

    async def publish(self, path: str, html: str, media=None) -> PublishResult:
        self.published.append((path, html))
        if not self.success:
            return PublishResult(success=False, error="DA unavailable")
        return PublishResult(
            success=True,
            urls=PublishUrls(
                preview=f"https://main--site--org.aem.page{path}",
                live=f"https://main--site--org.aem.live{path}",
            ),
        )

    async def close(self) -> None:
        pass


# =============================================================================
# FACTORIES
# =============================================================================


def make_chunk(
    chunk_id: str,
    score: float,
    text: str = "",
    content_type: str = "recipe",
    source_url: str | None = None,
    product_key: str | None = None,
    image_url: str | None = None,
) -> ContextChunk:
    return ContextChunk(
        id=chunk_id,
        score=score,
        text=text or f"text for {chunk_id}",
        metadata=ChunkMetadata(
            content_type=content_type,
            source_url=source_url or f"https://www.vitamix.com/{chunk_id}",
            title=chunk_id.replace("-", " ").title(),
            product_key=product_key,
            image_url=image_url,
        ),
    )


def recipe_intent() -> IntentClassification:
    return IntentClassification(
        intent_type="recipe",
        confidence=0.9,
        layout_id="recipe-collection",
        content_types=["recipe"],
        entities=Entities(ingredients=["banana"], goals=["energy"]),
    )


def recipe_content() -> GeneratedContent:
    """Content matching the recipe-collection layout: hero, cards, split-content, cta."""
    return GeneratedContent.model_validate(
        {
            "headline": "Banana Smoothies for Busy Mornings",
            "subheadline": "Creamy blends ready in minutes",
            "blocks": [
                {
                    "type": "hero",
                    "content": {
                        "headline": "Banana Smoothies for Busy Mornings",
                        "subheadline": "Creamy blends ready in minutes",
                        "ctaText": "See Recipes",
                        "ctaUrl": "/recipes",
                        "imagePrompt": "banana smoothie on a sunny kitchen counter",
                    },
                },
                {
                    "type": "cards",
                    "content": {
                        "cards": [
                            {
                                "title": "Peanut Butter Banana",
                                "description": "Protein-rich and filling.",
                                "imagePrompt": "peanut butter banana smoothie in a glass",
                            },
                            {
                                "title": "Tropical Banana",
                                "description": "Mango, pineapple and banana.",
                                "imagePrompt": "tropical banana smoothie with mango slices",
                            },
                        ]
                    },
                },
                {
                    "type": "split-content",
                    "content": {
                        "eyebrow": "TECHNIQUE",
                        "headline": "Freeze Your Bananas",
                        "body": "Frozen bananas give every blend a thick, creamy texture.",
                        "primaryCtaText": "Explore Frozen Treats",
                        "primaryCtaUrl": "/discover/frozen-treats",
                        "imagePrompt": "sliced bananas on a tray ready for the freezer",
                    },
                },
                {
                    "type": "cta",
                    "content": {
                        "headline": "Find Your Blender",
                        "text": "Every recipe starts with the right container.",
                        "buttonText": "Shop Blenders",
                        "buttonUrl": "/products/blenders",
                    },
                },
            ],
            "meta": {
                "title": "Banana Smoothies",
                "description": "Banana smoothie recipes for busy mornings.",
            },
        }
    )


def recipe_chunks() -> list[ContextChunk]:
    return [
        make_chunk("banana-smoothie", 0.82, "Blend banana with oat milk and ice."),
        make_chunk("tropical-blend", 0.74, "Mango, pineapple and banana smoothie."),
        make_chunk("green-smoothie", 0.4, "Spinach and kale green smoothie."),
    ]


def safe_responses() -> dict[type, Any]:
    return {
        ToxicityResult: ToxicityResult(safe=True, toxicity_score=0.0),
        BrandComplianceResult: BrandComplianceResult(is_compliant=True, score=90),
    }


def build_services(
    caller: ScriptedCaller,
    chunks: list[ContextChunk] | None = None,
    embedder: FakeEmbedder | None = None,
    provider: FakeImageProvider | None = None,
    publisher: FakePublisher | None = None,
) -> PipelineServices:
    return PipelineServices(
        classifier=IntentClassifier(caller),
        retriever=ContextRetriever(embedder or FakeEmbedder(), FakeIndex(chunks)),
        content_generator=ContentGenerator(caller),
        image_generator=ImageGenerator(provider or FakeImageProvider(), MemoryImageStorage()),
        safety_gate=ContentSafetyGate(caller),
        publisher=publisher,
    )


def drain(queue: asyncio.Queue[Event]) -> list[Event]:
    events = []
    while not queue.empty():
        events.append(queue.get_nowait())
    return events

