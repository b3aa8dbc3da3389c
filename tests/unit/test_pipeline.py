"""End-to-end pipeline runs against fake collaborators."""

import pytest

from generative_pages.data.content import GeneratedContent
from generative_pages.data.safety import BrandComplianceResult
from generative_pages.events.emitter import EventEmitter
from generative_pages.events.types import EventType
from generative_pages.generation.fallback import is_fallback_content
from generative_pages.graph.pipeline import PagePipeline, discover_path
from generative_pages.publishing.cms import PersistedBlock

from tests.fakes import (
    FakeEmbedder,
    FakeImageProvider,
    FakePublisher,
    build_services,
    drain,
    recipe_chunks,
    recipe_content,
)


def types_of(events) -> list[str]:
    return [event.event_type.value for event in events]


class TestPipelineRun:
    @pytest.mark.asyncio
    async def test_event_order(self, recipe_pipeline):
        """Layout first, then one triple per block with its placeholders, then images."""
        emitter = EventEmitter()
        state = await recipe_pipeline.run("banana smoothie", "banana-smoothie", emitter)
        events = drain(emitter.queue)

        assert types_of(events) == [
            "layout",
            "block-start", "block-content", "block-complete", "image-placeholder",
            "block-start", "block-content", "block-complete", "image-placeholder", "image-placeholder",
            "block-start", "block-content", "block-complete", "image-placeholder",
            "block-start", "block-content", "block-complete",
            "image-ready", "image-ready", "image-ready", "image-ready",
            "generation-complete",
        ]
        assert [e.id for e in events] == list(range(1, len(events) + 1))
        assert events[0].data == {
            "layoutId": "recipe-collection",
            "blockTypes": ["hero", "cards", "split-content", "cta"],
        }

        ready = {e.data["imageId"]: e.data["url"] for e in events if e.event_type == EventType.IMAGE_READY}
        assert ready == {
            "hero": "/images/banana-smoothie/hero.png",
            "card-1-0": "/images/banana-smoothie/card-1-0.png",
            "card-1-1": "/images/banana-smoothie/card-1-1.png",
            "split-2": "/images/banana-smoothie/split-2.png",
        }
        assert events[-1].data == {"pageUrl": discover_path("banana-smoothie")}
        assert state["page_url"] == "/discover/banana-smoothie"
        assert not state.get("error")

    @pytest.mark.asyncio
    async def test_block_content_carries_section_style(self, recipe_pipeline):
        emitter = EventEmitter()
        await recipe_pipeline.run("banana smoothie", "banana-smoothie", emitter)
        content_events = [e for e in drain(emitter.queue) if e.event_type == EventType.BLOCK_CONTENT]

        assert content_events[0].data["html"].startswith('<div class="hero')
        assert content_events[2].data["sectionStyle"] == "dark"
        assert content_events[3].data["sectionStyle"] == "highlight"

    @pytest.mark.asyncio
    async def test_retrieval_failure_ends_stream(self, recipe_caller):
        services = build_services(recipe_caller, embedder=FakeEmbedder(error=ConnectionError("down")))
        emitter = EventEmitter()

        state = await PagePipeline(services).run("banana smoothie", "banana-smoothie", emitter)
        events = drain(emitter.queue)

        assert types_of(events) == ["error"]
        assert events[0].data["code"] == "RETRIEVAL_FAILED"
        assert state["error"]
        assert not emitter.first_block_sent

    @pytest.mark.asyncio
    async def test_content_not_matching_layout(self, recipe_caller):
        content = recipe_content()
        recipe_caller.responses[GeneratedContent] = content.model_copy(
            update={"blocks": content.blocks[:2]}
        )
        emitter = EventEmitter()

        await PagePipeline(build_services(recipe_caller, recipe_chunks())).run(
            "banana smoothie", "banana-smoothie", emitter
        )
        events = drain(emitter.queue)

        assert types_of(events) == ["layout", "error"]
        assert events[1].data["code"] == "GENERATION_FAILED"

    @pytest.mark.asyncio
    async def test_blocked_page_persists_fallback(self, recipe_caller):
        """Blocks already streamed stay; the persisted page is the fallback."""
        recipe_caller.responses[BrandComplianceResult] = BrandComplianceResult(
            is_compliant=False, score=30
        )
        publisher = FakePublisher()
        emitter = EventEmitter()

        state = await PagePipeline(
            build_services(recipe_caller, recipe_chunks(), publisher=publisher)
        ).run("banana smoothie", "banana-smoothie", emitter)
        events = drain(emitter.queue)

        assert state["used_fallback"]
        assert is_fallback_content(state["content"])
        assert state["safety"].blocked
        assert types_of(events).count("block-start") == 4
        assert events[-1].event_type == EventType.GENERATION_COMPLETE

        path, html = publisher.published[0]
        assert path == "/discover/banana-smoothie"
        assert "Peanut Butter Banana" not in html

    @pytest.mark.asyncio
    async def test_image_failures_use_fallback_images(self, recipe_caller):
        provider = FakeImageProvider(fail_on=("sunny kitchen",))
        emitter = EventEmitter()

        state = await PagePipeline(
            build_services(recipe_caller, recipe_chunks(), provider=provider)
        ).run("banana smoothie", "banana-smoothie", emitter)
        events = drain(emitter.queue)

        ready = {e.data["imageId"]: e.data["url"] for e in events if e.event_type == EventType.IMAGE_READY}
        assert len(ready) == 4
        assert ready["hero"].startswith("https://images.unsplash.com/")
        assert types_of(events)[-2] == "image-ready"
        assert events[-1].event_type == EventType.GENERATION_COMPLETE
        assert not state.get("error")

    @pytest.mark.asyncio
    async def test_published_page_url(self, recipe_caller):
        publisher = FakePublisher()
        emitter = EventEmitter()

        state = await PagePipeline(
            build_services(recipe_caller, recipe_chunks(), publisher=publisher)
        ).run("banana smoothie", "banana-smoothie", emitter)

        assert state["page_url"] == "https://main--site--org.aem.live/discover/banana-smoothie"
        assert drain(emitter.queue)[-1].data["pageUrl"] == state["page_url"]
        assert "<title>" in publisher.published[0][1]

    @pytest.mark.asyncio
    async def test_publish_failure_is_not_fatal(self, recipe_caller):
        emitter = EventEmitter()

        state = await PagePipeline(
            build_services(recipe_caller, recipe_chunks(), publisher=FakePublisher(success=False))
        ).run("banana smoothie", "banana-smoothie", emitter)

        assert state["page_url"] == "/discover/banana-smoothie"
        assert drain(emitter.queue)[-1].event_type == EventType.GENERATION_COMPLETE


class TestPipelineGenerate:
    @pytest.mark.asyncio
    async def test_iterates_to_terminal_event(self, recipe_pipeline):
        events = [event async for event in recipe_pipeline.generate("banana smoothie")]

        assert events[0].event_type == EventType.LAYOUT
        assert events[-1].event_type == EventType.GENERATION_COMPLETE
        assert events[-1].data["pageUrl"].startswith("/discover/banana-smoothie-")


class TestPipelinePersist:
    @pytest.mark.asyncio
    async def test_persist_under_category(self, recipe_caller):
        publisher = FakePublisher()
        pipeline = PagePipeline(build_services(recipe_caller, publisher=publisher))

        outcome = await pipeline.persist(
            "banana smoothie",
            [PersistedBlock(html="<div><h1>Banana Smoothies</h1></div>", block_type="hero")],
        )

        assert outcome.success
        assert outcome.path.startswith("/smoothies/")
        assert outcome.urls.live.endswith(outcome.path)
        assert publisher.published[0][0] == outcome.path

    @pytest.mark.asyncio
    async def test_persist_without_publisher(self, recipe_caller):
        outcome = await PagePipeline(build_services(recipe_caller)).persist(
            "banana smoothie", [PersistedBlock(html="<p></p>")]
        )
        assert not outcome.success
        assert outcome.error == "Publishing is not configured"
