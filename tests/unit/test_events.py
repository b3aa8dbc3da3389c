"""Tests for event system."""

import asyncio
import json

import pytest

from generative_pages.api.sse import KEEPALIVE, event_generator_with_task
from generative_pages.events.emitter import EventEmitter
from generative_pages.events.models import (
    BlockContentEvent,
    BlockStartEvent,
    ErrorEvent,
    Event,
    GenerationCompleteEvent,
    ImageReadyEvent,
    LayoutEvent,
)
from generative_pages.events.types import EventType


class TestEventModels:
    """Tests for event models."""

    def test_event_to_sse(self):
        """Test SSE formatting."""
        event = LayoutEvent(id=3, layout_id="support", block_types=["hero", "faq"])
        sse = event.to_sse()

        lines = sse.split("\n")
        assert lines[0] == "id: 3"
        assert lines[1] == "event: layout"
        assert json.loads(lines[2][len("data: "):]) == {
            "layoutId": "support",
            "blockTypes": ["hero", "faq"],
        }
        assert sse.endswith("\n\n")

    def test_block_content_omits_default_style(self):
        event = BlockContentEvent(block_id="block-0", html="<div></div>")
        assert "sectionStyle" not in event.data
        styled = BlockContentEvent(block_id="block-0", html="", section_style="dark")
        assert styled.data["sectionStyle"] == "dark"

    def test_image_ready_event(self):
        event = ImageReadyEvent(image_id="card-1-0", url="/images/s/card-1-0.png")
        assert event.event_type == EventType.IMAGE_READY
        assert event.data == {"imageId": "card-1-0", "url": "/images/s/card-1-0.png"}

    def test_error_event(self):
        event = ErrorEvent(code="TIMEOUT", message="too slow", recoverable=True)
        assert event.data == {"code": "TIMEOUT", "message": "too slow", "recoverable": True}


class TestEventEmitter:
    """Tests for event emitter."""

    @pytest.mark.asyncio
    async def test_emit_stamps_sequence(self, event_emitter, event_queue):
        """Ids increase by one per emitted event."""
        await event_emitter.emit(LayoutEvent(layout_id="support"))
        await event_emitter.emit(BlockStartEvent(block_id="block-0", block_type="hero"))

        first = await event_queue.get()
        second = await event_queue.get()
        assert (first.id, second.id) == (1, 2)
        assert event_emitter.first_block_sent

    @pytest.mark.asyncio
    async def test_wait_first_block(self, event_emitter):
        waiter = asyncio.create_task(event_emitter.wait_first_block())
        await event_emitter.emit(LayoutEvent(layout_id="support"))
        await asyncio.sleep(0)
        assert not waiter.done()

        await event_emitter.emit(BlockStartEvent(block_id="block-0", block_type="hero"))
        await asyncio.wait_for(waiter, timeout=1)

    @pytest.mark.asyncio
    async def test_nothing_after_terminal_event(self, event_emitter, event_queue):
        assert await event_emitter.emit(GenerationCompleteEvent(page_url="/discover/x"))
        assert not await event_emitter.emit(ErrorEvent(code="LATE"))
        assert event_queue.qsize() == 1
        assert not event_emitter.active

    @pytest.mark.asyncio
    async def test_detached_emitter_drops_events(self, event_emitter, event_queue):
        event_emitter.detach()
        assert not await event_emitter.emit(LayoutEvent(layout_id="support"))
        assert event_queue.empty()


class TestEventStream:
    """SSE generator lifecycle."""

    @pytest.mark.asyncio
    async def test_stops_after_terminal_event(self):
        emitter = EventEmitter()

        async def produce():
            await emitter.emit(LayoutEvent(layout_id="support"))
            await emitter.emit(ErrorEvent(code="RETRIEVAL_FAILED", message="index down"))

        task = asyncio.create_task(produce())
        chunks = [chunk async for chunk in event_generator_with_task(emitter, task, timeout=1.0)]

        assert len(chunks) == 2
        assert chunks[0].startswith("id: 1\nevent: layout")
        assert "event: error" in chunks[1]

    @pytest.mark.asyncio
    async def test_keepalive_while_idle(self):
        emitter = EventEmitter()
        task = asyncio.create_task(asyncio.sleep(60))
        stream = event_generator_with_task(emitter, task, timeout=0.01)

        assert await stream.__anext__() == KEEPALIVE
        await stream.aclose()

    @pytest.mark.asyncio
    async def test_disconnect_before_first_block_cancels(self):
        emitter = EventEmitter()
        task = asyncio.create_task(asyncio.sleep(60))
        orphaned: list[asyncio.Task] = []
        stream = event_generator_with_task(emitter, task, on_orphan=orphaned.append, timeout=0.01)

        await stream.__anext__()
        await stream.aclose()

        assert task.cancelled()
        assert orphaned == []

    @pytest.mark.asyncio
    async def test_disconnect_after_first_block_keeps_running(self):
        emitter = EventEmitter()
        await emitter.emit(BlockStartEvent(block_id="block-0", block_type="hero"))
        task = asyncio.create_task(asyncio.sleep(60))
        orphaned: list[asyncio.Task] = []
        stream = event_generator_with_task(emitter, task, on_orphan=orphaned.append, timeout=1.0)

        chunk = await stream.__anext__()
        await stream.aclose()

        assert "block-start" in chunk
        assert orphaned == [task]
        assert not task.done()
        assert not emitter.active

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    @pytest.mark.asyncio
    async def test_drains_events_queued_before_task_finished(self):
        emitter = EventEmitter()

        async def produce():
            await emitter.emit(LayoutEvent(layout_id="support"))
            await emitter.emit(GenerationCompleteEvent(page_url="/discover/x"))

        task = asyncio.create_task(produce())
        await task

        chunks = [chunk async for chunk in event_generator_with_task(emitter, task)]
        assert [c.split("\n")[1] for c in chunks] == ["event: layout", "event: generation-complete"]
