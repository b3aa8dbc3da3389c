"""
Page pipeline facade.

Entry points:
- ``run``: drive one generation through the graph, emitting to a given emitter
- ``generate``: async iterator of stream events for one query
- ``persist``: publish client-rendered blocks under a categorized path
"""

import asyncio
from typing import AsyncIterator
from uuid import uuid4

from langgraph.graph.state import CompiledStateGraph
from pydantic import BaseModel

from generative_pages.events.emitter import EventEmitter
from generative_pages.events.models import ErrorEvent, Event
from generative_pages.events.types import TERMINAL_EVENTS
from generative_pages.graph.builder import create_page_graph
from generative_pages.graph.state import PageState, PipelineServices, create_initial_state
from generative_pages.publishing.cms import PersistedBlock, PublishUrls, build_cms_page_html
from generative_pages.publishing.paths import (
    build_categorized_path,
    classify_category,
    generate_semantic_slug,
    generate_slug,
)
from generative_pages.utils.logging import bind_request, get_logger


logger = get_logger(__name__)


class PersistOutcome(BaseModel):
    success: bool
    path: str
    urls: PublishUrls | None = None
    error: str | None = None


def discover_path(slug: str) -> str:
    return f"/discover/{slug}"


class PagePipeline:
    def __init__(
        self,
        services: PipelineServices,
        graph: CompiledStateGraph | None = None,
    ):
        self.services = services
        self.graph = graph or create_page_graph()
        self._background: set[asyncio.Task] = set()

    async def run(
        self,
        query: str,
        slug: str,
        emitter: EventEmitter | None = None,
        request_id: str | None = None,
        path: str | None = None,
    ) -> PageState:
        """
        Run one generation to completion.

        Stage errors are emitted by the graph itself. Anything that escapes
        the graph is reported here so the stream always ends with a
        terminal event.
        """
        request_id = request_id or str(uuid4())
        bind_request(request_id, slug=slug)
        state = create_initial_state(
            query=query,
            slug=slug,
            path=path or discover_path(slug),
            request_id=request_id,
            services=self.services,
            emitter=emitter,
        )

        try:
            return await self.graph.ainvoke(state)
        except asyncio.CancelledError:
            logger.info("Generation cancelled")
            raise
        except Exception as e:
            logger.exception("Unexpected pipeline error", error=str(e))
            if emitter:
                await emitter.emit(
                    ErrorEvent(code="GENERATION_FAILED", message=str(e), recoverable=True)
                )
            return {**state, "error": str(e), "error_type": "GENERATION_FAILED"}

    async def generate(self, query: str, slug: str | None = None) -> AsyncIterator[Event]:
        """
        Yield the event stream for one query.

        If the consumer stops early before any block was sent, the run is
        cancelled; after that it keeps running in the background so the
        page is still persisted.
        """
        slug = slug or generate_slug(query)
        emitter = EventEmitter()
        task = asyncio.create_task(self.run(query, slug, emitter))

        try:
            while True:
                getter = asyncio.ensure_future(emitter.queue.get())
                done, _ = await asyncio.wait({getter, task}, return_when=asyncio.FIRST_COMPLETED)
                if getter not in done:
                    getter.cancel()
                    while not emitter.queue.empty():
                        yield emitter.queue.get_nowait()
                    break

                event = getter.result()
                yield event
                if event.event_type in TERMINAL_EVENTS:
                    break
        finally:
            if not task.done():
                if emitter.first_block_sent:
                    emitter.detach()
                    self.keep_running(task)
                else:
                    task.cancel()

    def keep_running(self, task: asyncio.Task) -> None:
        """Hold a reference to a run whose client went away."""
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    @property
    def background_tasks(self) -> set[asyncio.Task]:
        return self._background

    async def persist(self, query: str, blocks: list[PersistedBlock]) -> PersistOutcome:
        """Publish a previewed page under a path derived from the query's intent."""
        intent = await self.services.classifier.classify(query)
        category = classify_category(intent, query)
        path = build_categorized_path(category, generate_semantic_slug(query, intent))

        publisher = self.services.publisher
        if publisher is None:
            return PersistOutcome(success=False, path=path, error="Publishing is not configured")

        result = await publisher.publish(path, build_cms_page_html(query, blocks))
        if not result.success:
            logger.warning("Persist failed", path=path, error=result.error)
        return PersistOutcome(success=result.success, path=path, urls=result.urls, error=result.error)
