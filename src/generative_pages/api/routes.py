"""FastAPI routes for the page generation API."""

import asyncio
from uuid import uuid4

from fastapi import APIRouter, Header, HTTPException, Request
from fastapi.responses import StreamingResponse

from generative_pages import __version__
from generative_pages.api.dependencies import (
    GenerationCacheDep,
    PipelineDep,
    SettingsDep,
)
from generative_pages.api.models import (
    GenerateRequest,
    HealthResponse,
    PersistRequest,
    PersistResponse,
)
from generative_pages.api.sse import event_generator_with_task
from generative_pages.events.emitter import EventEmitter
from generative_pages.events.models import ErrorEvent
from generative_pages.graph.pipeline import discover_path
from generative_pages.publishing.paths import generate_slug
from generative_pages.utils.logging import get_logger


logger = get_logger(__name__)
router = APIRouter()


async def _until_first_block(
    run: asyncio.Task, emitter: EventEmitter, timeout: float
) -> None:
    """
    Wait until ``run`` finishes or streams its first block.

    Raises asyncio.TimeoutError, after cancelling ``run``, if neither
    happens within ``timeout`` seconds. Once a block is out the run is
    left to finish on its own.
    """
    first_block = asyncio.create_task(emitter.wait_first_block())
    try:
        done, _ = await asyncio.wait(
            {run, first_block},
            timeout=timeout,
            return_when=asyncio.FIRST_COMPLETED,
        )
    finally:
        first_block.cancel()

    if not done:
        run.cancel()
        try:
            await run
        except asyncio.CancelledError:
            pass
        raise asyncio.TimeoutError


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Health check endpoint.

    Returns application status and version.
    """
    return HealthResponse(
        status="ok",
        version=__version__,
    )


@router.post("/generate")
async def generate(
    request: Request,
    generate_request: GenerateRequest,
    pipeline: PipelineDep,
    cache: GenerationCacheDep,
    settings: SettingsDep,
    last_event_id: str | None = Header(default=None, alias="Last-Event-ID"),
) -> StreamingResponse:
    """
    Stream a generated page as Server-Sent Events.

    Events, in order:
    - layout: chosen layout and its block types
    - block-start / block-content / block-complete: one triple per block
    - image-placeholder: per image slot, after its block
    - image-ready: as images resolve
    - generation-complete or error: exactly one, last
    """
    # Check if shutdown is in progress
    if getattr(request.app.state, "is_shutting_down", False):
        raise HTTPException(status_code=503, detail="Service is shutting down")

    slug = generate_request.slug or generate_slug(generate_request.query)
    path = discover_path(slug)

    if cache.is_in_progress(path):
        raise HTTPException(status_code=409, detail=f"Page is already generating: {path}")

    request_id = str(uuid4())
    if last_event_id:
        # Replay is not supported; a reconnect starts a fresh generation.
        logger.info("Client reconnected", last_event_id=last_event_id, request_id=request_id)

    emitter = EventEmitter()
    cache.mark_in_progress(path, generate_request.query)

    # Track request
    active_requests = getattr(request.app.state, "active_requests", set())
    active_requests.add(request_id)

    timeout = settings.generation_timeout_seconds

    async def run_graph() -> None:
        """Run the pipeline in background; the timeout only bounds time to first block."""
        run = asyncio.create_task(
            pipeline.run(
                generate_request.query,
                slug,
                emitter=emitter,
                request_id=request_id,
                path=path,
            )
        )
        try:
            await _until_first_block(run, emitter, timeout)
            state = await run
            if state.get("error"):
                cache.mark_failed(path)
            else:
                cache.mark_complete(path, state.get("page_url"))

        except asyncio.TimeoutError:
            logger.warning(
                f"No content after {timeout}s, giving up",
                request_id=request_id,
            )
            cache.mark_failed(path)
            await emitter.emit(
                ErrorEvent(
                    code="TIMEOUT",
                    message=f"Generation timed out after {timeout:g} seconds",
                    recoverable=True,
                )
            )
        except asyncio.CancelledError:
            run.cancel()
            cache.mark_failed(path)
            raise
        except Exception as e:
            logger.error(f"Generation error: {e}", exc_info=True)
            cache.mark_failed(path)
            await emitter.emit(
                ErrorEvent(code="GENERATION_FAILED", message=str(e), recoverable=True)
            )
        finally:
            # Untrack request
            active_requests.discard(request_id)

    # Start generation
    task = asyncio.create_task(run_graph())

    return StreamingResponse(
        event_generator_with_task(
            emitter,
            task,
            on_orphan=pipeline.keep_running,
            timeout=settings.sse_keepalive_seconds,
        ),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Request-ID": request_id,
        },
    )


@router.post("/persist", response_model=PersistResponse, response_model_by_alias=True)
async def persist(
    request: Request,
    persist_request: PersistRequest,
    pipeline: PipelineDep,
) -> PersistResponse:
    """
    Publish blocks the client already rendered.

    The page path is derived from the query's classified intent, e.g.
    ``/smoothies/green-detox-smoothie-k7x2``.
    """
    if getattr(request.app.state, "is_shutting_down", False):
        raise HTTPException(status_code=503, detail="Service is shutting down")

    if pipeline.services.publisher is None:
        raise HTTPException(status_code=503, detail="Publishing is not configured")

    outcome = await pipeline.persist(persist_request.query, persist_request.blocks)

    return PersistResponse(
        success=outcome.success,
        path=outcome.path,
        urls=outcome.urls,
        error=outcome.error,
    )
