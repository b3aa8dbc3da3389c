"""SSE stream helpers."""

import asyncio
from typing import AsyncIterator, Callable

from generative_pages.events.emitter import EventEmitter
from generative_pages.events.models import Event
from generative_pages.events.types import TERMINAL_EVENTS
from generative_pages.utils.logging import get_logger


logger = get_logger(__name__)

# Timeout for graceful task cancellation
TASK_CANCEL_TIMEOUT = 5.0

KEEPALIVE = ": keepalive\n\n"


async def event_generator_with_task(
    emitter: EventEmitter,
    task: asyncio.Task,
    on_orphan: Callable[[asyncio.Task], None] | None = None,
    timeout: float = 15.0,
) -> AsyncIterator[str]:
    """
    Generate SSE events while a generation task runs.

    Stops after the first terminal event. If the stream ends before the
    task does (client disconnect), the task is cancelled when no block has
    reached the client yet; otherwise the emitter is detached and the task
    is handed to ``on_orphan`` so the page still finishes and persists.

    Args:
        emitter: Emitter whose queue the task writes to
        task: Background task running the pipeline
        on_orphan: Receives the task when it must outlive the stream
        timeout: Seconds without events before a keepalive comment

    Yields:
        SSE formatted event strings
    """
    event_queue = emitter.queue
    try:
        while not task.done():
            try:
                event = await asyncio.wait_for(event_queue.get(), timeout=timeout)
                yield event.to_sse()

                if event.event_type in TERMINAL_EVENTS:
                    return

            except asyncio.TimeoutError:
                # Send keepalive if task is still running
                if not task.done():
                    yield KEEPALIVE

        # Drain whatever the task queued before finishing
        while not event_queue.empty():
            try:
                event = event_queue.get_nowait()
            except asyncio.QueueEmpty:
                break
            yield event.to_sse()
            if event.event_type in TERMINAL_EVENTS:
                return

    finally:
        if not task.done():
            if emitter.first_block_sent:
                logger.info("Client left after first block, continuing in background")
                emitter.detach()
                if on_orphan:
                    on_orphan(task)
            else:
                await _cancel_task(task)

        _drain_queue(event_queue)


async def _cancel_task(task: asyncio.Task) -> None:
    task.cancel()
    try:
        # Wait with timeout for graceful cleanup
        await asyncio.wait_for(task, timeout=TASK_CANCEL_TIMEOUT)
    except asyncio.CancelledError:
        pass
    except asyncio.TimeoutError:
        logger.warning("Task did not cancel gracefully within timeout, may leak resources")


def _drain_queue(event_queue: asyncio.Queue[Event]) -> int:
    """Drain all remaining events from queue to free memory."""
    drained = 0
    try:
        while not event_queue.empty():
            event_queue.get_nowait()
            drained += 1
    except asyncio.QueueEmpty:
        pass
    if drained > 0:
        logger.debug("Drained events from queue during cleanup", count=drained)
    return drained
