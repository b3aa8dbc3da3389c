"""Queue-backed event emitter for one generation stream."""

import asyncio

from .models import Event
from .types import TERMINAL_EVENTS, EventType
from ..utils.logging import get_logger

logger = get_logger(__name__)


class EventEmitter:
    """
    Sole producer for a stream's event queue.

    Stamps each event with the next sequence number and records whether a
    block has been sent. Once detached (client gone) or closed (terminal
    event sent), further events are dropped.
    """

    def __init__(self, queue: asyncio.Queue[Event] | None = None):
        self.queue: asyncio.Queue[Event] = queue if queue is not None else asyncio.Queue()
        self._sequence = 0
        self._detached = False
        self._closed = False
        self.first_block_sent = False
        self._first_block = asyncio.Event()

    @property
    def sequence(self) -> int:
        return self._sequence

    @property
    def active(self) -> bool:
        return not (self._detached or self._closed)

    async def emit(self, event: Event) -> bool:
        """Queue ``event``. Returns False if it was dropped."""
        if not self.active:
            logger.debug("Event dropped", event_type=event.event_type.value)
            return False

        self._sequence += 1
        event.id = self._sequence
        await self.queue.put(event)

        if event.event_type == EventType.BLOCK_START:
            self.first_block_sent = True
            self._first_block.set()
        if event.event_type in TERMINAL_EVENTS:
            self._closed = True
        return True

    async def wait_first_block(self) -> None:
        """Return once a block-start has been queued."""
        await self._first_block.wait()

    def detach(self) -> None:
        """Stop delivering events; the consumer has gone away."""
        self._detached = True
