"""Event stream for page generation."""

from generative_pages.events.types import TERMINAL_EVENTS, EventType
from generative_pages.events.models import (
    BlockCompleteEvent,
    BlockContentEvent,
    BlockStartEvent,
    ErrorEvent,
    Event,
    GenerationCompleteEvent,
    ImagePlaceholderEvent,
    ImageReadyEvent,
    LayoutEvent,
)
from generative_pages.events.emitter import EventEmitter

__all__ = [
    "EventType",
    "TERMINAL_EVENTS",
    "Event",
    "EventEmitter",
    "LayoutEvent",
    "BlockStartEvent",
    "BlockContentEvent",
    "BlockCompleteEvent",
    "ImagePlaceholderEvent",
    "ImageReadyEvent",
    "GenerationCompleteEvent",
    "ErrorEvent",
]
