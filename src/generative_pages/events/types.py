"""Event type enumerations."""

from enum import Enum


class EventType(str, Enum):
    """All event types for the page generation stream, in protocol order."""

    LAYOUT = "layout"

    # Repeated once per block
    BLOCK_START = "block-start"
    BLOCK_CONTENT = "block-content"
    BLOCK_COMPLETE = "block-complete"

    # Interleaved, unordered relative to each other
    IMAGE_PLACEHOLDER = "image-placeholder"
    IMAGE_READY = "image-ready"

    # Terminal, mutually exclusive
    GENERATION_COMPLETE = "generation-complete"
    ERROR = "error"


TERMINAL_EVENTS = frozenset({EventType.GENERATION_COMPLETE, EventType.ERROR})
