"""Event data models."""

import json
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

from .types import EventType


class Event(BaseModel):
    """Base event model. ``id`` is the per-stream sequence number."""

    id: int = 0
    event_type: EventType
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    data: dict[str, Any] = Field(default_factory=dict)

    def to_json(self) -> str:
        return json.dumps(self.data)

    def to_sse(self) -> str:
        """Format event for SSE stream."""
        return f"id: {self.id}\nevent: {self.event_type.value}\ndata: {self.to_json()}\n\n"


class LayoutEvent(Event):
    event_type: EventType = EventType.LAYOUT
    layout_id: str = ""
    block_types: list[str] = Field(default_factory=list)

    def model_post_init(self, __context: Any) -> None:
        self.data["layoutId"] = self.layout_id
        self.data["blockTypes"] = self.block_types


class BlockStartEvent(Event):
    event_type: EventType = EventType.BLOCK_START
    block_id: str = ""
    block_type: str = ""
    position: int = 0

    def model_post_init(self, __context: Any) -> None:
        self.data["blockId"] = self.block_id
        self.data["blockType"] = self.block_type
        self.data["position"] = self.position


class BlockContentEvent(Event):
    event_type: EventType = EventType.BLOCK_CONTENT
    block_id: str = ""
    html: str = ""
    section_style: str | None = None

    def model_post_init(self, __context: Any) -> None:
        self.data["blockId"] = self.block_id
        self.data["html"] = self.html
        if self.section_style:
            self.data["sectionStyle"] = self.section_style


class BlockCompleteEvent(Event):
    event_type: EventType = EventType.BLOCK_COMPLETE
    block_id: str = ""

    def model_post_init(self, __context: Any) -> None:
        self.data["blockId"] = self.block_id


class ImagePlaceholderEvent(Event):
    event_type: EventType = EventType.IMAGE_PLACEHOLDER
    image_id: str = ""
    block_id: str = ""

    def model_post_init(self, __context: Any) -> None:
        self.data["imageId"] = self.image_id
        self.data["blockId"] = self.block_id


class ImageReadyEvent(Event):
    """Tagged with the image id so clients can apply it out of order."""

    event_type: EventType = EventType.IMAGE_READY
    image_id: str = ""
    url: str = ""

    def model_post_init(self, __context: Any) -> None:
        self.data["imageId"] = self.image_id
        self.data["url"] = self.url


class GenerationCompleteEvent(Event):
    event_type: EventType = EventType.GENERATION_COMPLETE
    page_url: str = ""

    def model_post_init(self, __context: Any) -> None:
        self.data["pageUrl"] = self.page_url


class ErrorEvent(Event):
    """Event for error reporting."""

    event_type: EventType = EventType.ERROR
    code: str = "GENERATION_FAILED"
    message: str = ""
    recoverable: bool = False

    def model_post_init(self, __context: Any) -> None:
        self.data["code"] = self.code
        self.data["message"] = self.message
        self.data["recoverable"] = self.recoverable
