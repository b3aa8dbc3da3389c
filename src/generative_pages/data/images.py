"""Image request and result models."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


ImageSize = Literal["hero", "card", "column", "thumbnail"]
ImageSource = Literal["generated", "existing", "sibling", "fallback"]


class ImageRequest(BaseModel):
    """One image slot in the rendered page."""

    model_config = ConfigDict(frozen=True)

    id: str
    block_id: str
    prompt: str
    size: ImageSize
    aspect_ratio: str = "4:3"


class ImageDecision(BaseModel):
    """Whether a slot reuses an indexed image or needs generation."""

    model_config = ConfigDict(frozen=True)

    request: ImageRequest
    action: Literal["existing", "generate"]
    existing_url: str | None = None


class ImageAttempt(BaseModel):
    """Outcome of one provider call. ``url`` is None on failure."""

    id: str
    prompt: str
    url: str | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.url is not None


class GeneratedImage(BaseModel):
    """Final image for a slot. ``url`` is always usable."""

    id: str
    url: str = Field(min_length=1)
    prompt: str
    source: ImageSource = "generated"
