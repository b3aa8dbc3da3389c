"""API request/response models."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from generative_pages.publishing.cms import PersistedBlock, PublishUrls


class GenerateRequest(BaseModel):
    """Request model for the generate stream."""

    query: str = Field(min_length=1, max_length=500, description="Visitor query")
    slug: str | None = Field(default=None, description="Optional page slug")


class PersistRequest(BaseModel):
    """Blocks rendered in preview, to be published as a page."""

    query: str = Field(min_length=1)
    blocks: list[PersistedBlock] = Field(min_length=1)


class PersistResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool
    path: str
    urls: PublishUrls | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str
    version: str
