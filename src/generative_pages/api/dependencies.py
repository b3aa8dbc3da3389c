"""FastAPI dependency injection."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request

from generative_pages.config.settings import Settings, get_settings
from generative_pages.core.generation_cache import GenerationCache
from generative_pages.graph.pipeline import PagePipeline


def get_app_settings() -> Settings:
    """Get application settings."""
    return get_settings()


async def get_pipeline(request: Request) -> PagePipeline:
    """Get the page pipeline from application state."""
    pipeline = getattr(request.app.state, "pipeline", None)
    if pipeline is None:
        raise HTTPException(status_code=503, detail="Pipeline is not initialized")
    return pipeline


async def get_generation_cache(request: Request) -> GenerationCache:
    """
    Get or create the in-flight generation cache.

    Shared across requests so a second request for the same path can be
    turned away while the first is still generating.
    """
    if getattr(request.app.state, "generation_cache", None) is None:
        request.app.state.generation_cache = GenerationCache(
            ttl_seconds=get_settings().generation_cache_ttl_seconds
        )
    return request.app.state.generation_cache


# Type aliases for dependency injection
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
PipelineDep = Annotated[PagePipeline, Depends(get_pipeline)]
GenerationCacheDep = Annotated[GenerationCache, Depends(get_generation_cache)]
