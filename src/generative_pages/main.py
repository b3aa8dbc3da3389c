"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from generative_pages import __version__
from generative_pages.api.routes import router
from generative_pages.app import app_instance, setup_signal_handlers
from generative_pages.config.settings import get_settings
from generative_pages.utils.logging import configure_logging, get_logger


logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan manager.

    Handles startup and shutdown events.
    """
    # Startup
    await app_instance.startup()

    # Store references in app state
    app.state.pipeline = app_instance.pipeline
    app.state.generation_cache = app_instance.generation_cache
    app.state.active_requests = app_instance.active_requests
    app.state.is_shutting_down = False

    # Setup signal handlers
    setup_signal_handlers(app_instance)

    yield

    # Shutdown
    app.state.is_shutting_down = True
    await app_instance.shutdown()


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Generative Pages API",
        description="Streams generated Vitamix pages block by block over SSE",
        version=__version__,
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    # Include routes
    app.include_router(router, prefix="/api/v1")

    # Serve locally stored generated images
    image_dir = Path(settings.image_storage_path)
    image_dir.mkdir(parents=True, exist_ok=True)
    app.mount(settings.image_url_prefix, StaticFiles(directory=image_dir), name="images")

    # Root endpoint
    @app.get("/")
    async def root():
        return {
            "name": "Generative Pages API",
            "version": __version__,
            "docs": "/docs",
        }

    return app


# Create application instance
app = create_app()


def main() -> None:
    """Entry point for running the application."""
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "generative_pages.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
