"""Application class with startup/shutdown lifecycle."""

import asyncio
import signal
from typing import Set

from generative_pages.config.settings import Settings, get_settings
from generative_pages.core.generation_cache import GenerationCache
from generative_pages.generation import ContentGenerator, IntentClassifier
from generative_pages.graph.pipeline import PagePipeline
from generative_pages.graph.state import PipelineServices
from generative_pages.images.generator import ImageGenerator
from generative_pages.images.providers import create_image_provider
from generative_pages.images.storage.local import LocalImageStorage
from generative_pages.publishing.cms import AEMAdminClient, CMSPublisher, DAClient
from generative_pages.retrieval import ContextRetriever, HttpVectorIndex, OpenAIEmbedder
from generative_pages.safety.gate import ContentSafetyGate, SafetyThresholds
from generative_pages.utils.llm import LLMClient
from generative_pages.utils.logging import get_logger, configure_logging
from generative_pages.utils.structured_llm import StructuredLLMCaller


logger = get_logger(__name__)


def build_services(settings: Settings) -> PipelineServices:
    """Wire every pipeline stage from settings."""
    llm = LLMClient(settings=settings)
    caller = StructuredLLMCaller(llm)

    retriever = ContextRetriever(
        embedder=OpenAIEmbedder(
            api_key=settings.openai_api_key,
            model=settings.embedding_model,
            base_url=settings.openai_base_url,
        ),
        index=HttpVectorIndex(
            base_url=settings.vector_index_url,
            api_key=settings.vector_index_api_key,
            namespace=settings.vector_index_namespace,
            timeout=settings.vector_index_timeout_seconds,
        ),
    )

    image_generator = ImageGenerator(
        provider=create_image_provider(settings),
        storage=LocalImageStorage(
            base_path=settings.image_storage_path,
            url_prefix=settings.image_url_prefix,
        ),
    )

    publisher = None
    if settings.da_org and settings.da_repo:
        publisher = CMSPublisher(
            da=DAClient(settings.da_org, settings.da_repo, settings.da_token),
            admin=AEMAdminClient(
                settings.da_org,
                settings.aem_site or settings.da_repo,
                settings.da_token,
                ref=settings.aem_ref,
            ),
            enabled=settings.publish_enabled,
        )
    else:
        logger.info("CMS publishing not configured")

    return PipelineServices(
        classifier=IntentClassifier(caller),
        retriever=retriever,
        content_generator=ContentGenerator(caller),
        image_generator=image_generator,
        safety_gate=ContentSafetyGate(caller, SafetyThresholds.from_settings(settings)),
        publisher=publisher,
        llm=llm,
    )


class Application:
    """
    FastAPI application with graceful shutdown.

    Handles:
    - SIGTERM / SIGINT signals
    - Draining in-flight streams and orphaned background generations
    - Closing HTTP clients
    - Timeout for cleanup operations
    """

    def __init__(self):
        """Initialize application."""
        self.pipeline: PagePipeline | None = None
        self.generation_cache: GenerationCache | None = None
        self._active_requests: Set[str] = set()
        self._shutdown_event = asyncio.Event()
        self._is_shutting_down = False

    async def startup(self) -> None:
        """Initialize resources on startup."""
        settings = get_settings()

        # Configure logging
        configure_logging(settings.log_level)

        logger.info("Starting application...")

        self.pipeline = PagePipeline(build_services(settings))
        self.generation_cache = GenerationCache(
            ttl_seconds=settings.generation_cache_ttl_seconds
        )

        logger.info("Application started")

    async def shutdown(self, timeout: float = 30.0) -> None:
        """
        Graceful shutdown with timeout.

        1. Stop accepting new requests
        2. Wait for in-flight generations (with timeout)
        3. Close service clients

        Args:
            timeout: Maximum time to wait for generations to complete
        """
        if self._is_shutting_down:
            return
        logger.info("Shutdown initiated...")
        self._is_shutting_down = True
        self._shutdown_event.set()

        if self._active_requests or (self.pipeline and self.pipeline.background_tasks):
            logger.info(f"Waiting for {len(self._active_requests)} requests...")
            try:
                await asyncio.wait_for(
                    self._wait_for_requests(),
                    timeout=timeout,
                )
            except asyncio.TimeoutError:
                logger.warning("Timeout waiting for requests, forcing shutdown")

        if self.pipeline:
            await self._close_services(self.pipeline.services)

        logger.info("Shutdown complete")

    async def _close_services(self, services: PipelineServices) -> None:
        closers = [
            services.retriever.embedder.close(),
            services.retriever.index.close(),
            services.image_generator.close(),
        ]
        if services.publisher:
            closers.append(services.publisher.close())
        if services.llm:
            closers.append(services.llm.close())

        results = await asyncio.gather(*closers, return_exceptions=True)
        for result in results:
            if isinstance(result, Exception):
                logger.warning(f"Error closing client: {result}")

    async def _wait_for_requests(self) -> None:
        """Wait until all requests and orphaned generations complete."""
        while self._active_requests or (self.pipeline and self.pipeline.background_tasks):
            await asyncio.sleep(0.1)

    def track_request(self, request_id: str) -> None:
        """Track active request."""
        self._active_requests.add(request_id)

    def untrack_request(self, request_id: str) -> None:
        """Remove request from tracking."""
        self._active_requests.discard(request_id)

    @property
    def is_shutting_down(self) -> bool:
        """Check if application is shutting down."""
        return self._is_shutting_down

    @property
    def active_requests(self) -> Set[str]:
        """Get set of active request IDs."""
        return self._active_requests


# Global application instance
app_instance = Application()


def setup_signal_handlers(app: Application) -> None:
    """
    Setup signal handlers for graceful shutdown.

    Args:
        app: Application instance
    """

    async def handle_signal(sig: signal.Signals) -> None:
        logger.info(f"Received signal {sig.name}")
        await app.shutdown()

    try:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(
                sig,
                lambda s=sig: asyncio.create_task(handle_signal(s)),
            )
    except NotImplementedError:
        # Windows doesn't support add_signal_handler
        logger.warning("Signal handlers not supported on this platform")
