"""
Image generation orchestrator.

Runs provider calls in fixed-size batches, stores each result, and
resolves every slot to a usable URL. Individual failures never escape:
they become fallback or sibling images once all attempts are in.
"""

import asyncio
import random
from typing import Awaitable, Callable

from generative_pages.data.images import (
    GeneratedImage,
    ImageAttempt,
    ImageDecision,
    ImageRequest,
)
from generative_pages.images.fallback import apply_fallback_strategy
from generative_pages.images.providers.base import ImageProvider
from generative_pages.images.storage.base import ImageStorage
from generative_pages.utils.logging import get_logger


logger = get_logger(__name__)

ImageCallback = Callable[[GeneratedImage], Awaitable[None]]


class ImageGenerator:
    def __init__(
        self,
        provider: ImageProvider,
        storage: ImageStorage,
        rng: random.Random | None = None,
    ):
        self.provider = provider
        self.storage = storage
        self._rng = rng or random.Random()

    async def _attempt(self, request: ImageRequest, slug: str) -> ImageAttempt:
        try:
            asset = await self.provider.generate(request.prompt, request.size)
            url = await self.storage.save(slug, request.id, asset.data, asset.extension)
            return ImageAttempt(id=request.id, prompt=request.prompt, url=url)
        except Exception as e:
            logger.warning(
                "Image generation failed",
                image_id=request.id,
                provider=self.provider.name,
                error=str(e),
            )
            return ImageAttempt(id=request.id, prompt=request.prompt, error=str(e))

    async def generate_batch(
        self,
        requests: list[ImageRequest],
        slug: str,
        on_ready: ImageCallback | None = None,
    ) -> list[GeneratedImage]:
        """
        Generate one image per request, in request order.

        Successful images are reported through ``on_ready`` as their batch
        completes; substituted images are reported once every batch is done.
        """
        if not requests:
            return []

        batch_size = max(1, self.provider.batch_size)
        attempts: list[ImageAttempt] = []

        for start in range(0, len(requests), batch_size):
            batch = requests[start:start + batch_size]
            results = await asyncio.gather(*(self._attempt(r, slug) for r in batch))
            attempts.extend(results)

            if on_ready:
                for attempt in results:
                    if attempt.succeeded:
                        await on_ready(
                            GeneratedImage(id=attempt.id, url=attempt.url, prompt=attempt.prompt)
                        )

        images = apply_fallback_strategy(requests, attempts, rng=self._rng)

        if on_ready:
            for image in images:
                if image.source != "generated":
                    await on_ready(image)

        failed = sum(1 for a in attempts if not a.succeeded)
        logger.info(
            "Images resolved",
            slug=slug,
            total=len(images),
            failed=failed,
            provider=self.provider.name,
        )
        return images

    async def resolve(
        self,
        decisions: list[ImageDecision],
        slug: str,
        on_ready: ImageCallback | None = None,
    ) -> list[GeneratedImage]:
        """Reuse existing images where decided, generate the rest."""
        existing: dict[str, GeneratedImage] = {}
        to_generate: list[ImageRequest] = []

        for decision in decisions:
            if decision.action == "existing" and decision.existing_url:
                existing[decision.request.id] = GeneratedImage(
                    id=decision.request.id,
                    url=decision.existing_url,
                    prompt=decision.request.prompt,
                    source="existing",
                )
            else:
                to_generate.append(decision.request)

        if on_ready:
            for image in existing.values():
                await on_ready(image)

        generated = {
            image.id: image
            for image in await self.generate_batch(to_generate, slug, on_ready=on_ready)
        }
        return [
            existing.get(d.request.id) or generated[d.request.id]
            for d in decisions
        ]

    async def close(self) -> None:
        await self.provider.close()
