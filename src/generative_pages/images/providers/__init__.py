"""Image provider implementations."""

from generative_pages.config.settings import Settings
from generative_pages.images.providers.base import ImageAsset, ImageProvider
from generative_pages.images.providers.fal import FalImageProvider
from generative_pages.images.providers.imagen import ImagenProvider


def create_image_provider(settings: Settings) -> ImageProvider:
    """Build the provider selected by ``settings.image_provider``."""
    if settings.image_provider == "imagen":
        return ImagenProvider(
            service_account_json=settings.google_service_account_json,
            region=settings.vertex_ai_region,
            timeout=settings.image_timeout_seconds,
        )
    if settings.image_provider == "fal-lora":
        return FalImageProvider(
            api_key=settings.fal_api_key,
            lora_url=settings.fal_lora_url,
            timeout=settings.image_timeout_seconds,
        )
    return FalImageProvider(api_key=settings.fal_api_key, timeout=settings.image_timeout_seconds)


__all__ = [
    "ImageAsset",
    "ImageProvider",
    "FalImageProvider",
    "ImagenProvider",
    "create_image_provider",
]
