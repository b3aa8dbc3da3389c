"""Generated image storage backends."""

from generative_pages.images.storage.base import ImageStorage
from generative_pages.images.storage.local import LocalImageStorage

__all__ = ["ImageStorage", "LocalImageStorage"]
