"""Abstract base class for generated image storage."""

from abc import ABC, abstractmethod


class ImageStorage(ABC):
    """
    Stores generated image bytes and hands back a public URL.

    Storage structure:
        {base}/
        └── {slug}/
            ├── hero.png
            ├── card-1-0.png
            └── ...
    """

    @abstractmethod
    async def save(
        self,
        slug: str,
        image_id: str,
        data: bytes,
        extension: str = "png",
    ) -> str:
        """
        Persist one image.

        Args:
            slug: Page slug the image belongs to
            image_id: Slot id, unique within the page
            data: Encoded image bytes
            extension: File extension without the dot

        Returns:
            URL the page can reference
        """
        ...

    @abstractmethod
    async def exists(self, slug: str, image_id: str, extension: str = "png") -> bool:
        ...
