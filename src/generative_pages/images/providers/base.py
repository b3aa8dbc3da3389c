"""Image provider interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class ImageAsset:
    """Raw image bytes returned by a provider."""

    data: bytes
    content_type: str = "image/png"

    @property
    def extension(self) -> str:
        if "jpeg" in self.content_type or "jpg" in self.content_type:
            return "jpg"
        if "webp" in self.content_type:
            return "webp"
        return "png"


class ImageProvider(ABC):
    """Turns one prompt into one image. Raises on failure."""

    name: str = "base"
    batch_size: int = 5

    @abstractmethod
    async def generate(self, prompt: str, size: str) -> ImageAsset:
        ...

    async def close(self) -> None:
        """Release network resources."""
