"""Local filesystem image storage implementation."""

import asyncio
import re
from pathlib import Path

import aiofiles
import aiofiles.os

from generative_pages.images.storage.base import ImageStorage
from generative_pages.utils.logging import get_logger


logger = get_logger(__name__)

_UNSAFE_SEGMENT = re.compile(r"[^a-zA-Z0-9._/-]")


def _safe_segment(value: str) -> str:
    cleaned = _UNSAFE_SEGMENT.sub("-", value).strip("/")
    # No parent traversal out of the storage root.
    return "/".join(part for part in cleaned.split("/") if part not in ("", ".", ".."))


class LocalImageStorage(ImageStorage):
    """
    Writes images under ``base_path`` and serves them from ``url_prefix``.

    A file at ``{base_path}/{slug}/{image_id}.{ext}`` is addressed as
    ``{url_prefix}/{slug}/{image_id}.{ext}``.
    """

    def __init__(self, base_path: str = "./storage/images", url_prefix: str = "/images"):
        self._base_path = Path(base_path)
        self._url_prefix = url_prefix.rstrip("/")
        self._lock = asyncio.Lock()

    @property
    def base_path(self) -> Path:
        return self._base_path

    def _get_image_path(self, slug: str, image_id: str, extension: str) -> Path:
        return self._base_path / _safe_segment(slug) / f"{_safe_segment(image_id)}.{extension}"

    async def _ensure_dir(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)

    async def save(
        self,
        slug: str,
        image_id: str,
        data: bytes,
        extension: str = "png",
    ) -> str:
        path = self._get_image_path(slug, image_id, extension)
        async with self._lock:
            await self._ensure_dir(path.parent)

        async with aiofiles.open(path, "wb") as f:
            await f.write(data)

        url = f"{self._url_prefix}/{_safe_segment(slug)}/{_safe_segment(image_id)}.{extension}"
        logger.debug("Saved image", slug=slug, image_id=image_id, size=len(data))
        return url

    async def exists(self, slug: str, image_id: str, extension: str = "png") -> bool:
        return await aiofiles.os.path.exists(self._get_image_path(slug, image_id, extension))
