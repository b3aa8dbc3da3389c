"""
Document Authoring (DA) and AEM admin clients, and the publish flow.

Publishing a page:

1. Upload media to DA (failures logged, not fatal)
2. PUT the page source to DA
3. Trigger a preview
4. Wait for the preview to serve (best effort)
5. Publish to live
6. Purge the CDN cache

Resilience patterns applied to every HTTP call:
- Retry with exponential backoff for transient failures
- Circuit breaker shared by DA and admin calls
"""

import asyncio
import re
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from generative_pages.core.exceptions import CMSError
from generative_pages.core.resilience import (
    PermanentHTTPError,
    cms_circuit_breaker,
    cms_retry,
    wrap_httpx_errors,
)
from generative_pages.rendering.html import escape
from generative_pages.utils.logging import get_logger


logger = get_logger(__name__)


DA_BASE_URL = "https://admin.da.live"
AEM_ADMIN_BASE_URL = "https://admin.hlx.page"


# =============================================================================
# MODELS
# =============================================================================


class PublishUrls(BaseModel):
    preview: str
    live: str


class PublishResult(BaseModel):
    success: bool
    urls: PublishUrls | None = None
    error: str | None = None


class PersistedBlock(BaseModel):
    """Already-rendered block HTML sent back by the client for persistence."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    html: str
    section_style: str | None = None
    block_type: str | None = None


class MediaFile(BaseModel):
    filename: str
    data: bytes
    content_type: str = "image/png"


# =============================================================================
# CLIENTS
# =============================================================================


class _HttpClient:
    """Lazy ``httpx.AsyncClient`` with bearer auth."""

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={"Authorization": f"Bearer {self.token}"},
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    @cms_retry
    @cms_circuit_breaker
    @wrap_httpx_errors
    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        client = await self._get_client()
        response = await client.request(method, url, **kwargs)
        response.raise_for_status()
        return response


class DAClient(_HttpClient):
    """Page and media source operations against DA."""

    def __init__(
        self,
        org: str,
        repo: str,
        token: str,
        base_url: str = DA_BASE_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(base_url, token, timeout, transport)
        self.org = org
        self.repo = repo

    def _source(self, path: str) -> str:
        return f"/source/{self.org}/{self.repo}{path}.html"

    async def exists(self, path: str) -> bool:
        try:
            await self._send("HEAD", self._source(path))
            return True
        except PermanentHTTPError:
            return False
        except Exception as e:
            logger.warning("DA existence check failed", path=path, error=str(e))
            return False

    async def create_page(self, path: str, html: str) -> None:
        files = {"data": ("index.html", html.encode("utf-8"), "text/html")}
        try:
            await self._send("PUT", self._source(path), files=files)
        except PermanentHTTPError as e:
            raise CMSError(f"Failed to create page: {e}", path=path, status_code=e.status_code) from e
        except Exception as e:
            raise CMSError(f"Failed to create page: {e}", path=path) from e
        logger.info("DA page created", path=path)

    async def upload_media(self, media: MediaFile) -> str:
        files = {"data": (media.filename, media.data, media.content_type)}
        try:
            await self._send("PUT", f"/source/{self.org}/{self.repo}/media/{media.filename}", files=files)
        except Exception as e:
            raise CMSError(f"Failed to upload media: {e}", path=media.filename) from e
        return f"/media/{media.filename}"

    async def delete_page(self, path: str) -> bool:
        try:
            await self._send("DELETE", self._source(path))
            return True
        except Exception as e:
            logger.warning("DA delete failed", path=path, error=str(e))
            return False


class AEMAdminClient(_HttpClient):
    """Preview, publish and cache operations against the AEM admin API."""

    def __init__(
        self,
        org: str,
        site: str,
        token: str,
        ref: str = "main",
        base_url: str = AEM_ADMIN_BASE_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(base_url, token, timeout, transport)
        self.org = org
        self.site = site
        self.ref = ref

    def preview_url(self, path: str) -> str:
        return f"https://{self.ref}--{self.site}--{self.org}.aem.page{path}"

    def live_url(self, path: str) -> str:
        return f"https://{self.ref}--{self.site}--{self.org}.aem.live{path}"

    async def preview(self, path: str) -> str:
        try:
            await self._send("POST", f"/preview/{self.org}/{self.site}/{self.ref}{path}")
        except Exception as e:
            raise CMSError(f"Preview failed: {e}", path=path) from e
        return self.preview_url(path)

    async def publish(self, path: str) -> str:
        try:
            await self._send("POST", f"/live/{self.org}/{self.site}/{self.ref}{path}")
        except Exception as e:
            raise CMSError(f"Publish failed: {e}", path=path) from e
        return self.live_url(path)

    async def purge_cache(self, path: str) -> bool:
        try:
            await self._send("POST", f"/cache/{self.org}/{self.site}/{self.ref}{path}")
            return True
        except Exception as e:
            logger.warning("Cache purge failed", path=path, error=str(e))
            return False

    async def wait_for_preview(
        self,
        path: str,
        max_attempts: int = 10,
        interval: float = 1.0,
    ) -> bool:
        client = await self._get_client()
        url = self.preview_url(path)
        for _ in range(max_attempts):
            try:
                response = await client.head(url)
                if response.is_success:
                    return True
            except httpx.HTTPError:
                pass
            await asyncio.sleep(interval)
        return False


# =============================================================================
# PUBLISHER
# =============================================================================


class CMSPublisher:
    """``publish(path, html)`` over DA plus the AEM admin API."""

    def __init__(
        self,
        da: DAClient,
        admin: AEMAdminClient,
        enabled: bool = True,
        preview_wait_attempts: int = 10,
        preview_wait_interval: float = 1.0,
    ):
        self.da = da
        self.admin = admin
        self.enabled = enabled
        self.preview_wait_attempts = preview_wait_attempts
        self.preview_wait_interval = preview_wait_interval

    async def exists(self, path: str) -> bool:
        return await self.da.exists(path)

    async def publish(
        self,
        path: str,
        html: str,
        media: list[MediaFile] | None = None,
    ) -> PublishResult:
        if not self.enabled:
            return PublishResult(success=False, error="Publishing disabled")

        for item in media or []:
            try:
                await self.da.upload_media(item)
            except CMSError as e:
                logger.warning("Media upload failed, continuing", filename=item.filename, error=str(e))

        try:
            await self.da.create_page(path, html)
            preview = await self.admin.preview(path)

            ready = await self.admin.wait_for_preview(
                path,
                max_attempts=self.preview_wait_attempts,
                interval=self.preview_wait_interval,
            )
            if not ready:
                logger.warning("Preview not ready within timeout, publishing anyway", path=path)

            live = await self.admin.publish(path)
        except CMSError as e:
            logger.warning("Publish failed", path=path, error=str(e))
            return PublishResult(success=False, error=str(e))

        await self.admin.purge_cache(path)
        logger.info("Page published", path=path, live=live)
        return PublishResult(success=True, urls=PublishUrls(preview=preview, live=live))

    async def close(self) -> None:
        await self.da.close()
        await self.admin.close()


_H1 = re.compile(r"<h1[^>]*>([^<]+)</h1>")


def build_cms_page_html(query: str, blocks: list[PersistedBlock]) -> str:
    """Page document from client-rendered blocks, one section per block."""
    title = query
    if blocks:
        match = _H1.search(blocks[0].html)
        if match:
            title = match.group(1)

    sections = []
    for block in blocks:
        section = block.html
        if block.section_style and block.section_style != "default":
            section += (
                '\n<div class="section-metadata">'
                f"<div><div>style</div><div>{escape(block.section_style)}</div></div>"
                "</div>"
            )
        sections.append(f"    <div>{section}</div>")

    body = "\n".join(sections)
    return (
        "<!DOCTYPE html>\n<html>\n<head>\n"
        f"  <title>{escape(title)} | Vitamix</title>\n"
        f'  <meta name="description" content="Personalized content about: {escape(query)}">\n'
        "</head>\n<body>\n  <header></header>\n  <main>\n"
        f"{body}\n"
        "  </main>\n  <footer></footer>\n</body>\n</html>"
    )
