"""
Imagen 3 on Vertex AI.

Authenticates with a service-account key: an RS256-signed JWT assertion is
exchanged for an OAuth access token, which is cached until shortly before
it expires.
"""

import asyncio
import base64
import json
import time
from dataclasses import dataclass
from typing import Any

import httpx
import jwt

from generative_pages.core.exceptions import ImageGenerationError
from generative_pages.core.resilience import (
    image_circuit_breaker,
    image_retry,
    wrap_httpx_errors,
)
from generative_pages.images.prompts import build_image_prompt
from generative_pages.images.providers.base import ImageAsset, ImageProvider
from generative_pages.utils.logging import get_logger


logger = get_logger(__name__)


TOKEN_URL = "https://oauth2.googleapis.com/token"
TOKEN_SCOPE = "https://www.googleapis.com/auth/cloud-platform"
JWT_BEARER_GRANT = "urn:ietf:params:oauth:grant-type:jwt-bearer"
IMAGEN_MODEL = "imagen-3.0-generate-001"
TOKEN_REFRESH_MARGIN_SECONDS = 60

ASPECT_RATIOS: dict[str, str] = {
    "hero": "16:9",
    "card": "4:3",
    "column": "3:4",
    "thumbnail": "4:3",
}


@dataclass
class TokenCache:
    token: str = ""
    expires_at: float = 0.0

    def valid(self, now: float | None = None) -> bool:
        now = time.time() if now is None else now
        return bool(self.token) and now < self.expires_at - TOKEN_REFRESH_MARGIN_SECONDS


class ImagenProvider(ImageProvider):
    name = "imagen"
    batch_size = 3

    def __init__(
        self,
        service_account_json: str,
        region: str = "us-central1",
        timeout: float = 60.0,
    ):
        self.credentials: dict[str, Any] = json.loads(service_account_json)
        self.project_id: str = self.credentials["project_id"]
        self.region = region
        self.timeout = timeout
        self._token = TokenCache()
        self._token_lock = asyncio.Lock()
        self._client: httpx.AsyncClient | None = None

    @property
    def endpoint(self) -> str:
        return (
            f"https://{self.region}-aiplatform.googleapis.com/v1/projects/{self.project_id}"
            f"/locations/{self.region}/publishers/google/models/{IMAGEN_MODEL}:predict"
        )

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def build_assertion(self, now: int | None = None) -> str:
        now = int(time.time()) if now is None else now
        claims = {
            "iss": self.credentials["client_email"],
            "sub": self.credentials["client_email"],
            "aud": TOKEN_URL,
            "iat": now,
            "exp": now + 3600,
            "scope": TOKEN_SCOPE,
        }
        return jwt.encode(claims, self.credentials["private_key"], algorithm="RS256")

    @wrap_httpx_errors
    async def _access_token(self) -> str:
        async with self._token_lock:
            if self._token.valid():
                return self._token.token

            client = await self._get_client()
            response = await client.post(
                TOKEN_URL,
                data={"grant_type": JWT_BEARER_GRANT, "assertion": self.build_assertion()},
            )
            response.raise_for_status()
            body = response.json()

            self._token = TokenCache(
                token=body["access_token"],
                expires_at=time.time() + float(body.get("expires_in", 3600)),
            )
            logger.debug("Vertex AI access token refreshed")
            return self._token.token

    @image_retry
    @image_circuit_breaker
    @wrap_httpx_errors
    async def generate(self, prompt: str, size: str) -> ImageAsset:
        token = await self._access_token()
        client = await self._get_client()

        response = await client.post(
            self.endpoint,
            json={
                "instances": [{"prompt": build_image_prompt(prompt, size)}],
                "parameters": {
                    "sampleCount": 1,
                    "aspectRatio": ASPECT_RATIOS.get(size, "4:3"),
                    "safetyFilterLevel": "block_only_high",
                    "personGeneration": "allow_adult",
                },
            },
            headers={"Authorization": f"Bearer {token}"},
        )
        response.raise_for_status()

        predictions = response.json().get("predictions") or []
        if not predictions or not predictions[0].get("bytesBase64Encoded"):
            raise ImageGenerationError("Imagen response contained no image", provider=self.name)

        prediction = predictions[0]
        return ImageAsset(
            data=base64.b64decode(prediction["bytesBase64Encoded"]),
            content_type=prediction.get("mimeType", "image/png"),
        )
