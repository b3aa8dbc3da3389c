"""Application settings via environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings via environment variables."""

    # Anthropic
    anthropic_api_key: str = ""
    fast_model: str = "claude-haiku-4-5"  # intent, entities, safety
    content_model: str = "claude-sonnet-4-5"  # page copy

    # Embeddings (OpenAI-compatible)
    openai_api_key: str = ""
    openai_base_url: str | None = None  # Optional, for compatible gateways
    embedding_model: str = "text-embedding-3-small"

    # Vector index (HTTP query endpoint)
    vector_index_url: str = "http://localhost:8081"
    vector_index_api_key: str = ""
    vector_index_namespace: str = "vitamix"
    vector_index_timeout_seconds: float = 15.0

    # Image generation
    # Options: "fal" (FLUX schnell), "fal-lora" (FLUX + brand LoRA), "imagen" (Vertex AI)
    image_provider: Literal["fal", "fal-lora", "imagen"] = "fal"
    fal_api_key: str = ""
    fal_lora_url: str = ""
    google_service_account_json: str = ""
    vertex_ai_region: str = "us-east4"
    image_storage_path: str = "./storage/images"
    image_url_prefix: str = "/images"
    image_timeout_seconds: float = 60.0

    # Content management (DA + AEM admin)
    da_org: str = ""
    da_repo: str = ""
    da_token: str = ""
    aem_site: str = ""
    aem_ref: str = "main"
    publish_enabled: bool = True

    # Safety thresholds
    safety_brand_block: float = 50.0
    safety_brand_warn: float = 70.0
    safety_toxicity_block: float = 0.3
    safety_toxicity_warn: float = 0.1
    safety_critical_flag_limit: int = 1
    safety_high_flag_limit: int = 2
    safety_medium_flag_limit: int = 3

    # Pipeline
    generation_cache_ttl_seconds: int = 300  # 5 minutes
    generation_timeout_seconds: float = 300.0  # until the first block streams
    sse_keepalive_seconds: float = 15.0

    # Logging
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
