"""Centralized resilience patterns using hyx.

Every external capability the pipeline awaits gets its own policy:
- LLM calls (intent, content, toxicity, brand scoring)
- Retrieval calls (embeddings and vector index queries)
- Image generation calls
- CMS calls (DA source API and AEM admin API)

Usage:
    from generative_pages.core.resilience import (
        llm_retry,
        llm_circuit_breaker,
        llm_timeout,
        wrap_anthropic_errors,
    )

    @llm_retry
    @llm_circuit_breaker
    @llm_timeout
    @wrap_anthropic_errors
    async def call_llm_api(...):
        ...
"""

import asyncio
from functools import wraps
from typing import Any, Callable, TypeVar

import anthropic
import httpx
import openai
from hyx.retry.api import retry
from hyx.retry.backoffs import expo
from hyx.circuitbreaker.api import consecutive_breaker
from hyx.circuitbreaker.exceptions import BreakerFailing
from hyx.timeout.exceptions import MaxDurationExceeded

# Aliases for clarity
BreakerOpen = BreakerFailing
MaxTimeoutExceeded = MaxDurationExceeded

__all__ = [
    # Exceptions
    "BreakerOpen",
    "MaxTimeoutExceeded",
    "TransientError",
    "RateLimitError",
    # LLM patterns
    "llm_retry",
    "llm_circuit_breaker",
    "llm_timeout",
    # Retrieval patterns
    "retrieval_retry",
    "retrieval_circuit_breaker",
    # Image patterns
    "image_retry",
    "image_circuit_breaker",
    # CMS patterns
    "cms_retry",
    "cms_circuit_breaker",
    # Error translation
    "classify_http_error",
    "wrap_httpx_errors",
    "wrap_anthropic_errors",
    "wrap_openai_errors",
    # Configuration
    "ResilienceConfig",
]


# =============================================================================
# CUSTOM EXCEPTIONS
# =============================================================================


class TransientError(Exception):
    """Error that is likely to succeed on retry (network issues, timeouts)."""
    pass


class RateLimitError(Exception):
    """Error indicating rate limiting (HTTP 429, throttling)."""
    pass


class PermanentHTTPError(Exception):
    """Non-retryable HTTP failure (4xx other than 429)."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


# =============================================================================
# CONFIGURATION
# =============================================================================


class ResilienceConfig:
    """Centralized configuration for resilience patterns."""

    # LLM Configuration
    LLM_RETRY_ATTEMPTS: int = 3
    LLM_RETRY_BACKOFF_BASE: float = 2.0  # seconds (longer for rate limits)
    LLM_RETRY_BACKOFF_MAX: float = 60.0  # seconds

    LLM_CIRCUIT_FAILURE_THRESHOLD: int = 3
    LLM_CIRCUIT_RECOVERY_TIME: float = 60.0  # seconds
    LLM_CIRCUIT_RECOVERY_THRESHOLD: int = 1

    LLM_TIMEOUT: float = 120.0  # seconds (content generation can be slow)

    # Retrieval Configuration
    RETRIEVAL_RETRY_ATTEMPTS: int = 3
    RETRIEVAL_RETRY_BACKOFF_BASE: float = 0.5  # seconds
    RETRIEVAL_RETRY_BACKOFF_MAX: float = 5.0  # seconds

    RETRIEVAL_CIRCUIT_FAILURE_THRESHOLD: int = 5
    RETRIEVAL_CIRCUIT_RECOVERY_TIME: float = 30.0  # seconds
    RETRIEVAL_CIRCUIT_RECOVERY_THRESHOLD: int = 2

    # Image Configuration (one retry; failures fall back to curated images)
    IMAGE_RETRY_ATTEMPTS: int = 2
    IMAGE_RETRY_BACKOFF_BASE: float = 1.0  # seconds
    IMAGE_RETRY_BACKOFF_MAX: float = 4.0  # seconds

    IMAGE_CIRCUIT_FAILURE_THRESHOLD: int = 10
    IMAGE_CIRCUIT_RECOVERY_TIME: float = 60.0  # seconds
    IMAGE_CIRCUIT_RECOVERY_THRESHOLD: int = 1

    # CMS Configuration
    CMS_RETRY_ATTEMPTS: int = 3
    CMS_RETRY_BACKOFF_BASE: float = 1.0  # seconds
    CMS_RETRY_BACKOFF_MAX: float = 10.0  # seconds

    CMS_CIRCUIT_FAILURE_THRESHOLD: int = 5
    CMS_CIRCUIT_RECOVERY_TIME: float = 30.0  # seconds
    CMS_CIRCUIT_RECOVERY_THRESHOLD: int = 2


# =============================================================================
# LLM RESILIENCE PATTERNS
# =============================================================================


# Retry for LLM API calls with exponential backoff
llm_retry = retry(
    on=(TransientError, RateLimitError, ConnectionError, TimeoutError),
    attempts=ResilienceConfig.LLM_RETRY_ATTEMPTS,
    backoff=expo(
        min_delay_secs=ResilienceConfig.LLM_RETRY_BACKOFF_BASE,
        max_delay_secs=ResilienceConfig.LLM_RETRY_BACKOFF_MAX,
    ),
)

# Circuit breaker for LLM providers
llm_circuit_breaker = consecutive_breaker(
    exceptions=(TransientError, RateLimitError, ConnectionError),
    failure_threshold=ResilienceConfig.LLM_CIRCUIT_FAILURE_THRESHOLD,
    recovery_time_secs=ResilienceConfig.LLM_CIRCUIT_RECOVERY_TIME,
    recovery_threshold=ResilienceConfig.LLM_CIRCUIT_RECOVERY_THRESHOLD,
)

# Type variable for generic functions
F = TypeVar("F", bound=Callable[..., Any])


def llm_timeout(func: F) -> F:
    """
    Apply timeout to LLM operations with lazy initialization.

    The timeout manager is created per call, when an event loop is running,
    instead of at import time like the raw hyx.timeout decorator.
    """

    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await asyncio.wait_for(
                func(*args, **kwargs),
                timeout=ResilienceConfig.LLM_TIMEOUT,
            )
        except asyncio.TimeoutError:
            raise MaxTimeoutExceeded(
                f"Operation timed out after {ResilienceConfig.LLM_TIMEOUT}s"
            )

    return wrapper  # type: ignore


# =============================================================================
# RETRIEVAL RESILIENCE PATTERNS
# =============================================================================


retrieval_retry = retry(
    on=(TransientError, RateLimitError, ConnectionError, TimeoutError),
    attempts=ResilienceConfig.RETRIEVAL_RETRY_ATTEMPTS,
    backoff=expo(
        min_delay_secs=ResilienceConfig.RETRIEVAL_RETRY_BACKOFF_BASE,
        max_delay_secs=ResilienceConfig.RETRIEVAL_RETRY_BACKOFF_MAX,
    ),
)

retrieval_circuit_breaker = consecutive_breaker(
    exceptions=(TransientError, ConnectionError, TimeoutError),
    failure_threshold=ResilienceConfig.RETRIEVAL_CIRCUIT_FAILURE_THRESHOLD,
    recovery_time_secs=ResilienceConfig.RETRIEVAL_CIRCUIT_RECOVERY_TIME,
    recovery_threshold=ResilienceConfig.RETRIEVAL_CIRCUIT_RECOVERY_THRESHOLD,
)


# =============================================================================
# IMAGE RESILIENCE PATTERNS
# =============================================================================


image_retry = retry(
    on=(TransientError, RateLimitError, ConnectionError, TimeoutError),
    attempts=ResilienceConfig.IMAGE_RETRY_ATTEMPTS,
    backoff=expo(
        min_delay_secs=ResilienceConfig.IMAGE_RETRY_BACKOFF_BASE,
        max_delay_secs=ResilienceConfig.IMAGE_RETRY_BACKOFF_MAX,
    ),
)

image_circuit_breaker = consecutive_breaker(
    exceptions=(TransientError, RateLimitError, ConnectionError),
    failure_threshold=ResilienceConfig.IMAGE_CIRCUIT_FAILURE_THRESHOLD,
    recovery_time_secs=ResilienceConfig.IMAGE_CIRCUIT_RECOVERY_TIME,
    recovery_threshold=ResilienceConfig.IMAGE_CIRCUIT_RECOVERY_THRESHOLD,
)


# =============================================================================
# CMS RESILIENCE PATTERNS
# =============================================================================


cms_retry = retry(
    on=(TransientError, RateLimitError, ConnectionError, TimeoutError),
    attempts=ResilienceConfig.CMS_RETRY_ATTEMPTS,
    backoff=expo(
        min_delay_secs=ResilienceConfig.CMS_RETRY_BACKOFF_BASE,
        max_delay_secs=ResilienceConfig.CMS_RETRY_BACKOFF_MAX,
    ),
)

cms_circuit_breaker = consecutive_breaker(
    exceptions=(TransientError, ConnectionError, TimeoutError, BreakerOpen),
    failure_threshold=ResilienceConfig.CMS_CIRCUIT_FAILURE_THRESHOLD,
    recovery_time_secs=ResilienceConfig.CMS_CIRCUIT_RECOVERY_TIME,
    recovery_threshold=ResilienceConfig.CMS_CIRCUIT_RECOVERY_THRESHOLD,
)


# =============================================================================
# HELPER DECORATORS
# =============================================================================


def classify_http_error(status_code: int) -> Exception:
    """
    Classify HTTP status codes into appropriate exceptions.

    Args:
        status_code: HTTP status code

    Returns:
        RateLimitError for 429, TransientError for 5xx,
        PermanentHTTPError for everything else
    """
    if status_code == 429:
        return RateLimitError(f"Rate limited (HTTP {status_code})")
    elif status_code >= 500:
        return TransientError(f"Server error (HTTP {status_code})")
    elif status_code >= 400:
        return PermanentHTTPError(f"Client error (HTTP {status_code})", status_code)
    return PermanentHTTPError(f"Unknown error (HTTP {status_code})", status_code)


def wrap_httpx_errors(func: F) -> F:
    """
    Decorator to convert httpx exceptions to resilience-aware exceptions.

    This allows the retry and circuit breaker patterns to properly
    classify transient vs permanent errors.
    """
    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except httpx.TimeoutException as e:
            raise TransientError(f"Request timeout: {e}") from e
        except httpx.ConnectError as e:
            raise TransientError(f"Connection error: {e}") from e
        except httpx.HTTPStatusError as e:
            raise classify_http_error(e.response.status_code) from e

    return wrapper  # type: ignore


def wrap_anthropic_errors(func: F) -> F:
    """
    Decorator to convert Anthropic API exceptions to resilience-aware exceptions.
    """
    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except anthropic.RateLimitError as e:
            raise RateLimitError(f"Anthropic rate limit: {e}") from e
        except anthropic.APIConnectionError as e:
            raise TransientError(f"Anthropic connection error: {e}") from e
        except anthropic.InternalServerError as e:
            raise TransientError(f"Anthropic server error: {e}") from e
        except anthropic.APIStatusError as e:
            if e.status_code == 529:  # Overloaded
                raise TransientError(f"Anthropic overloaded: {e}") from e
            raise

    return wrapper  # type: ignore


def wrap_openai_errors(func: F) -> F:
    """
    Decorator to convert OpenAI API exceptions to resilience-aware exceptions.
    """
    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except openai.RateLimitError as e:
            raise RateLimitError(f"OpenAI rate limit: {e}") from e
        except openai.APIConnectionError as e:
            raise TransientError(f"OpenAI connection error: {e}") from e
        except openai.InternalServerError as e:
            raise TransientError(f"OpenAI server error: {e}") from e

    return wrapper  # type: ignore
