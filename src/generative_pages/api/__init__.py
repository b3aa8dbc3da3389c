"""HTTP surface: generate stream, persist, health."""

from generative_pages.api.routes import router

__all__ = ["router"]
