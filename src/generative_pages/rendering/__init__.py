"""Block and page HTML rendering."""

from generative_pages.rendering.html import (
    escape,
    extract_full_text,
    render_block,
    render_page,
    replace_image_placeholders,
)

__all__ = [
    "escape",
    "extract_full_text",
    "render_block",
    "render_page",
    "replace_image_placeholders",
]
