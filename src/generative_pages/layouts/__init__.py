"""Layout catalogue and selection."""

from generative_pages.layouts.catalog import LAYOUTS, get_layout_by_id, format_layout_for_prompt
from generative_pages.layouts.selector import (
    adjust_layout_for_context,
    is_bare_product_query,
    select_layout,
    to_layout_decision,
)

__all__ = [
    "LAYOUTS",
    "get_layout_by_id",
    "format_layout_for_prompt",
    "adjust_layout_for_context",
    "is_bare_product_query",
    "select_layout",
    "to_layout_decision",
]
