"""Layout selection and post-retrieval correction."""

import re

from generative_pages.data.intent import IntentClassification
from generative_pages.data.layout import LayoutBlock, LayoutDecision, LayoutTemplate
from generative_pages.data.retrieval import AssembledContext
from generative_pages.layouts.catalog import (
    LAYOUT_CATEGORY_BROWSE,
    LAYOUT_EDUCATIONAL,
    LAYOUT_LIFESTYLE,
    LAYOUT_PRODUCT_COMPARISON,
    LAYOUT_PRODUCT_DETAIL,
    LAYOUT_PROMOTIONAL,
    LAYOUT_RECIPE_COLLECTION,
    LAYOUT_SUPPORT,
    LAYOUT_USE_CASE_LANDING,
    get_layout_by_id,
)
from generative_pages.utils.logging import get_logger


logger = get_logger(__name__)


CONFIDENT_LAYOUT_THRESHOLD = 0.85

KNOWN_PRODUCTS: tuple[str, ...] = (
    "a3500", "a2500", "a2300",
    "e310", "e320",
    "pro 750", "pro750", "pro 500", "pro500",
    "5200", "5300", "7500",
    "immersion blender",
)

USE_CASE_PATTERNS = [
    re.compile(r"every\s+(morning|day|week|night|evening)", re.I),
    re.compile(r"daily\s+(routine|habit|use|smoothie|juice)", re.I),
    re.compile(r"(morning|evening|breakfast|lunch|dinner)\s+routine", re.I),
    re.compile(r"meal\s+prep", re.I),
    re.compile(r"for\s+(breakfast|lunch|dinner)\s+(every|daily|each)", re.I),
    re.compile(r"\b(weekly|daily)\s+(meal|food|nutrition)", re.I),
    re.compile(r"start\s+(my|the|your)\s+(day|morning)", re.I),
    re.compile(r"each\s+(morning|day|week)", re.I),
]

PROMOTIONAL_PATTERNS = [
    re.compile(r"mother'?s?\s*day", re.I),
    re.compile(r"father'?s?\s*day", re.I),
    re.compile(r"black\s*friday", re.I),
    re.compile(r"cyber\s*monday", re.I),
    re.compile(r"(christmas|holiday|thanksgiving)\s*(gift|deal|sale|special)", re.I),
    re.compile(r"(summer|winter|spring|fall)\s+(sale|special|campaign|collection)", re.I),
    re.compile(r"\b(gift\s+guide|gift\s+ideas?|promotions?|deals?)\b", re.I),
]


def is_bare_product_query(query: str) -> bool:
    """True for queries like "a3500", "the A3500" or "Vitamix pro 750"."""
    normalized = query.strip().lower()
    return any(
        normalized in (product, f"the {product}", f"vitamix {product}")
        for product in KNOWN_PRODUCTS
    )


def _matches(text: str, patterns: list[re.Pattern]) -> bool:
    return any(pattern.search(text) for pattern in patterns)


def select_layout(intent: IntentClassification, query: str = "") -> LayoutTemplate:
    """
    Pick a layout for an intent.

    Priority:
    1. Bare product query, or a "comparison" naming one product: product-detail
    2. Classifier's layout when confidence >= 0.85 and the id exists
    3. Rule-based mapping from intent type, entities and goal phrasing
    """
    products = intent.entities.products

    if query and is_bare_product_query(query):
        logger.debug("Layout override for bare product query", query=query)
        return LAYOUT_PRODUCT_DETAIL

    if len(products) == 1 and (
        intent.layout_id == "product-comparison" or intent.intent_type == "comparison"
    ):
        return LAYOUT_PRODUCT_DETAIL

    if intent.confidence >= CONFIDENT_LAYOUT_THRESHOLD:
        suggested = get_layout_by_id(intent.layout_id)
        if suggested:
            return suggested

    goals_text = " ".join(goal.lower() for goal in intent.entities.goals)

    if intent.intent_type == "support":
        return LAYOUT_SUPPORT
    if intent.intent_type == "comparison":
        return LAYOUT_PRODUCT_COMPARISON
    if intent.intent_type == "product_info":
        return LAYOUT_PRODUCT_DETAIL if len(products) == 1 else LAYOUT_CATEGORY_BROWSE
    if intent.intent_type == "recipe":
        if _matches(goals_text, USE_CASE_PATTERNS) or _matches(query, USE_CASE_PATTERNS):
            return LAYOUT_USE_CASE_LANDING
        return LAYOUT_RECIPE_COLLECTION
    if _matches(goals_text, PROMOTIONAL_PATTERNS) or _matches(query, PROMOTIONAL_PATTERNS):
        return LAYOUT_PROMOTIONAL
    if "support" in intent.content_types or "editorial" in intent.content_types:
        return LAYOUT_EDUCATIONAL
    return LAYOUT_LIFESTYLE


def adjust_layout_for_context(
    layout: LayoutTemplate,
    context: AssembledContext,
    query: str = "",
) -> LayoutTemplate:
    """Correct the layout once the available evidence is known."""
    product_count = context.count_by_type("product")
    recipe_count = context.count_by_type("recipe")

    adjusted = layout
    if layout.id == "recipe-collection" and recipe_count == 0:
        adjusted = LAYOUT_LIFESTYLE
    elif layout.id == "product-detail" and product_count > 1:
        if not (query and is_bare_product_query(query)):
            adjusted = LAYOUT_PRODUCT_COMPARISON
    elif layout.id == "product-detail" and product_count == 0:
        adjusted = LAYOUT_CATEGORY_BROWSE
    elif layout.id == "category-browse" and product_count == 1:
        adjusted = LAYOUT_PRODUCT_DETAIL

    if adjusted is not layout:
        logger.info(
            "Layout adjusted for retrieved content",
            original=layout.id,
            adjusted=adjusted.id,
            products=product_count,
            recipes=recipe_count,
        )
    return adjusted


def to_layout_decision(layout: LayoutTemplate) -> LayoutDecision:
    """Flatten a template into positioned blocks."""
    blocks = []
    index = 0
    for section in layout.sections:
        for block in section.blocks:
            blocks.append(
                LayoutBlock(
                    block_type=block.type,
                    content_index=index,
                    variant=block.variant or "default",
                    width=block.width or "contained",
                    section_style=section.style,
                )
            )
            index += 1
    return LayoutDecision(layout_id=layout.id, blocks=blocks)
