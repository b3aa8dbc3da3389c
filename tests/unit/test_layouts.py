"""Tests for layout selection."""

import pytest

from generative_pages.data.intent import Entities, IntentClassification
from generative_pages.data.retrieval import AssembledContext
from generative_pages.layouts.catalog import LAYOUTS, format_layout_for_prompt, get_layout_by_id
from generative_pages.layouts.selector import (
    adjust_layout_for_context,
    is_bare_product_query,
    select_layout,
    to_layout_decision,
)

from tests.fakes import make_chunk


CORE_BLOCK_TYPES = {"hero", "cards", "columns", "split-content", "text", "cta", "faq"}


def intent(intent_type="general", confidence=0.6, layout_id=None, products=(), goals=(), content_types=None):
    return IntentClassification(
        intent_type=intent_type,
        confidence=confidence,
        layout_id=layout_id,
        content_types=content_types or ["editorial"],
        entities=Entities(products=list(products), goals=list(goals)),
    )


def context(products=0, recipes=0) -> AssembledContext:
    chunks = [make_chunk(f"p{i}", 0.8, content_type="product") for i in range(products)]
    chunks += [make_chunk(f"r{i}", 0.8, content_type="recipe") for i in range(recipes)]
    return AssembledContext(chunks=chunks)


class TestCatalog:
    def test_layouts_use_core_block_types_only(self):
        for layout in LAYOUTS:
            assert set(layout.block_types) <= CORE_BLOCK_TYPES

    def test_lookup(self):
        assert get_layout_by_id("support").id == "support"
        assert get_layout_by_id("nope") is None
        assert get_layout_by_id(None) is None

    def test_prompt_description_lists_blocks(self):
        description = format_layout_for_prompt(get_layout_by_id("recipe-collection"))
        assert "ID: recipe-collection" in description
        assert "split-content" in description


class TestSelectLayout:
    """Priority order of layout selection."""

    @pytest.mark.parametrize("query", ["A3500", "the a3500", "Vitamix pro 750"])
    def test_bare_product_query(self, query):
        assert is_bare_product_query(query)
        assert select_layout(intent("general", 0.95, "lifestyle"), query).id == "product-detail"

    def test_single_product_comparison_is_detail(self):
        classified = intent("comparison", 0.9, "product-comparison", products=["A3500"])
        assert select_layout(classified, "is the A3500 worth it").id == "product-detail"

    def test_confident_suggestion_wins(self):
        assert select_layout(intent("recipe", 0.9, "quick-answer"), "q").id == "quick-answer"

    def test_unknown_suggestion_falls_through(self):
        assert select_layout(intent("support", 0.9, "made-up"), "q").id == "support"

    def test_low_confidence_suggestion_ignored(self):
        assert select_layout(intent("comparison", 0.5, "quick-answer"), "q").id == "product-comparison"

    @pytest.mark.parametrize(
        "classified,expected",
        [
            (intent("support"), "support"),
            (intent("comparison"), "product-comparison"),
            (intent("product_info", products=["A3500"]), "product-detail"),
            (intent("product_info"), "category-browse"),
            (intent("recipe"), "recipe-collection"),
            (intent("recipe", goals=["smoothies every morning"]), "use-case-landing"),
            (intent("general", goals=["black friday deals"]), "promotional"),
            (intent("general"), "educational"),
            (intent("general", content_types=["brand"]), "lifestyle"),
        ],
    )
    def test_rule_based_mapping(self, classified, expected):
        assert select_layout(classified, "something").id == expected


class TestAdjustLayout:
    def test_recipe_collection_without_recipes_becomes_lifestyle(self):
        layout = get_layout_by_id("recipe-collection")
        assert adjust_layout_for_context(layout, context()).id == "lifestyle"

    def test_detail_with_several_products_becomes_comparison(self):
        layout = get_layout_by_id("product-detail")
        assert adjust_layout_for_context(layout, context(products=2)).id == "product-comparison"

    def test_bare_product_query_keeps_detail(self):
        layout = get_layout_by_id("product-detail")
        assert adjust_layout_for_context(layout, context(products=3), "A3500").id == "product-detail"

    def test_detail_without_products_becomes_browse(self):
        layout = get_layout_by_id("product-detail")
        assert adjust_layout_for_context(layout, context()).id == "category-browse"

    def test_browse_with_one_product_becomes_detail(self):
        layout = get_layout_by_id("category-browse")
        assert adjust_layout_for_context(layout, context(products=1)).id == "product-detail"

    def test_unchanged_layout_is_same_object(self):
        layout = get_layout_by_id("support")
        assert adjust_layout_for_context(layout, context()) is layout


class TestLayoutDecision:
    def test_positions_and_section_styles(self):
        decision = to_layout_decision(get_layout_by_id("recipe-collection"))

        assert decision.layout_id == "recipe-collection"
        assert [b.block_type for b in decision.blocks] == ["hero", "cards", "split-content", "cta"]
        assert [b.content_index for b in decision.blocks] == [0, 1, 2, 3]
        assert [b.section_style for b in decision.blocks] == [None, None, "dark", "highlight"]
        assert decision.blocks[0].width == "full"
        assert decision.blocks[0].variant == "full-width"
        assert decision.blocks[1].variant == "default"
