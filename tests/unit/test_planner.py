"""Tests for retrieval planning."""

import pytest

from generative_pages.data.intent import Entities, IntentClassification
from generative_pages.retrieval.planner import (
    expand_query,
    expand_support_query,
    extract_ingredients,
    plan_retrieval,
)


def intent(intent_type: str = "general", **kwargs) -> IntentClassification:
    return IntentClassification(intent_type=intent_type, confidence=0.8, **kwargs)


class TestPlanRetrieval:
    """Strategy selection, first match wins."""

    def test_recipe_query_without_ingredients_is_filtered(self):
        """Recipe category is folded into the semantic query."""
        plan = plan_retrieval("soup recipes for winter", intent("recipe"))
        assert plan.strategy == "filtered"
        assert plan.filters.recipe_category == "soup"
        assert plan.dedupe_mode == "by-source"
        assert plan.semantic_query.startswith("vitamix soup recipes")

    def test_product_comparison_is_comprehensive(self):
        """Two named products produce a comparison query, one hit per product."""
        classified = intent(
            "comparison",
            layout_id="product-comparison",
            entities=Entities(products=["A3500", "A2500"]),
        )
        plan = plan_retrieval("A3500 vs A2500", classified)
        assert plan.strategy == "comprehensive"
        assert plan.dedupe_mode == "by-key"
        assert plan.top_k == 30
        assert plan.semantic_query == (
            "compare A3500 vs A2500 vitamix blender features specifications"
        )

    def test_catalog_query(self):
        plan = plan_retrieval("show me all blenders", intent("product_info"))
        assert plan.strategy == "catalog"
        assert plan.top_k == 50
        assert plan.max_results == 12
        assert plan.filters.product_category == "blender"

    def test_category_browse_layout_without_products_is_catalog(self):
        plan = plan_retrieval("what do you sell", intent(layout_id="category-browse"))
        assert plan.strategy == "catalog"

    def test_ingredient_query_boosts_named_ingredients(self):
        """Boost terms are a subset of the ingredient vocabulary found in the query."""
        plan = plan_retrieval("smoothies with kale and mango", intent("recipe"))
        assert plan.strategy == "ingredient"
        assert plan.boost_terms == ["kale", "mango"]
        assert plan.relevance_threshold == 0.55
        assert "kale and mango" in plan.semantic_query

    def test_ingredients_ignored_outside_recipe_intent(self):
        plan = plan_retrieval("is banana good for me", intent("general"))
        assert plan.strategy == "semantic"
        assert plan.boost_terms == []

    def test_support_query_is_expanded(self):
        plan = plan_retrieval("my blender makes a loud noise", intent("support"))
        assert plan.strategy == "filtered"
        assert plan.top_k == 15
        assert "troubleshooting" in plan.semantic_query
        assert plan.filters.content_types == ["support", "product"]

    def test_single_product_query(self):
        classified = intent("product_info", entities=Entities(products=["A3500"]))
        plan = plan_retrieval("tell me about the A3500", classified)
        assert plan.strategy == "filtered"
        assert plan.dedupe_mode == "similarity"
        assert plan.semantic_query.startswith("A3500 vitamix blender")

    def test_default_semantic(self):
        plan = plan_retrieval("healthy lifestyle ideas", intent("general"))
        assert plan.strategy == "semantic"
        assert plan.top_k == 10
        assert plan.relevance_threshold == 0.7

    def test_plan_is_deterministic(self):
        classified = intent("recipe")
        assert plan_retrieval("banana smoothies", classified) == plan_retrieval(
            "banana smoothies", classified
        )


class TestExtractIngredients:
    @pytest.mark.parametrize(
        "query,expected",
        [
            ("recipes with spinach, banana and oat", ["spinach", "banana", "oat"]),
            ("mango smoothies", ["mango"]),
            ("fried rice", []),
            ("what can I make with almond milk", ["almond milk"]),
        ],
    )
    def test_known_ingredients(self, query, expected):
        assert extract_ingredients(query) == expected

    def test_no_duplicates(self):
        assert extract_ingredients("banana banana smoothie") == ["banana"]


class TestQueryRewriting:
    def test_expand_appends_one_synonym(self):
        assert expand_query("best blender for soup") == "best blender for soup blenders"

    def test_expand_skips_existing_synonym(self):
        assert expand_query("vitamix blenders") == "vitamix blenders"

    def test_support_expansion_first_match(self):
        assert expand_support_query("how to clean it").endswith("cleaning maintenance wash care")
