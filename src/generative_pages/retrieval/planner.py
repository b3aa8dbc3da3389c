"""Retrieval strategy planner.

Chooses how to search the vector index for a query. Strategies are tried in
priority order and the first match wins:

1. catalog        "show me all blenders" style browsing, one hit per product
2. comprehensive  comparisons and recommendations, one hit per product
3. ingredient     recipe queries naming known ingredients, boosted by matches
4. filtered       recipe, support and single-product queries
5. semantic       everything else

Metadata filters are unreliable in the index, so every strategy folds its
category signal into ``semantic_query`` instead. ``filters`` is kept on the
plan for logging and downstream hints only.

Everything here is pure: no I/O, deterministic for a given input.
"""

import re

from generative_pages.data.intent import IntentClassification
from generative_pages.data.retrieval import RetrievalFilters, RetrievalPlan


# =============================================================================
# VOCABULARY
# =============================================================================

COMMON_INGREDIENTS: tuple[str, ...] = (
    # Fruits
    "banana", "apple", "orange", "mango", "pineapple", "strawberry", "blueberry",
    "raspberry", "blackberry", "peach", "pear", "grape", "watermelon", "lemon",
    "lime", "avocado", "coconut", "cherry", "kiwi", "papaya", "acai", "date",
    # Vegetables
    "spinach", "kale", "carrot", "celery", "cucumber", "tomato", "beet", "ginger",
    "garlic", "onion", "pepper", "broccoli", "cauliflower", "zucchini", "squash",
    "sweet potato", "potato", "pumpkin", "corn",
    # Proteins and dairy
    "milk", "yogurt", "protein", "almond milk", "oat milk", "soy milk", "cheese",
    "cream", "butter", "egg", "chicken", "tofu",
    # Nuts and seeds
    "almond", "cashew", "walnut", "peanut", "chia", "flax", "hemp", "sunflower",
    # Other
    "oat", "honey", "maple", "chocolate", "cocoa", "coffee", "matcha", "vanilla",
    "cinnamon", "turmeric", "ice",
)

PRODUCT_CATEGORIES: dict[str, str] = {
    "blender": "blender",
    "blenders": "blender",
    "mixer": "blender",
    "container": "container",
    "containers": "container",
    "accessory": "accessory",
    "accessories": "accessory",
    "attachment": "accessory",
    "attachments": "accessory",
    "blade": "accessory",
    "blades": "accessory",
    "cup": "container",
    "cups": "container",
    "bowl": "container",
    "bowls": "container",
}

RECIPE_CATEGORIES: dict[str, str] = {
    "smoothie": "smoothie",
    "smoothies": "smoothie",
    "shake": "smoothie",
    "shakes": "smoothie",
    "soup": "soup",
    "soups": "soup",
    "sauce": "sauce",
    "sauces": "sauce",
    "dip": "dip",
    "dips": "dip",
    "dessert": "dessert",
    "desserts": "dessert",
    "ice cream": "dessert",
    "sorbet": "dessert",
    "breakfast": "breakfast",
    "baby": "baby food",
    "baby food": "baby food",
    "juice": "juice",
    "juices": "juice",
    "cocktail": "cocktail",
    "cocktails": "cocktail",
    "drink": "drink",
    "drinks": "drink",
    "butter": "nut butter",
    "nut butter": "nut butter",
    "peanut butter": "nut butter",
    "almond butter": "nut butter",
    "dough": "dough",
    "batter": "batter",
    "flour": "flour",
    "hummus": "dip",
    "pesto": "sauce",
    "salsa": "sauce",
    "puree": "puree",
}

CATALOG_PATTERNS = [
    re.compile(r"\ball\b\s+(?:the\s+)?(?:vitamix\s+)?(blenders?|products?|models?|containers?|accessories)", re.I),
    re.compile(r"show\s+(?:me\s+)?(?:all\s+)?(?:the\s+)?(?:vitamix\s+)?(blenders?|products?|models?)", re.I),
    re.compile(r"list\s+(?:of\s+)?(?:all\s+)?(?:vitamix\s+)?(blenders?|products?|models?)", re.I),
    re.compile(r"what\s+(blenders?|products?|models?|options?)\s+(?:do\s+you\s+have|are\s+available)", re.I),
    re.compile(r"(?:vitamix\s+)?(blenders?|products?)\s+(?:you\s+have|available|lineup|range|selection)", re.I),
    re.compile(r"browse\s+(?:all\s+)?(?:vitamix\s+)?(blenders?|products?)", re.I),
    re.compile(r"see\s+all\s+(blenders?|products?|models?)", re.I),
]

COMPARISON_PATTERNS = [
    re.compile(r"best\s+(?:vitamix\s+)?(?:blender\s+)?(?:for\s+me|for\s+my)", re.I),
    re.compile(r"which\s+(?:vitamix\s+)?(?:blender\s+)?(?:should|would|do\s+you)", re.I),
    re.compile(r"help\s+me\s+(?:choose|pick|decide|select)", re.I),
    re.compile(r"recommend\s+(?:a\s+)?(?:vitamix|blender)", re.I),
    re.compile(r"what\s+(?:vitamix|blender)\s+(?:should\s+i|do\s+you\s+recommend)", re.I),
    re.compile(r"compare\s+(?:vitamix\s+)?(?:blenders?|models?|all)", re.I),
    re.compile(r"difference\s+between", re.I),
    re.compile(r"vs\.?\s+|\bversus\b", re.I),
]

EXPLICIT_INGREDIENT_PATTERNS = [
    re.compile(r"(?:with|using|containing|has|have)\s+([\w\s,]+?)(?:\s+recipes?|\s+smoothies?|\s+ideas?|$)", re.I),
    re.compile(r"recipes?\s+(?:with|for|using)\s+([\w\s,]+)", re.I),
    re.compile(r"([\w\s,]+?)\s+(?:recipes?|smoothies?|ideas?)", re.I),
]

_INGREDIENT_SPLIT = re.compile(r"[,\s]+and\s+|,\s*|\s+and\s+")

# First matching term wins; the expansion is appended to the query.
SUPPORT_EXPANSIONS: dict[str, str] = {
    "noise": "grinding noise loud sound troubleshooting",
    "leak": "leaking dripping seal gasket troubleshooting",
    "won't turn on": "not turning on power issue troubleshooting",
    "doesn't start": "not starting power issue troubleshooting",
    "smoke": "smoking burning smell overheating troubleshooting",
    "smell": "burning smell odor troubleshooting",
    "stuck": "stuck jammed blade troubleshooting",
    "clean": "cleaning maintenance wash care",
    "warranty": "warranty coverage repair service",
}

SYNONYM_EXPANSIONS: dict[str, list[str]] = {
    "blender": ["blenders", "vitamix"],
    "smoothie": ["smoothies", "shake", "blend"],
    "soup": ["soups", "hot soup", "blended soup"],
    "recipe": ["recipes", "how to make"],
    "clean": ["cleaning", "wash", "maintenance"],
}


# =============================================================================
# PLANNER
# =============================================================================


def plan_retrieval(query: str, intent: IntentClassification) -> RetrievalPlan:
    """Choose a retrieval strategy for ``query``."""
    lower_query = query.lower()

    if is_catalog_query(lower_query, intent):
        category = extract_product_category(lower_query)
        return RetrievalPlan(
            strategy="catalog",
            semantic_query=f"vitamix {category or 'blender'} products models",
            top_k=50,
            relevance_threshold=0.5,
            filters=RetrievalFilters(content_types=["product"], product_category=category),
            dedupe_mode="by-key",
            max_results=12,
            reasoning=(
                f'Catalog query detected. Semantic search for "{category or "blender"}" '
                "products, one result per product."
            ),
        )

    if is_comparison_query(lower_query, intent):
        return RetrievalPlan(
            strategy="comprehensive",
            semantic_query=build_comparison_query(intent),
            top_k=30,
            relevance_threshold=0.5,
            filters=RetrievalFilters(content_types=["product"]),
            dedupe_mode="by-key",
            max_results=10,
            reasoning="Comparison query detected. Getting comprehensive product data.",
        )

    ingredients = extract_ingredients(lower_query)
    if ingredients and intent.intent_type == "recipe":
        category = extract_recipe_category(lower_query)
        suffix = f" {category}" if category else ""
        return RetrievalPlan(
            strategy="ingredient",
            semantic_query=f"vitamix recipes with {' and '.join(ingredients)}{suffix}",
            top_k=25,
            relevance_threshold=0.55,
            filters=RetrievalFilters(content_types=["recipe"], recipe_category=category),
            dedupe_mode="by-source",
            max_results=8,
            boost_terms=ingredients,
            reasoning=(
                f"Ingredient query detected. Searching for recipes with: {', '.join(ingredients)}. "
                "Results containing these ingredients are boosted."
            ),
        )

    if intent.intent_type == "recipe":
        category = extract_recipe_category(lower_query)
        return RetrievalPlan(
            strategy="filtered",
            semantic_query=f"vitamix {category} recipes {query}" if category else query,
            top_k=20,
            relevance_threshold=0.6,
            filters=RetrievalFilters(content_types=["recipe"], recipe_category=category),
            dedupe_mode="by-source",
            max_results=8,
            reasoning=f'Recipe query with semantic search for "{category or "recipes"}".',
        )

    if intent.intent_type == "support":
        return RetrievalPlan(
            strategy="filtered",
            semantic_query=expand_support_query(query),
            top_k=15,
            relevance_threshold=0.65,
            filters=RetrievalFilters(content_types=["support", "product"]),
            dedupe_mode="by-source",
            max_results=6,
            reasoning="Support query. Searching support docs and product info.",
        )

    if intent.intent_type == "product_info" and len(intent.entities.products) == 1:
        product = intent.entities.products[0]
        return RetrievalPlan(
            strategy="filtered",
            semantic_query=f"{product} vitamix blender features specifications",
            top_k=15,
            relevance_threshold=0.6,
            filters=RetrievalFilters(content_types=["product"]),
            dedupe_mode="similarity",
            max_results=5,
            reasoning=f'Single product query for "{product}".',
        )

    return RetrievalPlan(
        strategy="semantic",
        semantic_query=expand_query(query),
        top_k=10,
        relevance_threshold=0.7,
        filters=RetrievalFilters(content_types=list(intent.content_types)),
        dedupe_mode="similarity",
        max_results=5,
        reasoning="Default semantic search.",
    )


# =============================================================================
# QUERY SHAPE DETECTION
# =============================================================================


def is_catalog_query(query: str, intent: IntentClassification) -> bool:
    if any(pattern.search(query) for pattern in CATALOG_PATTERNS):
        return True
    return intent.layout_id == "category-browse" and not intent.entities.products


def is_comparison_query(query: str, intent: IntentClassification) -> bool:
    if any(pattern.search(query) for pattern in COMPARISON_PATTERNS):
        return True
    return intent.intent_type == "comparison"


def extract_product_category(query: str) -> str | None:
    for term, category in PRODUCT_CATEGORIES.items():
        if term in query:
            return category
    return None


def extract_recipe_category(query: str) -> str | None:
    for term, category in RECIPE_CATEGORIES.items():
        if term in query:
            return category
    return None


def extract_ingredients(query: str) -> list[str]:
    """Known ingredients named in ``query``, in order of appearance.

    Explicit phrases ("with kale and mango", "banana smoothies") are read
    first; if none yield a known ingredient, the whole query is scanned on
    word boundaries so "ice" does not match inside "rice".
    """
    query = query.lower()
    found: list[str] = []

    for pattern in EXPLICIT_INGREDIENT_PATTERNS:
        match = pattern.search(query)
        if not match:
            continue
        for part in _INGREDIENT_SPLIT.split(match.group(1)):
            candidate = part.strip()
            if candidate in COMMON_INGREDIENTS:
                found.append(candidate)

    if not found:
        for ingredient in COMMON_INGREDIENTS:
            if re.search(rf"\b{re.escape(ingredient)}s?\b", query):
                found.append(ingredient)

    return list(dict.fromkeys(found))


# =============================================================================
# QUERY REWRITING
# =============================================================================


def build_comparison_query(intent: IntentClassification) -> str:
    products = intent.entities.products
    goals = intent.entities.goals

    if len(products) >= 2:
        return f"compare {' vs '.join(products)} vitamix blender features specifications"
    if goals:
        return f"best vitamix blender for {' '.join(goals)}"
    return "vitamix blender comparison features specifications models"


def expand_support_query(query: str) -> str:
    lower_query = query.lower()
    for term, expansion in SUPPORT_EXPANSIONS.items():
        if term in lower_query:
            return f"{query} {expansion}"
    return query


def expand_query(query: str) -> str:
    """Append one synonym for the first recognised term."""
    lower_query = query.lower()
    for term, synonyms in SYNONYM_EXPANSIONS.items():
        if term in lower_query:
            synonym = synonyms[0]
            if synonym not in lower_query:
                return f"{query} {synonym}"
            return query
    return query
