"""URL categories and slugs for persisted pages."""

import re
import time
from typing import Literal

from generative_pages.data.intent import IntentClassification


CategoryPath = Literal["smoothies", "recipes", "products", "compare", "tips", "discover"]

CATEGORY_ROUTES: tuple[str, ...] = (
    "/smoothies/",
    "/recipes/",
    "/products/",
    "/compare/",
    "/tips/",
    "/discover/",
)

SMOOTHIE_KEYWORDS: tuple[str, ...] = (
    "smoothie", "smoothies", "shake", "shakes", "blend", "blended",
    "juice", "juices", "frozen drink", "protein shake", "green drink",
)

_INTENT_CATEGORIES: dict[str, CategoryPath] = {
    "product_info": "products",
    "comparison": "compare",
    "support": "tips",
    "general": "discover",
}

STOP_WORDS = frozenset({
    "a", "an", "the", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "by", "from", "is", "it", "as", "be", "this", "that",
    "are", "was", "were", "been", "being", "have", "has", "had", "do",
    "does", "did", "will", "would", "could", "should", "may", "might",
    "can", "what", "how", "why", "when", "where", "which", "who",
    "my", "your", "me", "i", "we", "you", "make", "get", "want", "need",
    "like", "best", "good", "great", "some", "any", "please", "help",
})

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def classify_category(intent: IntentClassification, query: str) -> CategoryPath:
    if intent.intent_type == "recipe":
        query_lower = query.lower()
        if any(keyword in query_lower for keyword in SMOOTHIE_KEYWORDS):
            return "smoothies"
        return "recipes"
    return _INTENT_CATEGORIES.get(intent.intent_type, "discover")


def is_category_path(path: str) -> bool:
    return any(path.startswith(route) for route in CATEGORY_ROUTES)


def category_from_path(path: str) -> CategoryPath | None:
    for route in CATEGORY_ROUTES:
        if path.startswith(route):
            return route.strip("/")  # type: ignore[return-value]
    return None


def extract_keywords(query: str) -> list[str]:
    words = re.sub(r"[^a-z0-9\s]", "", query.lower()).split()
    return [w for w in words if len(w) > 2 and w not in STOP_WORDS][:6]


def short_hash(value: str) -> str:
    """Base-36 of the absolute 32-bit rolling hash of ``value``."""
    h = 0
    for char in value:
        h = (h * 31 + ord(char)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    h = abs(h)

    if h == 0:
        return "0"
    digits = []
    while h:
        h, remainder = divmod(h, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


def _now_ms() -> int:
    return int(time.time() * 1000)


def _clean(value: str) -> str:
    value = re.sub(r"\s+", "-", value.lower().strip())
    value = re.sub(r"[^a-z0-9-]", "", value)
    return re.sub(r"-+", "-", value)


def generate_semantic_slug(
    query: str,
    intent: IntentClassification,
    now_ms: int | None = None,
) -> str:
    """
    Slug built from the query's entities, e.g. ``spinach-banana-energy-k3x9a1``.

    Uses up to two ingredients, one goal and one product when at least two
    are present; otherwise up to four keywords from the query. A short
    time-salted hash keeps slugs unique.
    """
    entities = intent.entities
    concepts = [
        c for c in (*entities.ingredients[:2], *entities.goals[:1], *entities.products[:1]) if c
    ]

    if len(concepts) >= 2:
        base = _clean("-".join(concepts))[:50]
    else:
        base = "-".join(extract_keywords(query)[:4])[:50]

    stamp = _now_ms() if now_ms is None else now_ms
    return f"{base}-{short_hash(query + str(stamp))[:6]}"


def generate_slug(query: str, now_ms: int | None = None) -> str:
    """Slug from the whole query text, used for ``/discover/`` pages."""
    slug = re.sub(r"[^a-z0-9\s-]", "", query.lower().strip())
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug).strip("-")[:80]

    stamp = _now_ms() if now_ms is None else now_ms
    return f"{slug}-{short_hash(query + str(stamp))[:6]}"


def build_categorized_path(category: CategoryPath, slug: str) -> str:
    return f"/{category}/{slug}"
