"""Fallback substitution for failed image generations.

Applied once per request after every attempt has finished:

- a failed hero gets a curated image chosen by a stable hash of
  ``image_id + prompt``, so the same slot always maps to the same image
- any other failed slot reuses a random successful sibling of the same
  slot type, or the hashed curated image when no sibling succeeded
"""

import random

from generative_pages.data.images import GeneratedImage, ImageAttempt, ImageRequest
from generative_pages.utils.logging import get_logger


logger = get_logger(__name__)


HERO_FALLBACKS: tuple[str, ...] = (
    "https://images.unsplash.com/photo-1638176066666-ffb2f013c7dd?w=2000&h=800&fit=crop&q=80",
    "https://images.unsplash.com/photo-1502741224143-90386d7f8c82?w=2000&h=800&fit=crop&q=80",
    "https://images.unsplash.com/photo-1546069901-ba9599a7e63c?w=2000&h=800&fit=crop&q=80",
    "https://images.unsplash.com/photo-1490818387583-1baba5e638af?w=2000&h=800&fit=crop&q=80",
    "https://images.unsplash.com/photo-1512621776951-a57141f2eefd?w=2000&h=800&fit=crop&q=80",
    "https://images.unsplash.com/photo-1622597467836-f3285f2131b8?w=2000&h=800&fit=crop&q=80",
)

CARD_FALLBACKS: tuple[str, ...] = (
    "https://images.unsplash.com/photo-1590301157890-4810ed352733?w=750&h=562&fit=crop&q=80",
    "https://images.unsplash.com/photo-1610970881699-44a5587cabec?w=750&h=562&fit=crop&q=80",
    "https://images.unsplash.com/photo-1571575173700-afb9492e6a50?w=750&h=562&fit=crop&q=80",
    "https://images.unsplash.com/photo-1540189549336-e6e99c3679fe?w=750&h=562&fit=crop&q=80",
)

COLUMN_FALLBACKS: tuple[str, ...] = (
    "https://images.unsplash.com/photo-1610970881699-44a5587cabec?w=600&h=400&fit=crop&q=80",
    "https://images.unsplash.com/photo-1498837167922-ddd27525d352?w=600&h=400&fit=crop&q=80",
    "https://images.unsplash.com/photo-1505253716362-afaea1d3d1af?w=600&h=400&fit=crop&q=80",
)

_POOLS = {"hero": HERO_FALLBACKS, "card": CARD_FALLBACKS, "column": COLUMN_FALLBACKS}


def string_hash(value: str) -> int:
    """Non-negative 32-bit rolling hash (h * 31 + c), stable across runs."""
    h = 0
    for char in value:
        h = (h * 31 + ord(char)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


def consistent_fallback(key: str, slot_type: str) -> str:
    pool = _POOLS.get(slot_type, CARD_FALLBACKS)
    return pool[string_hash(key) % len(pool)]


def slot_type(image_id: str, size: str | None = None) -> str:
    """hero, card or column; the request size wins over the id prefix."""
    if size in ("hero", "card", "column"):
        return size
    if size == "thumbnail":
        return "card"
    if image_id == "hero" or image_id.startswith("hero-"):
        return "hero"
    if image_id.startswith("col-"):
        return "column"
    return "card"


def apply_fallback_strategy(
    requests: list[ImageRequest],
    attempts: list[ImageAttempt],
    rng: random.Random | None = None,
) -> list[GeneratedImage]:
    """Resolve every attempt to a usable image, preserving request order."""
    rng = rng or random.Random()
    sizes = {request.id: request.size for request in requests}

    successes: dict[str, list[ImageAttempt]] = {"hero": [], "card": [], "column": []}
    for attempt in attempts:
        if attempt.succeeded:
            successes[slot_type(attempt.id, sizes.get(attempt.id))].append(attempt)

    images = []
    for attempt in attempts:
        if attempt.succeeded:
            images.append(
                GeneratedImage(id=attempt.id, url=attempt.url, prompt=attempt.prompt, source="generated")
            )
            continue

        kind = slot_type(attempt.id, sizes.get(attempt.id))
        siblings = successes[kind]

        if kind != "hero" and siblings:
            sibling = rng.choice(siblings)
            url = sibling.url
            source = "sibling"
            logger.info("Image failed, reusing sibling", image_id=attempt.id, sibling=sibling.id)
        else:
            url = consistent_fallback(attempt.id + attempt.prompt, kind)
            source = "fallback"
            logger.info("Image failed, using curated fallback", image_id=attempt.id, slot_type=kind)

        images.append(GeneratedImage(id=attempt.id, url=url, prompt=attempt.prompt, source=source))

    return images
