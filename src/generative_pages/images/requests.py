"""Image slot planning.

Image ids are scoped by block position so they stay unique across blocks:
``hero``, ``card-{n}-{i}``, ``col-{n}-{i}`` and ``split-{n}``.
"""

from generative_pages.data.content import GeneratedContent
from generative_pages.data.images import ImageDecision, ImageRequest, ImageSize
from generative_pages.data.retrieval import AssembledContext


ASPECT_RATIOS: dict[str, str] = {
    "hero": "5:2",
    "card": "4:3",
    "column": "3:2",
    "thumbnail": "4:3",
}

DEFAULT_IMAGE_PROMPT = (
    "Bright modern kitchen counter with fresh fruits and vegetables, morning light"
)


def _request(image_id: str, block_id: str, prompt: str, size: ImageSize) -> ImageRequest:
    return ImageRequest(
        id=image_id,
        block_id=block_id,
        prompt=prompt,
        size=size,
        aspect_ratio=ASPECT_RATIOS[size],
    )


def build_image_requests(content: GeneratedContent) -> list[ImageRequest]:
    """One request per image slot, in page order."""
    requests: list[ImageRequest] = []
    hero_seen = False

    for position, block in enumerate(content.blocks):
        if block.type == "hero":
            image_id = "hero" if not hero_seen else f"hero-{position}"
            hero_seen = True
            prompt = block.content.image_prompt or block.content.headline
            requests.append(_request(image_id, block.id, prompt, "hero"))

        elif block.type == "cards":
            for i, card in enumerate(block.content.cards):
                prompt = card.image_prompt or card.title
                requests.append(_request(f"card-{position}-{i}", block.id, prompt, "card"))

        elif block.type == "columns":
            for i, column in enumerate(block.content.columns):
                if column.image_prompt:
                    requests.append(
                        _request(f"col-{position}-{i}", block.id, column.image_prompt, "column")
                    )

        elif block.type == "split-content":
            prompt = block.content.image_prompt or block.content.headline
            requests.append(_request(f"split-{position}", block.id, prompt, "card"))

    return requests


def decide_image_strategy(
    request: ImageRequest,
    context: AssembledContext,
    products: list[str] | None = None,
) -> ImageDecision:
    """
    Reuse an indexed product image when the slot is about a named product.

    Otherwise the slot is generated from its prompt, falling back to a
    default kitchen scene when the prompt is empty.
    """
    prompt_lower = request.prompt.lower()
    for product in products or []:
        if product.lower() not in prompt_lower:
            continue
        existing = context.find_existing_images(product)
        if existing:
            return ImageDecision(request=request, action="existing", existing_url=existing[0])

    if not request.prompt.strip():
        request = request.model_copy(update={"prompt": DEFAULT_IMAGE_PROMPT})
    return ImageDecision(request=request, action="generate")
