"""Brand style guidance appended to every image prompt."""

VITAMIX_IMAGE_STYLE = """Style: Professional food photography, modern kitchen setting
Lighting: Bright, natural light with soft shadows
Color palette: Clean whites, fresh greens, vibrant produce colors
Atmosphere: Aspirational, healthy lifestyle, premium quality
Camera: High-quality DSLR, sharp focus on subject
Composition: Rule of thirds, clean backgrounds, shallow depth of field
Focus on food and ingredients only, no appliances or products"""

SIZE_STYLES: dict[str, str] = {
    "hero": "Wide cinematic composition\nDramatic but inviting atmosphere\n"
    "Strong visual impact\nSpace for text overlay consideration",
    "card": "Square or 4:3 composition\nClean, product-focused framing\n"
    "Single subject or small group\nEye-catching but not overwhelming",
    "column": "Vertical or horizontal balance\nLifestyle context\n"
    "Supporting imagery role\nComplements text content",
    "thumbnail": "Clear at small sizes\nSimple composition\nHigh contrast\nRecognizable subject",
}

CONTENT_TYPE_PROMPTS: dict[str, str] = {
    "recipe": "Finished dish beautifully plated, overhead or 45-degree angle shot\n"
    "Fresh ingredients artfully arranged on table\nNatural daylight streaming through window\n"
    "Appetizing presentation, restaurant quality\nGarnishes and textures visible\n"
    "Tight framing on food and plate only, no appliances in frame",
    "product": "Clean studio lighting\nProduct as hero, sharp focus\nSubtle gradient background\n"
    "Professional product photography\nHighlighting design and quality",
    "lifestyle": "Modern kitchen environment\nPerson preparing healthy food (optional)\n"
    "Morning light atmosphere\nPremium, aspirational setting\nFamily or wellness context",
    "smoothie": "Colorful smoothie in clear glass, close-up shot\n"
    "Fresh ingredients scattered nearby on counter\nDroplets of condensation for freshness\n"
    "Vibrant colors (greens, berries, tropical)\n"
    "Tight crop on glass and ingredients, nothing else in frame\n"
    "No appliances visible, food only photography",
    "soup": "Steaming hot soup in white bowl\nGarnish on top (herbs, cream swirl)\n"
    "Warm, cozy atmosphere\nWooden cutting board with ingredients\nComfort food appeal",
}

NEGATIVE_PROMPT_ELEMENTS: tuple[str, ...] = (
    "text", "watermark", "logo", "signature", "cartoon", "illustration", "anime",
    "drawing", "low quality", "blurry", "out of focus", "oversaturated",
    "artificial looking", "stock photo feel", "staged", "unnatural poses",
)

NO_PRODUCTS_NEGATIVE: tuple[str, ...] = (
    "blender", "Vitamix", "vitamix blender", "kitchen appliance", "appliance",
    "food processor", "machine", "electric device", "product", "black blender",
    "blender in background", "blender base", "blender container", "motor base",
)

# Checked in order; first group with a matching keyword wins.
_CONTENT_TYPE_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("smoothie", ("smoothie", "shake", "blend")),
    ("soup", ("soup", "hot", "warm")),
    ("recipe", ("recipe", "dish", "food")),
    ("product", ("blender", "product", "vitamix")),
    ("lifestyle", ("kitchen", "lifestyle", "family")),
)


def detect_content_type(prompt: str) -> str:
    lower_prompt = prompt.lower()
    for content_type, keywords in _CONTENT_TYPE_KEYWORDS:
        if any(keyword in lower_prompt for keyword in keywords):
            return content_type
    return "lifestyle"


def build_image_prompt(base_prompt: str, size: str) -> str:
    """Full provider prompt: subject, framing, content guidance, brand style."""
    parts = [
        base_prompt,
        SIZE_STYLES.get(size, SIZE_STYLES["card"]),
        CONTENT_TYPE_PROMPTS.get(detect_content_type(base_prompt), ""),
        VITAMIX_IMAGE_STYLE,
        "Professional photography, high resolution, 4K quality",
        "No text, logos, or watermarks in the image",
        "Photorealistic, not illustration or cartoon",
    ]
    return "\n\n".join(part for part in parts if part)


def build_negative_prompt() -> str:
    return ", ".join(NEGATIVE_PROMPT_ELEMENTS + NO_PRODUCTS_NEGATIVE)
