"""Pre-approved fallback pages served when generated content is blocked."""

from typing import Any

from generative_pages.data.content import GeneratedContent
from generative_pages.data.layout import LayoutBlock, LayoutDecision


FALLBACK_MARKER = "[Fallback content]"


def _hero(headline: str, subheadline: str, cta_text: str, cta_url: str, image_prompt: str) -> dict[str, Any]:
    return {
        "id": "fallback-hero",
        "type": "hero",
        "variant": "centered",
        "content": {
            "headline": headline,
            "subheadline": subheadline,
            "ctaText": cta_text,
            "ctaUrl": cta_url,
            "imagePrompt": image_prompt,
        },
    }


def _text(headline: str, body: str) -> dict[str, Any]:
    return {
        "id": "fallback-text",
        "type": "text",
        "variant": "centered",
        "content": {"headline": headline, "body": body},
    }


def _cta(headline: str, text: str, button_text: str, button_url: str) -> dict[str, Any]:
    return {
        "id": "fallback-cta",
        "type": "cta",
        "variant": "primary",
        "content": {
            "headline": headline,
            "text": text,
            "buttonText": button_text,
            "buttonUrl": button_url,
        },
    }


FALLBACK_TEMPLATES: dict[str, dict[str, Any]] = {
    "recipe": {
        "headline": "Explore Vitamix Recipes",
        "subheadline": "Discover delicious, healthy recipes crafted for your Vitamix",
        "blocks": [
            _hero(
                "Explore Vitamix Recipes",
                "From smoothies to soups, discover endless possibilities with your Vitamix blender",
                "Browse All Recipes",
                "/recipes",
                "Colorful array of fresh fruits, vegetables, and healthy smoothies on a clean kitchen counter",
            ),
            _text(
                "Wholesome Recipes for Every Occasion",
                "Whether you're starting your day with a nutrient-packed smoothie, preparing a warming "
                "soup for dinner, or crafting homemade nut butters, your Vitamix opens up a world of "
                "culinary possibilities. Explore our collection of chef-tested recipes designed to help "
                "you make the most of your blender.",
            ),
            _cta(
                "Ready to Get Started?",
                "Visit vitamix.com for hundreds of tested recipes and cooking inspiration.",
                "Explore Recipes",
                "https://www.vitamix.com/us/en_us/recipes",
            ),
        ],
        "meta": {
            "title": "Vitamix Recipes - Discover Healthy Blending Ideas",
            "description": "Explore delicious, healthy recipes designed for your Vitamix blender. "
            "From smoothies to soups, discover endless possibilities.",
        },
    },
    "product": {
        "headline": "Vitamix Blenders",
        "subheadline": "Professional-grade performance for your kitchen",
        "blocks": [
            _hero(
                "Vitamix Blenders",
                "Experience professional-grade blending with our award-winning lineup of blenders",
                "Explore Products",
                "/products",
                "Premium Vitamix blender on a modern kitchen counter with fresh ingredients",
            ),
            _text(
                "Built to Last. Backed by Our Commitment.",
                "Since 1921, Vitamix has been the trusted choice of home cooks and professional chefs "
                "alike. Every Vitamix blender is built to deliver consistent, reliable performance backed "
                "by our industry-leading warranty. From whole-food nutrition to culinary creativity, "
                "Vitamix empowers you to achieve your goals.",
            ),
            _cta(
                "Find Your Perfect Vitamix",
                "Explore our full lineup of blenders and find the one that's right for you.",
                "Shop Now",
                "https://www.vitamix.com/us/en_us/shop",
            ),
        ],
        "meta": {
            "title": "Vitamix Blenders - Professional-Grade Performance",
            "description": "Discover Vitamix blenders with professional-grade performance for your "
            "kitchen. Built to last with industry-leading warranty.",
        },
    },
    "support": {
        "headline": "Vitamix Support",
        "subheadline": "We're here to help you get the most from your Vitamix",
        "blocks": [
            _hero(
                "How Can We Help?",
                "Get support for your Vitamix blender",
                "Contact Support",
                "/support",
                "Customer service representative helping with Vitamix blender",
            ),
            _text(
                "Vitamix Customer Care",
                "Our dedicated team is here to help you get the most from your Vitamix. Whether you need "
                "assistance with your blender, have questions about recipes, or want to learn more about "
                "our products, we're here to support you.",
            ),
            _cta(
                "Contact Us",
                "Reach out to our customer care team for personalized assistance.",
                "Get Support",
                "https://www.vitamix.com/us/en_us/support",
            ),
        ],
        "meta": {
            "title": "Vitamix Support - Customer Care & Help",
            "description": "Get support for your Vitamix blender. Our customer care team is here to help.",
        },
    },
    "comparison": {
        "headline": "Compare Vitamix Blenders",
        "subheadline": "Find the right Vitamix for your kitchen",
        "blocks": [
            _hero(
                "Compare Vitamix Blenders",
                "Discover the features and capabilities that matter most to you",
                "View Comparison",
                "/compare",
                "Multiple Vitamix blender models arranged on a kitchen counter",
            ),
            _text(
                "Every Vitamix Delivers Professional Results",
                "All Vitamix blenders share the same commitment to quality, durability, and performance. "
                "The differences lie in features like container sizes, preset programs, and smart "
                "connectivity. Compare our lineup to find the blender that best fits your lifestyle and "
                "cooking needs.",
            ),
            _cta(
                "Need Help Deciding?",
                "Take our quiz to find the perfect Vitamix for you.",
                "Find My Blender",
                "https://www.vitamix.com/us/en_us/shop/blender-quiz",
            ),
        ],
        "meta": {
            "title": "Compare Vitamix Blenders - Find Your Perfect Match",
            "description": "Compare Vitamix blender models to find the right one for your kitchen. "
            "Professional-grade performance in every model.",
        },
    },
    "educational": {
        "headline": "Vitamix Tips & Techniques",
        "subheadline": "Master your Vitamix with expert guidance",
        "blocks": [
            _hero(
                "Tips & Techniques",
                "Learn how to get the most from your Vitamix blender",
                "Explore Tips",
                "/tips",
                "Chef demonstrating blending technique with a Vitamix in a professional kitchen",
            ),
            _text(
                "Unlock Your Vitamix Potential",
                "From proper ingredient layering to advanced blending techniques, there's always more to "
                "discover with your Vitamix. Our expert guides and video tutorials help you master "
                "everything from silky-smooth smoothies to hot soups made right in your blender.",
            ),
            _cta(
                "Ready to Learn More?",
                "Explore our complete library of tips, tutorials, and cooking guides.",
                "View All Tips",
                "https://www.vitamix.com/us/en_us/recipes/demo-videos",
            ),
        ],
        "meta": {
            "title": "Vitamix Tips & Techniques - Expert Blending Guidance",
            "description": "Master your Vitamix with expert tips and techniques. From smoothies to "
            "soups, learn how to get the most from your blender.",
        },
    },
    "general": {
        "headline": "Welcome to Vitamix",
        "subheadline": "Professional-grade blending for every kitchen",
        "blocks": [
            _hero(
                "Welcome to Vitamix",
                "Discover what's possible with professional-grade blending",
                "Explore",
                "/",
                "Vitamix blender surrounded by fresh fruits and vegetables in a bright modern kitchen",
            ),
            {
                "id": "fallback-cards",
                "type": "cards",
                "variant": "grid-3",
                "content": {
                    "cards": [
                        {
                            "title": "Recipes",
                            "description": "Explore hundreds of delicious recipes from smoothies to soups",
                            "imagePrompt": "Colorful smoothie in a glass with fresh berries",
                            "linkText": "Browse Recipes",
                            "linkUrl": "/recipes",
                        },
                        {
                            "title": "Products",
                            "description": "Find the perfect Vitamix blender for your kitchen",
                            "imagePrompt": "Premium Vitamix blender product shot",
                            "linkText": "Shop Now",
                            "linkUrl": "/products",
                        },
                        {
                            "title": "Support",
                            "description": "Get help and tips for your Vitamix experience",
                            "imagePrompt": "Friendly customer service representative",
                            "linkText": "Get Help",
                            "linkUrl": "/support",
                        },
                    ]
                },
            },
            _text(
                "Since 1921",
                "For over 100 years, Vitamix has been the trusted choice of home cooks and professional "
                "chefs worldwide. Every blender we make is built to deliver consistent, reliable "
                "performance backed by our commitment to quality.",
            ),
        ],
        "meta": {
            "title": "Vitamix - Professional-Grade Blenders",
            "description": "Welcome to Vitamix. Discover professional-grade blenders, delicious "
            "recipes, and expert support.",
        },
    },
}

_INTENT_TO_FALLBACK = {
    "recipe": "recipe",
    "product_info": "product",
    "support": "support",
    "comparison": "comparison",
}


def fallback_key(intent_type: str, layout_id: str | None = None) -> str:
    if layout_id == "educational":
        return "educational"
    return _INTENT_TO_FALLBACK.get(intent_type, "general")


def get_fallback_content(intent_type: str, layout_id: str | None = None) -> GeneratedContent:
    """Safe page matching the request's intent, tagged as fallback in its description."""
    template = FALLBACK_TEMPLATES[fallback_key(intent_type, layout_id)]
    meta = dict(template["meta"])
    meta["description"] = f"{meta['description']} {FALLBACK_MARKER}"
    return GeneratedContent.model_validate(
        {
            "headline": template["headline"],
            "subheadline": template["subheadline"],
            "blocks": template["blocks"],
            "meta": meta,
            "citations": [],
        }
    )


def get_fallback_layout(intent_type: str, layout_id: str | None = None) -> LayoutDecision:
    """Layout for the fallback page; the first section is highlighted."""
    key = fallback_key(intent_type, layout_id)
    blocks = FALLBACK_TEMPLATES[key]["blocks"]
    return LayoutDecision(
        layout_id=f"fallback-{key}",
        blocks=[
            LayoutBlock(
                block_type=block["type"],
                content_index=index,
                variant=block.get("variant") or "default",
                width="contained",
                section_style="highlight" if index == 0 else "default",
            )
            for index, block in enumerate(blocks)
        ],
    )


def is_fallback_content(content: GeneratedContent) -> bool:
    return FALLBACK_MARKER in content.meta.description
