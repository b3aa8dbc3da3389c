"""Fixed catalogue of page layouts.

Every layout is built from the seven core block types. Sections group
blocks under an optional background style.
"""

from generative_pages.data.layout import BlockTemplate, LayoutTemplate, SectionTemplate


def _section(*blocks: BlockTemplate, style: str | None = None) -> SectionTemplate:
    return SectionTemplate(style=style, blocks=list(blocks))


LAYOUT_PRODUCT_DETAIL = LayoutTemplate(
    id="product-detail",
    name="Product Detail",
    description="Detailed view of a single Vitamix product",
    use_cases=["Tell me about the A3500", "What can the Explorian do"],
    sections=[
        _section(BlockTemplate(type="hero", variant="split", width="full", has_image=True)),
        _section(BlockTemplate(type="columns", variant="highlight", item_count=3)),
        _section(BlockTemplate(type="text")),
        _section(BlockTemplate(type="faq", item_count=4)),
        _section(BlockTemplate(type="cta"), style="dark"),
    ],
)

LAYOUT_PRODUCT_COMPARISON = LayoutTemplate(
    id="product-comparison",
    name="Product Comparison",
    description="Compare multiple Vitamix products",
    use_cases=["A3500 vs A2500", "Which Vitamix should I buy"],
    sections=[
        _section(BlockTemplate(type="hero", variant="centered", has_image=False)),
        _section(BlockTemplate(type="columns", variant="highlight", item_count=2)),
        _section(BlockTemplate(type="cards", item_count=2)),
        _section(BlockTemplate(type="faq", item_count=4)),
        _section(BlockTemplate(type="cta"), style="dark"),
    ],
)

LAYOUT_RECIPE_COLLECTION = LayoutTemplate(
    id="recipe-collection",
    name="Recipe Collection",
    description="Collection of recipes with a featured technique",
    use_cases=["Soup recipes", "Smoothie ideas", "Recipes with bananas"],
    sections=[
        _section(BlockTemplate(type="hero", variant="full-width", width="full", has_image=True)),
        _section(BlockTemplate(type="cards", item_count=6)),
        _section(BlockTemplate(type="split-content", has_image=True), style="dark"),
        _section(BlockTemplate(type="cta"), style="highlight"),
    ],
)

LAYOUT_USE_CASE_LANDING = LayoutTemplate(
    id="use-case-landing",
    name="Use Case Landing",
    description="Landing page for a specific use case with recipes, tips, and product",
    use_cases=["I want to make smoothies every morning", "Meal prep for the week"],
    sections=[
        _section(BlockTemplate(type="hero", variant="full-width", width="full", has_image=True)),
        _section(BlockTemplate(type="columns", variant="benefits", item_count=3)),
        _section(BlockTemplate(type="cards", item_count=3)),
        _section(
            BlockTemplate(type="split-content", variant="reverse", has_image=True),
            style="highlight",
        ),
        _section(BlockTemplate(type="columns", variant="tips", item_count=3)),
        _section(BlockTemplate(type="cta"), style="dark"),
    ],
)

LAYOUT_SUPPORT = LayoutTemplate(
    id="support",
    name="Support & Troubleshooting",
    description="Help and troubleshooting content",
    use_cases=["My Vitamix is making a grinding noise", "Blender not turning on"],
    sections=[
        _section(BlockTemplate(type="hero", variant="light", has_image=False)),
        _section(BlockTemplate(type="faq", item_count=5)),
        _section(BlockTemplate(type="text")),
        _section(BlockTemplate(type="cta"), style="highlight"),
    ],
)

LAYOUT_CATEGORY_BROWSE = LayoutTemplate(
    id="category-browse",
    name="Category Browse",
    description="Browse products in a category",
    use_cases=["Show me all blenders", "Container options"],
    sections=[
        _section(BlockTemplate(type="hero", variant="centered", has_image=False)),
        _section(BlockTemplate(type="cards", item_count=4)),
        _section(BlockTemplate(type="columns", item_count=3), style="highlight"),
        _section(BlockTemplate(type="cta"), style="dark"),
    ],
)

LAYOUT_EDUCATIONAL = LayoutTemplate(
    id="educational",
    name="Educational / How-To",
    description="Educational content with steps and tips",
    use_cases=["How to clean my Vitamix", "How to make nut butter"],
    sections=[
        _section(BlockTemplate(type="hero", variant="split", has_image=True)),
        _section(BlockTemplate(type="text")),
        _section(BlockTemplate(type="columns", item_count=3), style="highlight"),
        _section(BlockTemplate(type="faq", item_count=4)),
        _section(BlockTemplate(type="cta"), style="dark"),
    ],
)

LAYOUT_PROMOTIONAL = LayoutTemplate(
    id="promotional",
    name="Promotional",
    description="Sales and promotional content",
    use_cases=["Current promotions", "Holiday gift ideas"],
    sections=[
        _section(
            BlockTemplate(type="hero", variant="full-width", width="full", has_image=True),
            style="dark",
        ),
        _section(BlockTemplate(type="cards", item_count=3)),
        _section(BlockTemplate(type="split-content", has_image=True), style="highlight"),
        _section(BlockTemplate(type="cta"), style="dark"),
    ],
)

LAYOUT_QUICK_ANSWER = LayoutTemplate(
    id="quick-answer",
    name="Quick Answer",
    description="Direct answer to a simple question",
    use_cases=["What is the warranty", "Where is Vitamix made"],
    sections=[
        _section(BlockTemplate(type="hero", variant="light", has_image=False)),
        _section(BlockTemplate(type="text")),
        _section(BlockTemplate(type="cta"), style="highlight"),
    ],
)

LAYOUT_LIFESTYLE = LayoutTemplate(
    id="lifestyle",
    name="Lifestyle & Inspiration",
    description="Inspirational content about healthy living with Vitamix",
    use_cases=["Healthy eating tips", "Whole food nutrition"],
    sections=[
        _section(BlockTemplate(type="hero", variant="full-width", width="full", has_image=True)),
        _section(BlockTemplate(type="cards", item_count=3)),
        _section(
            BlockTemplate(type="split-content", variant="reverse", has_image=True),
            style="highlight",
        ),
        _section(BlockTemplate(type="columns", item_count=3)),
        _section(BlockTemplate(type="cta"), style="dark"),
    ],
)

LAYOUTS: tuple[LayoutTemplate, ...] = (
    LAYOUT_PRODUCT_DETAIL,
    LAYOUT_PRODUCT_COMPARISON,
    LAYOUT_RECIPE_COLLECTION,
    LAYOUT_USE_CASE_LANDING,
    LAYOUT_SUPPORT,
    LAYOUT_CATEGORY_BROWSE,
    LAYOUT_EDUCATIONAL,
    LAYOUT_PROMOTIONAL,
    LAYOUT_QUICK_ANSWER,
    LAYOUT_LIFESTYLE,
)

_LAYOUTS_BY_ID = {layout.id: layout for layout in LAYOUTS}


def get_layout_by_id(layout_id: str | None) -> LayoutTemplate | None:
    if not layout_id:
        return None
    return _LAYOUTS_BY_ID.get(layout_id)


def format_layout_for_prompt(layout: LayoutTemplate) -> str:
    """Describe a layout's structure for the content generator."""
    sections = []
    for i, section in enumerate(layout.sections, start=1):
        style = f" ({section.style} background)" if section.style else ""
        lines = []
        for block in section.blocks:
            desc = f"- {block.type}"
            if block.variant:
                desc += f" ({block.variant})"
            if block.item_count:
                desc += f" - {block.item_count} items"
            if block.has_image:
                desc += " - with image"
            lines.append(desc)
        sections.append(f"Section {i}{style}:\n    " + "\n    ".join(lines))

    structure = "\n\n".join(sections)
    return (
        f"Layout: {layout.name}\n"
        f"ID: {layout.id}\n"
        f"Description: {layout.description}\n\n"
        f"Structure:\n{structure}"
    )
