"""
HTML rendering for generated blocks and pages.

Blocks are rendered as authored-table markup: one ``<div class="{type}">``
per block with a row/cell ``<div>`` structure the page decorators expect.
Images start as inline SVG placeholders tagged ``data-gen-image="{id}"``;
the client (or ``replace_image_placeholders``) swaps in resolved URLs.
"""

import html
import re
from typing import Mapping
from urllib.parse import quote

from generative_pages.data.content import (
    CardsContent,
    ColumnsContent,
    ContentBlock,
    CTAContent,
    FAQContent,
    GeneratedContent,
    HeroContent,
    SplitContent,
    TextContent,
)


PLACEHOLDER_SIZES: dict[str, tuple[int, int]] = {
    "hero": (2000, 800),
    "card": (750, 562),
    "column": (600, 400),
    "thumbnail": (300, 225),
}


def escape(value: str | None) -> str:
    return html.escape(value or "", quote=True).replace("&#x27;", "&#39;")


def placeholder_image(size: str = "card") -> str:
    """Grey SVG data URI shown until the real image arrives."""
    width, height = PLACEHOLDER_SIZES.get(size, PLACEHOLDER_SIZES["card"])
    svg = (
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
        f'viewBox="0 0 {width} {height}">'
        f'<rect width="100%" height="100%" fill="#f0f0f0"/>'
        f'<text x="50%" y="50%" text-anchor="middle" dominant-baseline="middle" '
        f'font-family="sans-serif" font-size="16" fill="#999">Image Loading...</text>'
        f"</svg>"
    )
    return "data:image/svg+xml," + quote(svg)


def _img(image_id: str, alt: str | None, size: str) -> str:
    return (
        f'<picture><img src="{placeholder_image(size)}" alt="{escape(alt)}" '
        f'data-gen-image="{image_id}" loading="lazy"></picture>'
    )


def _class(name: str, variant: str | None) -> str:
    if variant and variant != "default":
        return f"{name} {variant}"
    return name


# =============================================================================
# BLOCKS
# =============================================================================


def render_hero(content: HeroContent, variant: str | None = None, image_id: str = "hero") -> str:
    cta = ""
    if content.cta_text:
        cta = (
            f'<p><a href="{escape(content.cta_url or "/products/blenders")}" class="button">'
            f"{escape(content.cta_text)}</a></p>"
        )
    sub = f"<p>{escape(content.subheadline)}</p>" if content.subheadline else ""
    return (
        f'<div class="{_class("hero", variant)}"><div>'
        f'<div>{_img(image_id, content.headline, "hero")}</div>'
        f"<div><h1>{escape(content.headline)}</h1>{sub}{cta}</div>"
        f"</div></div>"
    )


def render_cards(content: CardsContent, variant: str | None = None, position: int = 0) -> str:
    rows = []
    for i, card in enumerate(content.cards):
        link = ""
        if card.link_text:
            link = f'<p><a href="{escape(card.link_url or "#")}">{escape(card.link_text)}</a></p>'
        rows.append(
            f'<div><div>{_img(f"card-{position}-{i}", card.title, "card")}</div>'
            f"<div><p><strong>{escape(card.title)}</strong></p>"
            f"<p>{escape(card.description)}</p>{link}</div></div>"
        )
    return f'<div class="{_class("cards", variant)}">{"".join(rows)}</div>'


def render_columns(content: ColumnsContent, variant: str | None = None, position: int = 0) -> str:
    cells = []
    for i, column in enumerate(content.columns):
        parts = []
        if column.image_prompt:
            parts.append(_img(f"col-{position}-{i}", column.headline, "column"))
        if column.headline:
            parts.append(f"<h3>{escape(column.headline)}</h3>")
        parts.append(f"<p>{escape(column.text)}</p>")
        cells.append(f"<div>{''.join(parts)}</div>")
    return f'<div class="{_class("columns", variant)}"><div>{"".join(cells)}</div></div>'


def _split_link(text: str, url: str | None, hint: str) -> str:
    url = url or "#"
    attrs = ""
    if url.startswith("/discover/"):
        attrs = f' data-cta-type="explore" data-generation-hint="{escape(hint)}"'
    return f'<a href="{escape(url)}"{attrs}>{escape(text)}</a>'


def render_split_content(content: SplitContent, variant: str | None = None, position: int = 0) -> str:
    parts = []
    if content.eyebrow:
        parts.append(f"<p>{escape(content.eyebrow)}</p>")
    parts.append(f"<h2>{escape(content.headline)}</h2>")
    parts.append(f"<p>{escape(content.body)}</p>")

    links = []
    if content.primary_cta_text:
        links.append(_split_link(content.primary_cta_text, content.primary_cta_url, content.headline))
    if content.secondary_cta_text:
        links.append(_split_link(content.secondary_cta_text, content.secondary_cta_url, content.headline))
    if links:
        parts.append(f"<p>{' '.join(links)}</p>")

    return (
        f'<div class="{_class("split-content", variant)}"><div>'
        f'<div>{_img(f"split-{position}", content.headline, "card")}</div>'
        f"<div>{''.join(parts)}</div>"
        f"</div></div>"
    )


def render_text(content: TextContent, variant: str | None = None) -> str:
    headline = f"<h2>{escape(content.headline)}</h2>" if content.headline else ""
    paragraphs = "".join(f"<p>{escape(p)}</p>" for p in content.body.split("\n\n") if p.strip())
    return f'<div class="{_class("text", variant)}"><div><div>{headline}{paragraphs}</div></div></div>'


def render_cta(content: CTAContent, variant: str | None = None) -> str:
    generative = content.is_generative and content.button_url.startswith("/discover/")
    css = _class("cta", variant) + (" generative-cta" if generative else "")
    hint = f' data-generation-hint="{escape(content.generation_hint)}"' if generative else ""
    text = f"<p>{escape(content.text)}</p>" if content.text else ""
    return (
        f'<div class="{css}"><div><div>'
        f"<h2>{escape(content.headline)}</h2>{text}"
        f'<p><a href="{escape(content.button_url)}" class="button primary"{hint}>'
        f"{escape(content.button_text)}</a></p>"
        f"</div></div></div>"
    )


def render_faq(content: FAQContent, variant: str | None = None) -> str:
    rows = "".join(
        f"<div><div>{escape(item.question)}</div><div>{escape(item.answer)}</div></div>"
        for item in content.items
    )
    return f'<div class="{_class("faq", variant)}">{rows}</div>'


def render_block(block: ContentBlock, position: int) -> str:
    """HTML for one block; ``position`` scopes its image ids."""
    variant = block.variant
    if block.type == "hero":
        return render_hero(block.content, variant)
    if block.type == "cards":
        return render_cards(block.content, variant, position)
    if block.type == "columns":
        return render_columns(block.content, variant, position)
    if block.type == "split-content":
        return render_split_content(block.content, variant, position)
    if block.type == "text":
        return render_text(block.content, variant)
    if block.type == "cta":
        return render_cta(block.content, variant)
    if block.type == "faq":
        return render_faq(block.content, variant)
    raise ValueError(f"Unknown block type: {block.type}")


# =============================================================================
# PAGE
# =============================================================================


def replace_image_placeholders(markup: str, images: Mapping[str, str]) -> str:
    """Point each ``data-gen-image`` placeholder at its resolved URL."""
    for image_id, url in images.items():
        pattern = re.compile(
            r'src="[^"]*"(\s+alt="[^"]*"\s+data-gen-image="' + re.escape(image_id) + r'")'
        )
        markup = pattern.sub(lambda m: f'src="{escape(url)}"{m.group(1)}', markup)
    return markup


def wrap_section(block_html: str, width: str = "contained") -> str:
    opening = "<div>" if width == "full" else '<div class="contained">'
    return f"{opening}\n{block_html}\n</div>\n<hr>"


def render_document(title: str, description: str, body: str, query: str = "") -> str:
    return (
        "<!DOCTYPE html>\n<html>\n<head>\n"
        f"  <title>{escape(title)}</title>\n"
        f'  <meta name="description" content="{escape(description)}">\n'
        '  <meta name="template" content="generative">\n'
        f'  <meta name="generation-query" content="{escape(query)}">\n'
        "</head>\n<body>\n  <header></header>\n  <main>\n"
        f"{body}\n"
        "  </main>\n  <footer></footer>\n</body>\n</html>"
    )


def render_page(
    content: GeneratedContent,
    images: Mapping[str, str] | None = None,
    widths: list[str] | None = None,
    query: str = "",
) -> str:
    """Full page document with resolved images."""
    sections = []
    for position, block in enumerate(content.blocks):
        width = widths[position] if widths and position < len(widths) else "contained"
        sections.append(wrap_section(render_block(block, position), width))

    body = replace_image_placeholders("\n".join(sections), images or {})
    return render_document(
        content.meta.title or content.headline,
        content.meta.description or content.subheadline,
        body,
        query or content.headline,
    )


def extract_full_text(content: GeneratedContent) -> str:
    """All user-visible text, space-joined, for safety validation."""
    parts = [content.headline, content.subheadline]

    for block in content.blocks:
        c = block.content
        for field in ("headline", "subheadline", "text", "body", "description"):
            value = getattr(c, field, None)
            if isinstance(value, str):
                parts.append(value)

        if isinstance(c, CardsContent):
            for card in c.cards:
                parts.extend((card.title, card.description))
        elif isinstance(c, ColumnsContent):
            for column in c.columns:
                parts.extend((column.headline, column.text))
        elif isinstance(c, FAQContent):
            for item in c.items:
                parts.extend((item.question, item.answer))

    return " ".join(part for part in parts if part)
