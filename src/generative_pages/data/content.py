"""Generated page content.

Block content is a tagged union keyed by block ``type``; each variant has
its own content model. Field names are snake_case in Python and camelCase
on the wire (the generator's JSON uses camelCase).
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# BLOCK CONTENT
# =============================================================================


class HeroContent(_WireModel):
    headline: str
    subheadline: str = ""
    cta_text: str | None = None
    cta_url: str | None = None
    image_prompt: str = ""


class Card(_WireModel):
    title: str
    description: str = ""
    image_prompt: str = ""
    link_text: str | None = None
    link_url: str | None = None


class CardsContent(_WireModel):
    cards: list[Card] = Field(min_length=1)


class Column(_WireModel):
    headline: str | None = None
    text: str = ""
    image_prompt: str | None = None


class ColumnsContent(_WireModel):
    columns: list[Column] = Field(min_length=1)


class SplitContent(_WireModel):
    eyebrow: str | None = None
    headline: str
    body: str = ""
    primary_cta_text: str = "Learn More"
    primary_cta_url: str = "/products/blenders"
    secondary_cta_text: str | None = None
    secondary_cta_url: str | None = None
    image_prompt: str = ""


class TextContent(_WireModel):
    headline: str | None = None
    body: str


class CTAContent(_WireModel):
    headline: str
    text: str | None = None
    button_text: str
    button_url: str
    is_generative: bool = False
    generation_hint: str | None = None


class FAQItem(_WireModel):
    question: str
    answer: str


class FAQContent(_WireModel):
    items: list[FAQItem] = Field(min_length=1)


# =============================================================================
# BLOCKS (tagged union)
# =============================================================================


class _BlockBase(_WireModel):
    id: str = ""
    variant: str | None = None
    section_style: Literal["default", "highlight", "dark"] | None = None


class HeroBlock(_BlockBase):
    type: Literal["hero"] = "hero"
    content: HeroContent


class CardsBlock(_BlockBase):
    type: Literal["cards"] = "cards"
    content: CardsContent


class ColumnsBlock(_BlockBase):
    type: Literal["columns"] = "columns"
    content: ColumnsContent


class SplitContentBlock(_BlockBase):
    type: Literal["split-content"] = "split-content"
    content: SplitContent


class TextBlock(_BlockBase):
    type: Literal["text"] = "text"
    content: TextContent


class CTABlock(_BlockBase):
    type: Literal["cta"] = "cta"
    content: CTAContent


class FAQBlock(_BlockBase):
    type: Literal["faq"] = "faq"
    content: FAQContent


ContentBlock = Annotated[
    Union[
        HeroBlock,
        CardsBlock,
        ColumnsBlock,
        SplitContentBlock,
        TextBlock,
        CTABlock,
        FAQBlock,
    ],
    Field(discriminator="type"),
]


# =============================================================================
# PAGE
# =============================================================================


class PageMeta(_WireModel):
    title: str = ""
    description: str = ""


class Citation(_WireModel):
    text: str = ""
    source_url: str = ""
    source_title: str = ""


class GeneratedContent(_WireModel):
    """A complete generated page, one block per layout slot."""

    headline: str
    subheadline: str = ""
    blocks: list[ContentBlock] = Field(min_length=1)
    meta: PageMeta = Field(default_factory=PageMeta)
    citations: list[Citation] = Field(default_factory=list)

    @property
    def block_types(self) -> list[str]:
        return [block.type for block in self.blocks]
