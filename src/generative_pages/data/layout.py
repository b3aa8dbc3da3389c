"""Layout catalogue models."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


BlockType = Literal["hero", "cards", "columns", "split-content", "text", "cta", "faq"]
SectionStyle = Literal["default", "highlight", "dark"]
BlockWidth = Literal["full", "contained"]


class BlockTemplate(BaseModel):
    """One block slot in a layout section."""

    model_config = ConfigDict(frozen=True)

    type: BlockType
    variant: str | None = None
    width: BlockWidth | None = None
    item_count: int | None = None
    has_image: bool | None = None


class SectionTemplate(BaseModel):
    model_config = ConfigDict(frozen=True)

    style: SectionStyle | None = None
    blocks: list[BlockTemplate]


class LayoutTemplate(BaseModel):
    """A fixed page structure from the catalogue."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    use_cases: list[str] = Field(default_factory=list)
    sections: list[SectionTemplate]

    @property
    def blocks(self) -> list[BlockTemplate]:
        return [block for section in self.sections for block in section.blocks]

    @property
    def block_types(self) -> list[BlockType]:
        return [block.type for block in self.blocks]


class LayoutBlock(BaseModel):
    """A block position in the selected layout."""

    model_config = ConfigDict(frozen=True)

    block_type: BlockType
    content_index: int
    variant: str = "default"
    width: BlockWidth = "contained"
    section_style: SectionStyle | None = None


class LayoutDecision(BaseModel):
    model_config = ConfigDict(frozen=True)

    layout_id: str
    blocks: list[LayoutBlock]
