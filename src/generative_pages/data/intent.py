"""Intent classification and query analysis models."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


IntentType = Literal["product_info", "recipe", "comparison", "support", "general"]
ContentTypeName = Literal["product", "recipe", "editorial", "support", "brand"]

CONTENT_TYPES: tuple[str, ...] = ("product", "recipe", "editorial", "support", "brand")


class Entities(BaseModel):
    """Entities named in the query."""

    model_config = ConfigDict(frozen=True)

    products: list[str] = Field(default_factory=list)
    ingredients: list[str] = Field(default_factory=list)
    goals: list[str] = Field(default_factory=list)


class IntentClassification(BaseModel):
    """Structured reading of a query, produced once per request."""

    model_config = ConfigDict(frozen=True)

    intent_type: IntentType = Field("general", description="Query type")
    confidence: float = Field(0.3, ge=0.0, le=1.0)
    layout_id: str | None = Field(None, description="Layout suggested by the classifier")
    content_types: list[ContentTypeName] = Field(default_factory=lambda: ["editorial"])
    entities: Entities = Field(default_factory=Entities)

    @field_validator("confidence", mode="before")
    @classmethod
    def clamp_confidence(cls, value: Any) -> Any:
        if isinstance(value, (int, float)):
            return min(1.0, max(0.0, float(value)))
        return value

    @field_validator("content_types", mode="before")
    @classmethod
    def drop_unknown_content_types(cls, value: Any) -> Any:
        if isinstance(value, list):
            known = [v for v in value if v in CONTENT_TYPES]
            return known or ["editorial"]
        return value

    @classmethod
    def default(cls, query: str) -> "IntentClassification":
        """Low-confidence classification used when the classifier fails."""
        return cls(
            intent_type="general",
            confidence=0.3,
            layout_id=None,
            content_types=["editorial"],
            entities=Entities(goals=[query]),
        )


class QueryAnalysis(BaseModel):
    """Lightweight entity extraction run alongside retrieval."""

    model_config = ConfigDict(frozen=True)

    products: list[str] = Field(default_factory=list)
    ingredients: list[str] = Field(default_factory=list)
    goals: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)

    @classmethod
    def default(cls, query: str) -> "QueryAnalysis":
        return cls(
            goals=[query],
            keywords=[word for word in query.split(" ") if len(word) > 3],
        )
