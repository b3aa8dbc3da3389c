"""Content safety models."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


Severity = Literal["low", "medium", "high", "critical"]

SEVERITY_WEIGHTS: dict[str, float] = {
    "low": 0.1,
    "medium": 0.25,
    "high": 0.5,
    "critical": 1.0,
}


class SafetyFlag(BaseModel):
    """A flagged span of text."""

    model_config = ConfigDict(frozen=True)

    kind: str
    severity: Severity
    span: str
    suggestion: str | None = None


class ToxicityFlag(BaseModel):
    type: str = "other"
    severity: Severity = "low"
    excerpt: str = ""

    @field_validator("severity", mode="before")
    @classmethod
    def normalize_severity(cls, value):
        if isinstance(value, str) and value.lower() in SEVERITY_WEIGHTS:
            return value.lower()
        return "low"


class ToxicityResult(BaseModel):
    """Toxicity classifier output."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    safe: bool = True
    toxicity_score: float = 0.0
    flags: list[ToxicityFlag] = Field(default_factory=list)
    explanation: str = ""

    @field_validator("toxicity_score", mode="before")
    @classmethod
    def clamp_score(cls, value):
        if isinstance(value, (int, float)):
            return min(1.0, max(0.0, float(value)))
        return value


class BrandComplianceResult(BaseModel):
    """Brand compliance scorer output."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    is_compliant: bool = True
    score: float = Field(85.0, ge=0.0, le=100.0)
    issues: list[str] = Field(default_factory=list)

    @field_validator("score", mode="before")
    @classmethod
    def clamp_score(cls, value):
        if isinstance(value, (int, float)):
            return min(100.0, max(0.0, float(value)))
        return value


class SafetyScores(BaseModel):
    brand: float
    toxicity: float
    offensiveness: float
    overall: float


class SafetyTiming(BaseModel):
    """Milliseconds spent per check."""

    pattern_check: float = 0.0
    brand_check: float = 0.0
    toxicity_check: float = 0.0
    total: float = 0.0


class SafetyResult(BaseModel):
    """Block/warn/pass decision for a page."""

    safe: bool
    blocked: bool
    reason: str | None = None
    scores: SafetyScores
    flags: list[SafetyFlag] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    timing: SafetyTiming = Field(default_factory=SafetyTiming)
