"""Domain models for page generation.

1. **Intent**: IntentClassification, QueryAnalysis
2. **Retrieval**: RetrievalPlan, ContextChunk, AssembledContext
3. **Layout**: LayoutTemplate, LayoutDecision
4. **Content**: GeneratedContent and its tagged block union
5. **Images**: ImageRequest, GeneratedImage
6. **Safety**: SafetyFlag, SafetyResult
"""

from generative_pages.data.intent import (
    Entities,
    IntentClassification,
    IntentType,
    QueryAnalysis,
)
from generative_pages.data.retrieval import (
    AssembledContext,
    ChunkMetadata,
    ContextChunk,
    DedupeMode,
    RetrievalFilters,
    RetrievalPlan,
    RetrievalStrategy,
)
from generative_pages.data.layout import (
    BlockTemplate,
    BlockType,
    LayoutBlock,
    LayoutDecision,
    LayoutTemplate,
    SectionTemplate,
)
from generative_pages.data.content import (
    CardsBlock,
    ColumnsBlock,
    ContentBlock,
    CTABlock,
    FAQBlock,
    GeneratedContent,
    HeroBlock,
    SplitContentBlock,
    TextBlock,
)
from generative_pages.data.images import (
    GeneratedImage,
    ImageAttempt,
    ImageDecision,
    ImageRequest,
    ImageSize,
)
from generative_pages.data.safety import (
    BrandComplianceResult,
    SafetyFlag,
    SafetyResult,
    SafetyScores,
    Severity,
    ToxicityResult,
)

__all__ = [
    # Intent
    "Entities",
    "IntentClassification",
    "IntentType",
    "QueryAnalysis",
    # Retrieval
    "AssembledContext",
    "ChunkMetadata",
    "ContextChunk",
    "DedupeMode",
    "RetrievalFilters",
    "RetrievalPlan",
    "RetrievalStrategy",
    # Layout
    "BlockTemplate",
    "BlockType",
    "LayoutBlock",
    "LayoutDecision",
    "LayoutTemplate",
    "SectionTemplate",
    # Content
    "CardsBlock",
    "ColumnsBlock",
    "ContentBlock",
    "CTABlock",
    "FAQBlock",
    "GeneratedContent",
    "HeroBlock",
    "SplitContentBlock",
    "TextBlock",
    # Images
    "GeneratedImage",
    "ImageAttempt",
    "ImageDecision",
    "ImageRequest",
    "ImageSize",
    # Safety
    "BrandComplianceResult",
    "SafetyFlag",
    "SafetyResult",
    "SafetyScores",
    "Severity",
    "ToxicityResult",
]
