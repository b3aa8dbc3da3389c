"""Intent classification and entity extraction.

Both calls are best-effort: any failure is logged and replaced by a
low-confidence default so the request can continue.
"""

from generative_pages.config.prompts import (
    ENTITY_EXTRACTION_PROMPT,
    INTENT_CLASSIFICATION_PROMPT,
    INTENT_CLASSIFICATION_SYSTEM_PROMPT,
)
from generative_pages.data.intent import IntentClassification, QueryAnalysis
from generative_pages.utils.logging import get_logger
from generative_pages.utils.structured_llm import StructuredLLMCaller


logger = get_logger(__name__)


class IntentClassifier:
    """Reads a query into an IntentClassification and a QueryAnalysis."""

    def __init__(self, caller: StructuredLLMCaller, model: str = "haiku"):
        self.caller = caller
        self.model = model

    async def classify(self, query: str) -> IntentClassification:
        try:
            intent = await self.caller.call(
                prompt=INTENT_CLASSIFICATION_PROMPT.format(query=query),
                response_model=IntentClassification,
                system=INTENT_CLASSIFICATION_SYSTEM_PROMPT,
                model=self.model,
                max_tokens=500,
                temperature=0.1,
                include_schema=False,
            )
        except Exception as e:
            logger.warning(
                "Intent classification failed, using default",
                error=str(e),
                error_type=type(e).__name__,
            )
            return IntentClassification.default(query)

        logger.info(
            "Intent classified",
            intent_type=intent.intent_type,
            confidence=intent.confidence,
            layout_id=intent.layout_id,
        )
        return intent

    async def extract_entities(self, query: str) -> QueryAnalysis:
        try:
            return await self.caller.call(
                prompt=ENTITY_EXTRACTION_PROMPT.format(query=query),
                response_model=QueryAnalysis,
                model=self.model,
                max_tokens=500,
                temperature=0.3,
                include_schema=False,
            )
        except Exception as e:
            logger.warning(
                "Entity extraction failed, using default",
                error=str(e),
                error_type=type(e).__name__,
            )
            return QueryAnalysis.default(query)
