"""Structured page content generation."""

from generative_pages.config.prompts import (
    CONTENT_GENERATION_PROMPT,
    CONTENT_GENERATION_SYSTEM_PROMPT,
    NO_CONTEXT_NOTE,
    RAG_SOURCE_TEMPLATE,
)
from generative_pages.core.exceptions import ContentGenerationError
from generative_pages.core.resilience import (
    BreakerOpen,
    MaxTimeoutExceeded,
    RateLimitError,
    TransientError,
)
from generative_pages.data.content import GeneratedContent
from generative_pages.data.intent import IntentClassification, QueryAnalysis
from generative_pages.data.layout import LayoutDecision, LayoutTemplate
from generative_pages.data.retrieval import AssembledContext
from generative_pages.layouts.catalog import format_layout_for_prompt
from generative_pages.layouts.selector import to_layout_decision
from generative_pages.utils.logging import get_logger
from generative_pages.utils.structured_llm import StructuredLLMCaller, StructuredOutputError


logger = get_logger(__name__)


_RECOVERABLE_ERRORS = (TransientError, RateLimitError, BreakerOpen, MaxTimeoutExceeded)


class ContentGenerator:
    """
    Drafts a page for a layout.

    The generated blocks must match the layout's block types one-to-one and
    in order. Blocks are renumbered ``block-{i}`` and take their variant and
    section style from the layout.
    """

    def __init__(
        self,
        caller: StructuredLLMCaller,
        model: str = "sonnet",
        max_tokens: int = 4096,
    ):
        self.caller = caller
        self.model = model
        self.max_tokens = max_tokens

    async def generate(
        self,
        query: str,
        context: AssembledContext,
        intent: IntentClassification,
        layout: LayoutTemplate,
        analysis: QueryAnalysis | None = None,
    ) -> GeneratedContent:
        prompt = build_content_prompt(query, context, intent, layout, analysis)

        try:
            draft = await self.caller.call(
                prompt=prompt,
                response_model=GeneratedContent,
                system=CONTENT_GENERATION_SYSTEM_PROMPT,
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=0.7,
                include_schema=False,
            )
        except StructuredOutputError as e:
            raise ContentGenerationError(
                "Content generator returned invalid JSON", layout_id=layout.id
            ) from e
        except _RECOVERABLE_ERRORS as e:
            raise ContentGenerationError(
                f"Content generation unavailable: {e}",
                layout_id=layout.id,
                recoverable=True,
            ) from e
        except Exception as e:
            raise ContentGenerationError(
                f"Content generation failed: {e}", layout_id=layout.id
            ) from e

        content = align_with_layout(draft, to_layout_decision(layout))
        logger.info(
            "Content generated",
            layout_id=layout.id,
            blocks=len(content.blocks),
            citations=len(content.citations),
        )
        return content


def align_with_layout(content: GeneratedContent, decision: LayoutDecision) -> GeneratedContent:
    """Check block types against the layout and stamp ids, variants and styles."""
    expected = [block.block_type for block in decision.blocks]
    if content.block_types != expected:
        raise ContentGenerationError(
            f"Generated blocks {content.block_types} do not match layout {expected}",
            layout_id=decision.layout_id,
        )

    blocks = [
        block.model_copy(
            update={
                "id": f"block-{i}",
                "variant": slot.variant if slot.variant != "default" else block.variant,
                "section_style": slot.section_style,
            }
        )
        for i, (block, slot) in enumerate(zip(content.blocks, decision.blocks))
    ]
    return content.model_copy(update={"blocks": blocks})


def build_content_prompt(
    query: str,
    context: AssembledContext,
    intent: IntentClassification,
    layout: LayoutTemplate,
    analysis: QueryAnalysis | None = None,
) -> str:
    if context.chunks:
        rag_section = "\n---\n".join(
            RAG_SOURCE_TEMPLATE.format(
                index=i,
                title=chunk.metadata.title,
                url=chunk.metadata.source_url,
                content_type=chunk.metadata.content_type,
                relevance=round(min(chunk.score, 1.0) * 100),
                text=chunk.text,
            )
            for i, chunk in enumerate(context.chunks, start=1)
        )
    else:
        rag_section = NO_CONTEXT_NOTE

    block_lines = []
    for i, block in enumerate(layout.blocks, start=1):
        line = f"{i}. {block.type}"
        if block.item_count:
            line += f" ({block.item_count} items)"
        if block.has_image:
            line += " - include imagePrompt"
        block_lines.append(line)

    entities = intent.entities
    products = list(dict.fromkeys(entities.products + (analysis.products if analysis else [])))
    ingredients = list(dict.fromkeys(entities.ingredients + (analysis.ingredients if analysis else [])))
    goals = list(dict.fromkeys(entities.goals + (analysis.goals if analysis else [])))
    keywords = analysis.keywords if analysis else []

    return CONTENT_GENERATION_PROMPT.format(
        query=query,
        intent_type=intent.intent_type,
        confidence=round(intent.confidence * 100),
        content_types=", ".join(intent.content_types),
        products=", ".join(products) or "none",
        ingredients=", ".join(ingredients) or "none",
        goals=", ".join(goals) or "general exploration",
        keywords=", ".join(keywords) or "none",
        rag_section=rag_section,
        layout_description=format_layout_for_prompt(layout),
        block_list="\n".join(block_lines),
    )
