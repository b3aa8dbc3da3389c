"""Graph state for one page generation.

Each node reads what earlier stages produced and returns only the keys it
sets. Collaborators and the event emitter travel in the state as runtime
context.
"""

from dataclasses import dataclass
from typing import Any, TypedDict

from generative_pages.data.content import GeneratedContent
from generative_pages.data.images import GeneratedImage, ImageDecision
from generative_pages.data.intent import IntentClassification, QueryAnalysis
from generative_pages.data.layout import LayoutDecision, LayoutTemplate
from generative_pages.data.retrieval import AssembledContext, RetrievalPlan
from generative_pages.data.safety import SafetyResult
from generative_pages.events.emitter import EventEmitter
from generative_pages.generation.content import ContentGenerator
from generative_pages.generation.intent import IntentClassifier
from generative_pages.images.generator import ImageGenerator
from generative_pages.publishing.cms import CMSPublisher, PublishResult
from generative_pages.retrieval.retriever import ContextRetriever
from generative_pages.safety.gate import ContentSafetyGate
from generative_pages.utils.llm import LLMClient


@dataclass
class PipelineServices:
    """External capabilities the pipeline awaits."""

    classifier: IntentClassifier
    retriever: ContextRetriever
    content_generator: ContentGenerator
    image_generator: ImageGenerator
    safety_gate: ContentSafetyGate
    publisher: CMSPublisher | None = None
    llm: LLMClient | None = None


class PageState(TypedDict, total=False):
    # -------------------------------------------------------------------------
    # INPUT
    # -------------------------------------------------------------------------
    query: str
    slug: str
    path: str
    request_id: str

    # -------------------------------------------------------------------------
    # UNDERSTANDING
    # -------------------------------------------------------------------------
    intent: IntentClassification
    analysis: QueryAnalysis
    plan: RetrievalPlan
    context: AssembledContext

    # -------------------------------------------------------------------------
    # CONTENT AND LAYOUT
    # -------------------------------------------------------------------------
    layout: LayoutTemplate
    content: GeneratedContent
    decision: LayoutDecision
    image_decisions: list[ImageDecision]

    # -------------------------------------------------------------------------
    # OUTPUT
    # -------------------------------------------------------------------------
    images: list[GeneratedImage]
    safety: SafetyResult
    used_fallback: bool
    page_html: str
    publish_result: PublishResult | None
    page_url: str

    # -------------------------------------------------------------------------
    # RUNTIME CONTEXT
    # -------------------------------------------------------------------------
    emitter: EventEmitter | None
    services: PipelineServices

    # Error handling
    error: str | None
    error_type: str | None
    error_recoverable: bool


def create_initial_state(
    query: str,
    slug: str,
    path: str,
    request_id: str,
    services: PipelineServices,
    emitter: EventEmitter | None = None,
) -> PageState:
    return PageState(
        query=query,
        slug=slug,
        path=path,
        request_id=request_id,
        used_fallback=False,
        publish_result=None,
        emitter=emitter,
        services=services,
        error=None,
        error_type=None,
        error_recoverable=False,
    )


def error_update(error: Exception, code: str | None = None) -> dict[str, Any]:
    """State update that routes the graph to the failure node."""
    return {
        "error": str(error),
        "error_type": code or getattr(error, "code", "GENERATION_FAILED"),
        "error_recoverable": bool(getattr(error, "recoverable", False)),
    }
