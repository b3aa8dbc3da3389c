"""Graph nodes for page generation.

Stages run strictly in order; each node is a barrier for the next. A node
that fails returns ``error``/``error_type`` and the graph routes straight
to ``failed_node``, which emits the single terminal error event.
"""

import asyncio
from typing import Any, Literal

from generative_pages.core.exceptions import PageGenerationError
from generative_pages.data.images import GeneratedImage, ImageDecision
from generative_pages.events.models import (
    BlockCompleteEvent,
    BlockContentEvent,
    BlockStartEvent,
    ErrorEvent,
    Event,
    GenerationCompleteEvent,
    ImagePlaceholderEvent,
    ImageReadyEvent,
    LayoutEvent,
)
from generative_pages.generation.fallback import get_fallback_content
from generative_pages.graph.state import PageState, error_update
from generative_pages.images.fallback import consistent_fallback, slot_type
from generative_pages.images.requests import build_image_requests, decide_image_strategy
from generative_pages.layouts.selector import (
    adjust_layout_for_context,
    select_layout,
    to_layout_decision,
)
from generative_pages.rendering.html import extract_full_text, render_block, render_page
from generative_pages.retrieval.planner import plan_retrieval
from generative_pages.utils.logging import get_logger


logger = get_logger(__name__)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================


async def emit_event(state: PageState, event: Event) -> None:
    """Emit an event to the client stream, if one is attached."""
    emitter = state.get("emitter")
    if emitter:
        await emitter.emit(event)


def fallback_images(decisions: list[ImageDecision]) -> list[GeneratedImage]:
    """Curated images for every slot, without calling a provider."""
    return [
        GeneratedImage(
            id=d.request.id,
            url=consistent_fallback(d.request.id + d.request.prompt, slot_type(d.request.id, d.request.size)),
            prompt=d.request.prompt,
            source="fallback",
        )
        for d in decisions
    ]


# =============================================================================
# CLASSIFY
# =============================================================================


async def classify_node(state: PageState) -> dict[str, Any]:
    """Intent classification. Failures fall back to a default inside the classifier."""
    logger.info("Stage: classifying")
    intent = await state["services"].classifier.classify(state["query"])
    return {"intent": intent}


# =============================================================================
# RETRIEVE
# =============================================================================


async def retrieve_node(state: PageState) -> dict[str, Any]:
    """Plan and run retrieval, with entity extraction alongside."""
    logger.info("Stage: retrieving")
    services = state["services"]
    plan = plan_retrieval(state["query"], state["intent"])

    try:
        context, analysis = await asyncio.gather(
            services.retriever.retrieve(plan),
            services.classifier.extract_entities(state["query"]),
        )
    except PageGenerationError as e:
        logger.error("Retrieval failed", strategy=plan.strategy, error=str(e))
        return error_update(e)

    return {"plan": plan, "context": context, "analysis": analysis}


# =============================================================================
# GENERATE CONTENT
# =============================================================================


async def generate_content_node(state: PageState) -> dict[str, Any]:
    """
    Pick the layout template, announce it, and draft content for it.

    The template is corrected against the retrieved context before the
    content generator sees it.
    """
    logger.info("Stage: generating content")
    intent = state["intent"]
    layout = select_layout(intent, state["query"])
    layout = adjust_layout_for_context(layout, state["context"], state["query"])

    await emit_event(
        state,
        LayoutEvent(layout_id=layout.id, block_types=list(layout.block_types)),
    )

    try:
        content = await state["services"].content_generator.generate(
            state["query"],
            state["context"],
            intent,
            layout,
            state.get("analysis"),
        )
    except PageGenerationError as e:
        logger.error("Content generation failed", layout_id=layout.id, error=str(e))
        return error_update(e)

    return {"layout": layout, "content": content}


# =============================================================================
# SELECT LAYOUT (parallel with image planning)
# =============================================================================


async def select_layout_node(state: PageState) -> dict[str, Any]:
    logger.info("Stage: selecting layout")
    content = state["content"]
    context = state["context"]
    products = list(state["intent"].entities.products)
    if state.get("analysis"):
        products.extend(p for p in state["analysis"].products if p not in products)

    decision = to_layout_decision(state["layout"])
    image_decisions = [
        decide_image_strategy(request, context, products)
        for request in build_image_requests(content)
    ]

    logger.info(
        "Layout selected",
        layout_id=decision.layout_id,
        blocks=len(decision.blocks),
        images=len(image_decisions),
        reused=sum(1 for d in image_decisions if d.action == "existing"),
    )
    return {"decision": decision, "image_decisions": image_decisions}


# =============================================================================
# STREAM BLOCKS
# =============================================================================


async def stream_blocks_node(state: PageState) -> dict[str, Any]:
    """One start/content/complete triple per block, in layout order."""
    logger.info("Stage: streaming blocks")
    content = state["content"]
    decision = state["decision"]

    placeholders: dict[str, list[str]] = {}
    for image_decision in state.get("image_decisions", []):
        request = image_decision.request
        placeholders.setdefault(request.block_id, []).append(request.id)

    for position, (block, slot) in enumerate(zip(content.blocks, decision.blocks)):
        await emit_event(
            state,
            BlockStartEvent(block_id=block.id, block_type=block.type, position=position),
        )
        await emit_event(
            state,
            BlockContentEvent(
                block_id=block.id,
                html=render_block(block, position),
                section_style=slot.section_style,
            ),
        )
        await emit_event(state, BlockCompleteEvent(block_id=block.id))

        for image_id in placeholders.get(block.id, []):
            await emit_event(state, ImagePlaceholderEvent(image_id=image_id, block_id=block.id))

    return {}


# =============================================================================
# GENERATE IMAGES
# =============================================================================


async def generate_images_node(state: PageState) -> dict[str, Any]:
    """Resolve every image slot. Never fails."""
    logger.info("Stage: generating images")

    async def on_ready(image: GeneratedImage) -> None:
        await emit_event(state, ImageReadyEvent(image_id=image.id, url=image.url))

    images = await state["services"].image_generator.resolve(
        state.get("image_decisions", []),
        state["slug"],
        on_ready=on_ready,
    )
    return {"images": images}


# =============================================================================
# VALIDATE SAFETY
# =============================================================================


async def validate_safety_node(state: PageState) -> dict[str, Any]:
    """
    Screen the full page text once.

    A blocked page is swapped for the intent's pre-approved fallback page
    with curated images. Blocks already streamed stay on the client.
    """
    logger.info("Stage: validating safety")
    result = await state["services"].safety_gate.validate(extract_full_text(state["content"]))

    if not result.blocked:
        return {"safety": result}

    intent = state["intent"]
    fallback = get_fallback_content(intent.intent_type, state["decision"].layout_id)
    fallback_decisions = [
        ImageDecision(request=request, action="generate")
        for request in build_image_requests(fallback)
    ]
    logger.warning(
        "Generated page blocked after streaming, persisting fallback instead",
        reason=result.reason,
        streamed_blocks=len(state["content"].blocks),
    )
    return {
        "safety": result,
        "content": fallback,
        "images": fallback_images(fallback_decisions),
        "used_fallback": True,
    }


# =============================================================================
# PERSIST
# =============================================================================


async def persist_node(state: PageState) -> dict[str, Any]:
    """Render the final document and hand it to the publisher. Failures are warnings."""
    logger.info("Stage: persisting")
    content = state["content"]
    path = state["path"]

    widths = None
    if not state.get("used_fallback"):
        widths = [slot.width for slot in state["decision"].blocks]

    page_html = render_page(
        content,
        {image.id: image.url for image in state.get("images", [])},
        widths=widths,
        query=state["query"],
    )

    publisher = state["services"].publisher
    if publisher is None:
        return {"page_html": page_html, "page_url": path, "publish_result": None}

    try:
        result = await publisher.publish(path, page_html)
    except PageGenerationError as e:
        logger.warning("Persistence failed, page remains available in-stream", path=path, error=str(e))
        return {"page_html": page_html, "page_url": path, "publish_result": None}

    if not result.success:
        logger.warning("Persistence failed, page remains available in-stream", path=path, error=result.error)

    page_url = result.urls.live if result.success and result.urls else path
    return {"page_html": page_html, "page_url": page_url, "publish_result": result}


# =============================================================================
# TERMINAL NODES
# =============================================================================


async def complete_node(state: PageState) -> dict[str, Any]:
    page_url = state.get("page_url") or state["path"]
    await emit_event(state, GenerationCompleteEvent(page_url=page_url))
    logger.info("Generation complete", page_url=page_url, fallback=state.get("used_fallback", False))
    return {"page_url": page_url}


async def failed_node(state: PageState) -> dict[str, Any]:
    await emit_event(
        state,
        ErrorEvent(
            code=state.get("error_type") or "GENERATION_FAILED",
            message=state.get("error") or "Generation failed",
            recoverable=state.get("error_recoverable", False),
        ),
    )
    logger.error("Generation failed", code=state.get("error_type"), error=state.get("error"))
    return {}


# =============================================================================
# ROUTING
# =============================================================================


def route_on_error(state: PageState) -> Literal["continue", "failed"]:
    return "failed" if state.get("error") else "continue"
