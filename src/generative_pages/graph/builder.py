"""LangGraph builder for page generation.

Creates the StateGraph with one node per stage and an error route out of
every stage that can fail.
"""

from __future__ import annotations

from langgraph.graph import END, START, StateGraph
from langgraph.graph.state import CompiledStateGraph

from generative_pages.graph.nodes import (
    # Node functions
    classify_node,
    complete_node,
    failed_node,
    generate_content_node,
    generate_images_node,
    persist_node,
    retrieve_node,
    select_layout_node,
    stream_blocks_node,
    validate_safety_node,
    # Routing functions
    route_on_error,
)
from generative_pages.graph.state import PageState
from generative_pages.utils.logging import get_logger


logger = get_logger(__name__)


def create_page_graph() -> CompiledStateGraph:
    """
    Create the page generation graph.

    Flow Structure:
        START → classify → retrieve ─┬─ failed → END
                                     └─ generate_content ─┬─ failed → END
                                                          └─ select_layout → stream_blocks
                 → generate_images → validate_safety → persist → complete → END

    retrieve runs entity extraction alongside retrieval; select_layout
    plans image slots alongside block positioning.

    Returns:
        Compiled StateGraph ready for execution
    """
    builder = StateGraph(PageState)

    # -------------------------------------------------------------------------
    # ADD NODES
    # -------------------------------------------------------------------------

    builder.add_node("classify", classify_node)
    builder.add_node("retrieve", retrieve_node)
    builder.add_node("generate_content", generate_content_node)
    builder.add_node("select_layout", select_layout_node)
    builder.add_node("stream_blocks", stream_blocks_node)
    builder.add_node("generate_images", generate_images_node)
    builder.add_node("validate_safety", validate_safety_node)
    builder.add_node("persist", persist_node)
    builder.add_node("complete", complete_node)
    builder.add_node("failed", failed_node)

    # -------------------------------------------------------------------------
    # ADD EDGES
    # -------------------------------------------------------------------------

    builder.add_edge(START, "classify")
    builder.add_edge("classify", "retrieve")

    builder.add_conditional_edges(
        "retrieve",
        route_on_error,
        {"continue": "generate_content", "failed": "failed"},
    )
    builder.add_conditional_edges(
        "generate_content",
        route_on_error,
        {"continue": "select_layout", "failed": "failed"},
    )

    builder.add_edge("select_layout", "stream_blocks")
    builder.add_edge("stream_blocks", "generate_images")
    builder.add_edge("generate_images", "validate_safety")
    builder.add_edge("validate_safety", "persist")
    builder.add_edge("persist", "complete")

    builder.add_edge("complete", END)
    builder.add_edge("failed", END)

    graph = builder.compile()
    logger.info("Page graph compiled successfully")
    return graph
