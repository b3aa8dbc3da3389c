"""LangGraph page generation pipeline."""

from generative_pages.graph.builder import create_page_graph
from generative_pages.graph.pipeline import PagePipeline, PersistOutcome
from generative_pages.graph.state import PageState, PipelineServices, create_initial_state

__all__ = [
    "PagePipeline",
    "PageState",
    "PersistOutcome",
    "PipelineServices",
    "create_initial_state",
    "create_page_graph",
]
