"""Pytest fixtures for testing."""

import asyncio

import pytest
import pytest_asyncio

from generative_pages.config.settings import Settings
from generative_pages.data.content import GeneratedContent
from generative_pages.data.intent import IntentClassification, QueryAnalysis
from generative_pages.events.emitter import EventEmitter
from generative_pages.events.models import Event
from generative_pages.graph.pipeline import PagePipeline

from tests.fakes import (
    ScriptedCaller,
    build_services,
    recipe_chunks,
    recipe_content,
    recipe_intent,
    safe_responses,
)


@pytest.fixture
def settings() -> Settings:
    """Create test settings."""
    return Settings(
        anthropic_api_key="test-key",
        openai_api_key="test-key",
        log_level="DEBUG",
    )


@pytest_asyncio.fixture
async def event_queue() -> asyncio.Queue[Event]:
    """Create event queue for testing."""
    return asyncio.Queue()


@pytest_asyncio.fixture
async def event_emitter(event_queue: asyncio.Queue[Event]) -> EventEmitter:
    """Create event emitter for testing."""
    return EventEmitter(event_queue)


@pytest.fixture
def recipe_caller() -> ScriptedCaller:
    """Caller scripted for a clean recipe page."""
    return ScriptedCaller(
        {
            IntentClassification: recipe_intent(),
            QueryAnalysis: QueryAnalysis(ingredients=["banana"], keywords=["banana", "smoothie"]),
            GeneratedContent: recipe_content(),
            **safe_responses(),
        }
    )


@pytest.fixture
def recipe_pipeline(recipe_caller: ScriptedCaller) -> PagePipeline:
    """Pipeline wired with fakes around the recipe script."""
    return PagePipeline(build_services(recipe_caller, recipe_chunks()))
