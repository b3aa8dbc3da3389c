"""Tests for the HTTP surface."""

import json

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from generative_pages import __version__
from generative_pages.api import router
from generative_pages.api.dependencies import get_app_settings
from generative_pages.core.generation_cache import GenerationCache
from generative_pages.data.intent import IntentClassification
from generative_pages.graph.pipeline import PagePipeline

from tests.fakes import (
    FakeImageProvider,
    FakePublisher,
    ScriptedCaller,
    build_services,
    recipe_chunks,
)


def parse_sse(body: str) -> list[tuple[str, dict]]:
    events = []
    for frame in body.strip().split("\n\n"):
        fields = dict(line.split(": ", 1) for line in frame.split("\n") if not line.startswith(":"))
        if "event" in fields:
            events.append((fields["event"], json.loads(fields["data"])))
    return events


@pytest.fixture
def make_client(settings, recipe_caller):
    def factory(
        publisher=None, shutting_down=False, provider=None, caller=None
    ) -> tuple[TestClient, FastAPI]:
        app = FastAPI()
        app.include_router(router, prefix="/api/v1")
        app.dependency_overrides[get_app_settings] = lambda: settings
        app.state.pipeline = PagePipeline(
            build_services(
                caller or recipe_caller, recipe_chunks(), provider=provider, publisher=publisher
            )
        )
        app.state.generation_cache = GenerationCache()
        app.state.active_requests = set()
        app.state.is_shutting_down = shutting_down
        return TestClient(app), app

    return factory


class TestHealth:
    def test_health(self, make_client):
        client, _ = make_client()
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "version": __version__}


class TestGenerate:
    def test_streams_page(self, make_client):
        client, _ = make_client()

        response = client.post(
            "/api/v1/generate", json={"query": "banana smoothie", "slug": "banana-smoothie"}
        )

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        assert response.headers["X-Request-ID"]

        events = parse_sse(response.text)
        assert events[0] == (
            "layout",
            {"layoutId": "recipe-collection", "blockTypes": ["hero", "cards", "split-content", "cta"]},
        )
        assert events[-1] == ("generation-complete", {"pageUrl": "/discover/banana-smoothie"})

    def test_slow_images_still_complete_and_persist(self, make_client, settings):
        settings.generation_timeout_seconds = 0.3
        publisher = FakePublisher()
        client, _ = make_client(publisher=publisher, provider=FakeImageProvider(delay=1.0))

        response = client.post(
            "/api/v1/generate", json={"query": "banana smoothie", "slug": "banana-smoothie"}
        )

        events = parse_sse(response.text)
        names = [name for name, _ in events]
        assert "error" not in names
        assert "image-ready" in names
        assert events[-1] == (
            "generation-complete",
            {"pageUrl": "https://main--site--org.aem.live/discover/banana-smoothie"},
        )
        assert publisher.published[0][0] == "/discover/banana-smoothie"

    def test_times_out_when_nothing_streams(self, make_client, settings, recipe_caller):
        settings.generation_timeout_seconds = 0.2
        slow_caller = ScriptedCaller(
            recipe_caller.responses, delays={IntentClassification: 5.0}
        )
        client, app = make_client(caller=slow_caller)

        response = client.post(
            "/api/v1/generate", json={"query": "banana smoothie", "slug": "banana-smoothie"}
        )

        events = parse_sse(response.text)
        assert "block-start" not in [name for name, _ in events]
        assert events[-1] == (
            "error",
            {
                "code": "TIMEOUT",
                "message": "Generation timed out after 0.2 seconds",
                "recoverable": True,
            },
        )
        assert not app.state.generation_cache.is_in_progress("/discover/banana-smoothie")

    def test_expired_generations_are_swept(self, make_client):
        client, app = make_client()
        app.state.generation_cache = GenerationCache(ttl_seconds=0)

        for query in ("banana smoothie", "green smoothie", "berry smoothie"):
            response = client.post("/api/v1/generate", json={"query": query})
            assert response.status_code == 200

        assert len(app.state.generation_cache) == 1

    def test_rejects_duplicate_generation(self, make_client):
        client, app = make_client()
        app.state.generation_cache.mark_in_progress("/discover/banana-smoothie", "banana smoothie")

        response = client.post(
            "/api/v1/generate", json={"query": "banana smoothie", "slug": "banana-smoothie"}
        )
        assert response.status_code == 409

    def test_rejects_while_shutting_down(self, make_client):
        client, _ = make_client(shutting_down=True)
        response = client.post("/api/v1/generate", json={"query": "banana smoothie"})
        assert response.status_code == 503

    @pytest.mark.parametrize("query", ["", "x" * 501])
    def test_validates_query(self, make_client, query):
        client, _ = make_client()
        response = client.post("/api/v1/generate", json={"query": query})
        assert response.status_code == 422


class TestPersist:
    payload = {
        "query": "banana smoothie",
        "blocks": [
            {"html": "<div><h1>Banana Smoothies</h1></div>", "blockType": "hero"},
            {"html": "<div>Shop</div>", "sectionStyle": "highlight", "blockType": "cta"},
        ],
    }

    def test_persist(self, make_client):
        publisher = FakePublisher()
        client, _ = make_client(publisher=publisher)

        response = client.post("/api/v1/persist", json=self.payload)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["path"].startswith("/smoothies/")
        assert body["urls"]["live"] == f"https://main--site--org.aem.live{body['path']}"
        assert "<div>style</div><div>highlight</div>" in publisher.published[0][1]

    def test_persist_failure_reported(self, make_client):
        client, _ = make_client(publisher=FakePublisher(success=False))

        body = client.post("/api/v1/persist", json=self.payload).json()

        assert body["success"] is False
        assert body["error"] == "DA unavailable"

    def test_persist_requires_publisher(self, make_client):
        client, _ = make_client()
        response = client.post("/api/v1/persist", json=self.payload)
        assert response.status_code == 503

    def test_persist_requires_blocks(self, make_client):
        client, _ = make_client(publisher=FakePublisher())
        response = client.post("/api/v1/persist", json={"query": "soup", "blocks": []})
        assert response.status_code == 422
