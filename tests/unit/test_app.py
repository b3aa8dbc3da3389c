"""Tests for application wiring and shutdown."""

import asyncio

import pytest

from generative_pages.app import Application
from generative_pages.config.settings import Settings
from generative_pages.graph.pipeline import PagePipeline
from generative_pages.images.providers import (
    FalImageProvider,
    ImagenProvider,
    create_image_provider,
)

from tests.fakes import FakePublisher, build_services


SERVICE_ACCOUNT = '{"project_id": "vitamix-gen", "client_email": "svc@vitamix-gen.iam", "private_key": "x"}'


class ClosingPublisher(FakePublisher):
    def __init__(self):
        super().__init__()
        self.closed = False

    async def close(self) -> None:
        self.closed = True


class TestImageProviderFactory:
    @pytest.mark.parametrize(
        "overrides,provider_type,name,batch_size",
        [
            ({}, FalImageProvider, "fal", 20),
            ({"image_provider": "fal-lora", "fal_lora_url": "https://lora"}, FalImageProvider, "fal-lora", 10),
            ({"image_provider": "imagen", "google_service_account_json": SERVICE_ACCOUNT}, ImagenProvider, "imagen", 3),
        ],
    )
    def test_selects_provider(self, overrides, provider_type, name, batch_size):
        provider = create_image_provider(Settings(_env_file=None, **overrides))

        assert isinstance(provider, provider_type)
        assert provider.name == name
        assert provider.batch_size == batch_size


class TestApplicationShutdown:
    @pytest.mark.asyncio
    async def test_waits_for_background_runs_and_closes_clients(self, recipe_caller):
        publisher = ClosingPublisher()
        app = Application()
        app.pipeline = PagePipeline(build_services(recipe_caller, publisher=publisher))

        orphan = asyncio.create_task(asyncio.sleep(0.05))
        app.pipeline.keep_running(orphan)

        await app.shutdown(timeout=5)

        assert orphan.done()
        assert app.pipeline.background_tasks == set()
        assert publisher.closed
        assert app.is_shutting_down

    @pytest.mark.asyncio
    async def test_shutdown_is_idempotent(self, recipe_caller):
        publisher = ClosingPublisher()
        app = Application()
        app.pipeline = PagePipeline(build_services(recipe_caller, publisher=publisher))

        await app.shutdown()
        publisher.closed = False
        await app.shutdown()

        assert not publisher.closed

    @pytest.mark.asyncio
    async def test_gives_up_after_timeout(self):
        app = Application()
        app.track_request("stuck")

        await app.shutdown(timeout=0.05)

        assert app.active_requests == {"stuck"}
        assert app.is_shutting_down
