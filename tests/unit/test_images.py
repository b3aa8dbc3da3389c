"""Tests for image planning, fallback substitution and generation."""

import random

import httpx
import pytest

from generative_pages.data.images import ImageAttempt, ImageDecision, ImageRequest
from generative_pages.data.retrieval import AssembledContext
from generative_pages.generation.content import align_with_layout
from generative_pages.images.fallback import (
    CARD_FALLBACKS,
    HERO_FALLBACKS,
    apply_fallback_strategy,
    consistent_fallback,
    slot_type,
    string_hash,
)
from generative_pages.images.generator import ImageGenerator
from generative_pages.images.prompts import build_image_prompt, detect_content_type
from generative_pages.images.providers.fal import LORA_TRIGGER_WORD, FalImageProvider
from generative_pages.images.providers.imagen import TokenCache
from generative_pages.images.requests import (
    DEFAULT_IMAGE_PROMPT,
    build_image_requests,
    decide_image_strategy,
)
from generative_pages.images.storage.local import LocalImageStorage
from generative_pages.layouts.catalog import get_layout_by_id
from generative_pages.layouts.selector import to_layout_decision

from tests.fakes import FakeImageProvider, MemoryImageStorage, make_chunk, recipe_content


def aligned_recipe_content():
    return align_with_layout(recipe_content(), to_layout_decision(get_layout_by_id("recipe-collection")))


def request(image_id: str, size: str = "card", prompt: str | None = None) -> ImageRequest:
    return ImageRequest(id=image_id, block_id="block-1", prompt=prompt or f"prompt {image_id}", size=size)


class TestImageRequests:
    def test_ids_are_scoped_by_block_position(self):
        requests = build_image_requests(aligned_recipe_content())

        assert [r.id for r in requests] == ["hero", "card-1-0", "card-1-1", "split-2"]
        assert [r.block_id for r in requests] == ["block-0", "block-1", "block-1", "block-2"]
        assert [r.aspect_ratio for r in requests] == ["5:2", "4:3", "4:3", "4:3"]
        assert len({r.id for r in requests}) == len(requests)

    def test_reuses_indexed_image_for_named_product(self):
        context = AssembledContext(
            chunks=[make_chunk("a3500", 0.9, content_type="product", product_key="A3500",
                               image_url="https://www.vitamix.com/a3500.png")]
        )
        decision = decide_image_strategy(
            request("hero", "hero", "the A3500 on a marble counter"), context, ["A3500"]
        )
        assert decision.action == "existing"
        assert decision.existing_url == "https://www.vitamix.com/a3500.png"

    def test_generates_when_product_not_in_prompt(self):
        context = AssembledContext(
            chunks=[make_chunk("a3500", 0.9, product_key="A3500", image_url="https://x/a.png")]
        )
        decision = decide_image_strategy(request("hero", "hero", "fresh berries"), context, ["A3500"])
        assert decision.action == "generate"
        assert decision.existing_url is None

    def test_empty_prompt_gets_default(self):
        decision = decide_image_strategy(request("card-1-0", prompt=" "), AssembledContext())
        assert decision.request.prompt == DEFAULT_IMAGE_PROMPT


class TestImagePrompts:
    def test_content_type_detection(self):
        assert detect_content_type("A green smoothie") == "smoothie"
        assert detect_content_type("Warm tomato soup") == "soup"
        assert detect_content_type("sunset over a lake") == "lifestyle"

    def test_prompt_includes_subject_first(self):
        prompt = build_image_prompt("banana smoothie", "hero")
        assert prompt.startswith("banana smoothie")
        assert "No text, logos, or watermarks" in prompt


class TestFallbackStrategy:
    """Curated and sibling substitution."""

    def test_string_hash_is_stable(self):
        assert string_hash("a") == 97
        assert string_hash("ab") == 97 * 31 + 98
        assert string_hash("hero-prompt") == string_hash("hero-prompt")

    def test_consistent_fallback_is_deterministic(self):
        assert consistent_fallback("a", "hero") == HERO_FALLBACKS[97 % len(HERO_FALLBACKS)]
        assert consistent_fallback("x" * 40, "card") == consistent_fallback("x" * 40, "card")

    @pytest.mark.parametrize(
        "image_id,size,expected",
        [
            ("hero", None, "hero"),
            ("hero-4", None, "hero"),
            ("col-2-1", None, "column"),
            ("card-1-0", None, "card"),
            ("split-3", "card", "card"),
            ("anything", "thumbnail", "card"),
            ("card-1-0", "hero", "hero"),
        ],
    )
    def test_slot_type(self, image_id, size, expected):
        assert slot_type(image_id, size) == expected

    def test_failed_card_reuses_sibling(self):
        requests = [request("card-1-0"), request("card-1-1"), request("card-1-2")]
        attempts = [
            ImageAttempt(id="card-1-0", prompt="p0", url="/images/s/card-1-0.png"),
            ImageAttempt(id="card-1-1", prompt="p1", error="timeout"),
            ImageAttempt(id="card-1-2", prompt="p2", url="/images/s/card-1-2.png"),
        ]

        images = apply_fallback_strategy(requests, attempts, rng=random.Random(7))

        assert [i.id for i in images] == ["card-1-0", "card-1-1", "card-1-2"]
        assert images[1].source == "sibling"
        assert images[1].url in {"/images/s/card-1-0.png", "/images/s/card-1-2.png"}
        assert images[0].source == images[2].source == "generated"

    def test_failed_hero_never_uses_sibling(self):
        requests = [request("hero", "hero"), request("hero-3", "hero")]
        attempts = [
            ImageAttempt(id="hero", prompt="kitchen", error="rejected"),
            ImageAttempt(id="hero-3", prompt="fruit", url="/images/s/hero-3.png"),
        ]
        images = apply_fallback_strategy(requests, attempts)

        assert images[0].source == "fallback"
        assert images[0].url == consistent_fallback("hero" + "kitchen", "hero")

    def test_all_cards_failed_use_curated_pool(self):
        requests = [request("card-1-0"), request("card-1-1")]
        attempts = [ImageAttempt(id=r.id, prompt=r.prompt, error="down") for r in requests]
        images = apply_fallback_strategy(requests, attempts)

        assert all(i.source == "fallback" for i in images)
        assert all(i.url in CARD_FALLBACKS for i in images)


class TestImageGenerator:
    @pytest.mark.asyncio
    async def test_one_image_per_request_despite_failures(self):
        provider = FakeImageProvider(batch_size=2, fail_on=("broken",))
        generator = ImageGenerator(provider, MemoryImageStorage(), rng=random.Random(1))
        requests = [
            request("hero", "hero", "hero shot"),
            request("card-1-0", prompt="broken card"),
            request("card-1-1", prompt="good card"),
            request("col-2-0", "column", "broken column"),
        ]
        ready = []

        async def on_ready(image):
            ready.append(image.id)

        images = await generator.generate_batch(requests, "banana-smoothies", on_ready=on_ready)

        assert [i.id for i in images] == [r.id for r in requests]
        assert all(i.url for i in images)
        assert sorted(ready) == sorted(r.id for r in requests)
        assert images[1].source == "sibling"
        assert images[1].url == "/images/banana-smoothies/card-1-1.png"
        assert images[3].source == "fallback"
        assert len(provider.prompts) == 4

    @pytest.mark.asyncio
    async def test_requests_run_in_provider_sized_batches(self):
        provider = FakeImageProvider(batch_size=3, delay=0.01)
        generator = ImageGenerator(provider, MemoryImageStorage())
        requests = [request(f"card-{i}-0") for i in range(7)]
        ready_after_batch = []

        async def on_ready(image):
            ready_after_batch.append(len(provider.prompts))

        images = await generator.generate_batch(requests, "slug", on_ready=on_ready)

        assert len(images) == 7
        assert provider.peak_in_flight == 3
        assert provider.waves == [3, 3, 1]
        # a batch's images are reported before the next batch starts
        assert ready_after_batch == [3, 3, 3, 6, 6, 6, 7]

    @pytest.mark.asyncio
    async def test_empty_request_list(self):
        generator = ImageGenerator(FakeImageProvider(), MemoryImageStorage())
        assert await generator.generate_batch([], "slug") == []

    @pytest.mark.asyncio
    async def test_resolve_keeps_decision_order(self):
        provider = FakeImageProvider()
        generator = ImageGenerator(provider, MemoryImageStorage())
        decisions = [
            ImageDecision(request=request("hero", "hero"), action="generate"),
            ImageDecision(request=request("card-1-0"), action="existing",
                          existing_url="https://www.vitamix.com/a3500.png"),
            ImageDecision(request=request("card-1-1"), action="generate"),
        ]

        images = await generator.resolve(decisions, "slug")

        assert [i.id for i in images] == ["hero", "card-1-0", "card-1-1"]
        assert images[1].source == "existing"
        assert len(provider.prompts) == 2


class TestProviders:
    def test_lora_payload(self):
        provider = FalImageProvider(api_key="k", lora_url="https://loras/vitamix.safetensors")
        payload = provider.build_payload("green smoothie", "hero")

        assert provider.name == "fal-lora"
        assert provider.batch_size == 10
        assert payload["prompt"].startswith(f"{LORA_TRIGGER_WORD} green smoothie")
        assert payload["loras"] == [{"path": "https://loras/vitamix.safetensors", "scale": 0.5}]
        assert payload["image_size"] == {"width": 1344, "height": 768}

    def test_schnell_payload(self):
        provider = FalImageProvider(api_key="k")
        payload = provider.build_payload("soup", "card")
        assert provider.name == "fal"
        assert payload["num_inference_steps"] == 4
        assert "loras" not in payload

    @pytest.mark.asyncio
    async def test_fal_downloads_generated_image(self):
        def handler(req: httpx.Request) -> httpx.Response:
            if req.url.host == "fal.run":
                assert req.headers["Authorization"] == "Key k"
                return httpx.Response(200, json={"images": [{"url": "https://cdn.fal/img.jpg"}]})
            return httpx.Response(200, content=b"jpeg-bytes", headers={"content-type": "image/jpeg"})

        provider = FalImageProvider(api_key="k")
        provider._client = httpx.AsyncClient(transport=httpx.MockTransport(handler))

        asset = await provider.generate("smoothie", "card")
        await provider.close()

        assert asset.data == b"jpeg-bytes"
        assert asset.extension == "jpg"

    def test_token_cache_refreshes_before_expiry(self):
        cache = TokenCache(token="t", expires_at=1000.0)
        assert cache.valid(now=900.0)
        assert not cache.valid(now=950.0)
        assert not TokenCache().valid(now=0.0)


class TestLocalImageStorage:
    @pytest.mark.asyncio
    async def test_save_and_exists(self, tmp_path):
        storage = LocalImageStorage(base_path=str(tmp_path), url_prefix="/images/")

        url = await storage.save("banana-smoothies", "card-1-0", b"png", "png")

        assert url == "/images/banana-smoothies/card-1-0.png"
        assert (tmp_path / "banana-smoothies" / "card-1-0.png").read_bytes() == b"png"
        assert await storage.exists("banana-smoothies", "card-1-0")

    @pytest.mark.asyncio
    async def test_path_traversal_is_stripped(self, tmp_path):
        storage = LocalImageStorage(base_path=str(tmp_path))
        url = await storage.save("../../etc", "hero", b"x")
        assert ".." not in url
        assert (tmp_path / "etc" / "hero.png").exists()
