"""
Tests for the LocationEngine facade.
"""

import pytest

from location_engine import LocationEngine, create_engine
from location_engine.providers.serpapi.client import SerpApiPlaceProvider
from location_engine.providers.settings import EngineSettings


@pytest.fixture
def engine(fake_provider, cache, settings):
    """Provide an engine over the fake provider."""
    return LocationEngine(provider=fake_provider, cache=cache, settings=settings)


class TestLocationEngine:
    """Test suite for the three public operations."""

    @pytest.mark.asyncio
    async def test_search_places(self, engine, fake_provider, search_payload):
        """It should run a place search through the shared cache."""
        fake_provider.default = search_payload

        result = await engine.search_places("bún chả ngon", latitude=21.0285, longitude=105.8048, limit=3)

        assert result.category == "restaurant"
        assert len(result.places) == 3
        assert len(engine.cache) == 1

    @pytest.mark.asyncio
    async def test_search_nearby_places(self, engine, fake_provider, search_payload):
        """It should aggregate several categories."""
        fake_provider.default = search_payload

        result = await engine.search_nearby_places(21.0285, 105.8048, categories=["restaurants", "cafes"])

        assert result.categories == ["restaurants", "cafes"]
        assert fake_provider.call_count == 2
        # both categories returned the same five places
        assert len(result.places) == 5

    @pytest.mark.asyncio
    async def test_geocode_address(self, engine, fake_provider):
        """It should geocode through the same provider."""
        fake_provider.default = {
            "place_results": {"title": "Hà Nội", "gps_coordinates": {"latitude": 21.0278, "longitude": 105.8342}},
        }

        result = await engine.geocode_address("Hà Nội")

        assert result.latitude == 21.0278

    @pytest.mark.asyncio
    async def test_search_and_geocode_share_cache(self, engine, fake_provider, search_payload):
        """It should keep search and geocode entries apart in one cache."""
        fake_provider.default = {**search_payload, "place_results": search_payload["local_results"][0]}

        await engine.search_places("Hà Nội")
        await engine.geocode_address("Hà Nội")

        assert fake_provider.call_count == 2
        assert len(engine.cache) == 2

    @pytest.mark.asyncio
    async def test_async_context_closes_provider(self, fake_provider, cache, settings):
        """It should close the provider when leaving the context."""
        async with LocationEngine(provider=fake_provider, cache=cache, settings=settings):
            pass

        assert fake_provider.closed is True


class TestCreateEngine:
    """Test suite for the engine factory."""

    def test_create_engine_wires_serpapi(self):
        """It should build a SerpAPI provider and a capped cache from the settings."""
        settings = EngineSettings(_env_file=None, serpapi_key="test-key", cache_max_entries=50)

        engine = create_engine(settings)

        assert isinstance(engine.provider, SerpApiPlaceProvider)
        assert engine.cache.max_entries == 50
        assert engine.settings is settings

    def test_create_engine_without_key(self, caplog):
        """It should start without credentials and only warn."""
        settings = EngineSettings(_env_file=None, serpapi_key=None)

        with caplog.at_level("WARNING"):
            engine = create_engine(settings)

        assert engine.provider.is_configured is False
        assert "SERPAPI_KEY" in caplog.text

    def test_each_engine_gets_its_own_cache(self, settings):
        """It should not share cache state between engines."""
        assert create_engine(settings).cache is not create_engine(settings).cache
