"""
Location engine facade.

Wires the provider, the shared cache and the services together and exposes
the three public operations. The cache is created once, at process start,
and injected; nothing in the engine keeps module-level mutable state.

Example:
    ```python
    async with create_engine() as engine:
        result = await engine.search_places("bún chả ngon", latitude=21.0285, longitude=105.8048)
        location = await engine.geocode_address("36 Hàng Bạc", city="Hà Nội")
    ```
"""

import logging
from typing import List, Optional

from location_engine.providers.base import PlaceProvider
from location_engine.providers.cache import TTLCache
from location_engine.providers.models import GeocodeResult, NearbySearchResult, SearchResult
from location_engine.providers.serpapi.client import SerpApiPlaceProvider
from location_engine.providers.settings import EngineSettings, get_settings
from location_engine.services.geocoding_service import GeocodingService
from location_engine.services.nearby_search_service import NearbySearchService
from location_engine.services.place_search_service import PlaceSearchService

logger = logging.getLogger(__name__)


class LocationEngine:
    """
    Entry point for place search, nearby aggregation and geocoding.

    Stateless apart from the injected cache, so one instance can serve
    concurrent requests.
    """

    def __init__(
        self,
        provider: PlaceProvider,
        cache: TTLCache,
        settings: Optional[EngineSettings] = None,
    ):
        self.settings = settings or get_settings()
        self.provider = provider
        self.cache = cache
        self.search_service = PlaceSearchService(provider, cache, self.settings)
        self.nearby_service = NearbySearchService(self.search_service, self.settings)
        self.geocoding_service = GeocodingService(provider, cache, self.settings)

    async def search_places(
        self,
        query: str,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        radius_meters: Optional[float] = None,
        limit: Optional[int] = None,
        language: Optional[str] = None,
        open_now: bool = False,
        explicit_category: Optional[str] = None,
    ) -> SearchResult:
        return await self.search_service.search_places(
            query=query,
            latitude=latitude,
            longitude=longitude,
            radius_meters=radius_meters,
            limit=limit,
            language=language,
            open_now=open_now,
            explicit_category=explicit_category,
        )

    async def search_nearby_places(
        self,
        latitude: float,
        longitude: float,
        city: Optional[str] = None,
        categories: Optional[List[str]] = None,
        radius_meters: Optional[float] = None,
        limit: Optional[int] = None,
        language: Optional[str] = None,
    ) -> NearbySearchResult:
        return await self.nearby_service.search_nearby_places(
            latitude=latitude,
            longitude=longitude,
            city=city,
            categories=categories,
            radius_meters=radius_meters,
            limit=limit,
            language=language,
        )

    async def geocode_address(
        self,
        address: str,
        city: Optional[str] = None,
        country: Optional[str] = None,
        language: Optional[str] = None,
    ) -> GeocodeResult:
        return await self.geocoding_service.geocode_address(
            address=address,
            city=city,
            country=country,
            language=language,
        )

    async def close(self):
        """Close provider connections."""
        await self.provider.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


def create_engine(settings: Optional[EngineSettings] = None) -> LocationEngine:
    """
    Build an engine with a SerpAPI provider and a fresh LRU-capped cache.

    Call once at process start and share the instance.

    Args:
        settings: Engine settings (falls back to the global settings)

    Returns:
        Configured LocationEngine
    """
    settings = settings or get_settings()
    cache = TTLCache(max_entries=settings.cache_max_entries)
    provider = SerpApiPlaceProvider(settings=settings)
    if not provider.is_configured:
        logger.warning(
            "SERPAPI_KEY is not configured. Searches and geocoding will fail until it is set."
        )
    return LocationEngine(provider=provider, cache=cache, settings=settings)
