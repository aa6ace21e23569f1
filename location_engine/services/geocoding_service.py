"""
Geocoding service.

Resolves a free-text address to coordinates with the same provider call
and cache as place searches. The provider's single best match
(``place_results``) is preferred over its list of local results.
"""

import logging
from typing import Any, Dict, List, Optional

from location_engine.providers.base import PlaceProvider
from location_engine.providers.cache import CacheKey, TTLCache
from location_engine.providers.errors import LocationNotFoundError, ProviderError
from location_engine.providers.models import GeocodeResult
from location_engine.providers.settings import EngineSettings, get_settings
from location_engine.services.category_classifier import normalize_text
from location_engine.services.place_search_service import extract_local_results
from location_engine.utils.geo_utils import coerce_coordinates

logger = logging.getLogger(__name__)


def build_geocode_query(
    address: str,
    city: Optional[str] = None,
    country: Optional[str] = None,
) -> str:
    """Join the non-empty parts with ", "."""
    return ", ".join(part for part in (address, city, country) if part)


def pick_geocode_candidate(data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """
    Choose the record to geocode from.

    Order: ``place_results`` first, then ``local_results`` in provider
    order. The first record carrying valid coordinates wins, so a leading
    local result without coordinates is skipped in favour of a later one
    instead of failing the lookup.
    """
    candidates: List[Any] = []
    if isinstance(data, dict):
        candidates.append(data.get("place_results"))
    candidates.extend(extract_local_results(data))

    for candidate in candidates:
        if not isinstance(candidate, dict):
            continue
        gps = candidate.get("gps_coordinates")
        if isinstance(gps, dict) and coerce_coordinates(gps.get("latitude"), gps.get("longitude")):
            return candidate
    return None


def locality_fallback_queries(
    resolved: str,
    city: Optional[str] = None,
    country: Optional[str] = None,
) -> List[str]:
    """
    Broader queries tried when the full address does not resolve.

    "city, country", then city, then country, skipping blanks, duplicates
    and anything equal to the query already tried.
    """
    options = [
        f"{city}, {country}" if city and country else None,
        city,
        country,
    ]
    tried = {normalize_text(resolved)}
    queries = []
    for option in options:
        option = option.strip() if option else ""
        key = normalize_text(option)
        if not option or key in tried:
            continue
        tried.add(key)
        queries.append(option)
    return queries


def to_geocode_result(candidate: Dict[str, Any], resolved: str) -> GeocodeResult:
    gps = candidate["gps_coordinates"]
    latitude, longitude = coerce_coordinates(gps.get("latitude"), gps.get("longitude"))
    title = candidate.get("title")
    address = candidate.get("address")
    place_id = candidate.get("place_id")
    return GeocodeResult(
        latitude=latitude,
        longitude=longitude,
        display_name=title if isinstance(title, str) and title else resolved,
        address=address if isinstance(address, str) and address else resolved,
        provider_id=place_id if isinstance(place_id, str) and place_id else None,
    )


class GeocodingService:
    """Service for address geocoding."""

    def __init__(
        self,
        provider: PlaceProvider,
        cache: TTLCache,
        settings: Optional[EngineSettings] = None,
    ):
        self.provider = provider
        self.cache = cache
        self.settings = settings or get_settings()

    async def _lookup(self, query: str, language: str) -> Optional[Dict[str, Any]]:
        data = await self.provider.maps_search(
            query=query,
            language=language,
            country=self.settings.default_country,
        )
        return pick_geocode_candidate(data)

    async def geocode_address(
        self,
        address: str,
        city: Optional[str] = None,
        country: Optional[str] = None,
        language: Optional[str] = None,
    ) -> GeocodeResult:
        """
        Convert an address to coordinates.

        Args:
            address: Street address or place name
            city: Optional city for disambiguation
            country: Optional country for disambiguation
            language: Result language

        Returns:
            GeocodeResult for the best provider match

        Raises:
            LocationNotFoundError: no candidate carried coordinates
            ConfigurationError: the provider API key is missing
            ProviderError: the provider call failed
        """
        resolved = build_geocode_query(address, city, country)
        language = language or self.settings.default_language

        cache_key = CacheKey(
            operation="geocode",
            params={"address": resolved, "language": language},
        ).generate_key()

        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug(f"Cache hit for geocode '{resolved}'")
            return cached

        logger.debug(f"Cache miss for geocode '{resolved}', querying provider")
        candidate = await self._lookup(resolved, language)

        if candidate is None and self.settings.geocode_locality_fallback:
            for fallback_query in locality_fallback_queries(resolved, city, country):
                try:
                    candidate = await self._lookup(fallback_query, language)
                except ProviderError as e:
                    logger.warning(f"Fallback geocode request failed for '{fallback_query}': {e}")
                    continue
                if candidate is not None:
                    logger.info(f"Geocoded '{resolved}' through locality fallback '{fallback_query}'")
                    break

        if candidate is None:
            logger.warning(f"Location not found for query: {resolved}")
            raise LocationNotFoundError(resolved)

        result = to_geocode_result(candidate, resolved)
        self.cache.set(cache_key, result, self.settings.get_cache_ttl("geocode"))
        logger.debug(f"Geocoded '{resolved}' to {result.latitude}, {result.longitude}")
        return result
