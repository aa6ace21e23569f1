"""
Place search service.

Runs one free-text search end to end: classify the query, resolve the text
sent to the provider, check the cache, call the provider, normalize and
rank the results, and cache the outcome.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from location_engine.providers.base import PlaceProvider
from location_engine.providers.cache import CacheKey, TTLCache
from location_engine.providers.models import Coordinates, Place, SearchResult
from location_engine.providers.serpapi.normalizer import normalize_place
from location_engine.providers.settings import EngineSettings, get_settings
from location_engine.services.category_classifier import infer_category
from location_engine.services.query_resolver import build_resolved_query, build_viewport_hint

logger = logging.getLogger(__name__)


def extract_local_results(data: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Return the ``local_results`` list of a provider payload, or []."""
    results = data.get("local_results") if isinstance(data, dict) else None
    if not isinstance(results, list):
        return []
    return [item for item in results if isinstance(item, dict)]


def extract_suggestions(data: Dict[str, Any]) -> List[str]:
    """Return the question texts of ``related_questions``, skipping blanks."""
    questions = data.get("related_questions") if isinstance(data, dict) else None
    if not isinstance(questions, list):
        return []
    suggestions = []
    for item in questions:
        question = item.get("question") if isinstance(item, dict) else None
        if isinstance(question, str) and question:
            suggestions.append(question)
    return suggestions


def dedupe_places(places: Iterable[Place]) -> List[Place]:
    """Keep the first occurrence of every place id, preserving order."""
    seen: Dict[str, Place] = {}
    for place in places:
        if place.id not in seen:
            seen[place.id] = place
    return list(seen.values())


def rank_places(places: List[Place], limit: Optional[int] = None) -> List[Place]:
    """Sort by relevance (descending, stable) and truncate to ``limit``."""
    ranked = sorted(places, key=lambda place: place.relevance_score, reverse=True)
    if limit is not None:
        ranked = ranked[:max(limit, 0)]
    return ranked


class PlaceSearchService:
    """
    Service for free-text place searches.

    Uses the shared cache to avoid repeating provider calls for the same
    effective parameters.
    """

    def __init__(
        self,
        provider: PlaceProvider,
        cache: TTLCache,
        settings: Optional[EngineSettings] = None,
    ):
        self.provider = provider
        self.cache = cache
        self.settings = settings or get_settings()

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
        cache_ttl: Optional[float] = None,
    ) -> SearchResult:
        """
        Search places matching a free-text query.

        Args:
            query: Free-text query (Vietnamese and/or English)
            latitude, longitude: Optional search origin
            radius_meters: Optional search radius, used for the viewport zoom
            limit: Maximum number of places returned
            language: Result language (defaults to the configured language)
            open_now: Only places open right now
            explicit_category: Category override, skips classification
            cache_ttl: TTL override in seconds

        Returns:
            SearchResult with places ranked by relevance

        Raises:
            ConfigurationError: the provider API key is missing
            ProviderError: the provider call failed (never retried)
        """
        match = infer_category(query, explicit_category)
        resolved_query = build_resolved_query(query, match.fallback_query)
        language = language or self.settings.default_language

        has_origin = latitude is not None and longitude is not None
        cache_key = CacheKey(
            operation="search",
            params={
                "query": resolved_query,
                "latitude": latitude if has_origin else None,
                "longitude": longitude if has_origin else None,
                "radius": radius_meters,
                "limit": limit,
                "open_now": bool(open_now),
                "category": match.category,
                "language": language,
            },
        ).generate_key()

        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug(f"Cache hit for search '{resolved_query}'")
            return cached

        logger.debug(f"Cache miss for search '{resolved_query}', querying provider")
        viewport = build_viewport_hint(latitude, longitude, radius_meters) if has_origin else None
        data = await self.provider.maps_search(
            query=resolved_query,
            language=language,
            country=self.settings.default_country,
            open_now=bool(open_now),
            viewport=viewport,
        )

        origin = Coordinates(latitude=latitude, longitude=longitude) if has_origin else None
        places = [
            normalize_place(record, index, origin)
            for index, record in enumerate(extract_local_results(data))
        ]

        result = SearchResult(
            query=query,
            resolved_query=resolved_query,
            category=match.category,
            places=rank_places(dedupe_places(places), limit),
            suggestions=extract_suggestions(data),
        )

        ttl = cache_ttl if cache_ttl is not None else self.settings.get_cache_ttl("search")
        self.cache.set(cache_key, result, ttl)
        logger.debug(
            f"Search '{resolved_query}' (category={match.category}) "
            f"returned {len(result.places)} places"
        )
        return result
