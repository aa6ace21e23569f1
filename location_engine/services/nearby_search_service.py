"""
Nearby aggregation service.

Fans out one place search per category around a single origin and merges
the results into one deduplicated, globally ranked list.
"""

import asyncio
import logging
from typing import List, Optional

from location_engine.providers.errors import ConfigurationError
from location_engine.providers.models import NearbySearchResult, Place, SearchResult
from location_engine.providers.settings import EngineSettings, get_settings
from location_engine.services.place_search_service import (
    PlaceSearchService,
    dedupe_places,
    rank_places,
)

logger = logging.getLogger(__name__)

MIN_PER_CATEGORY_LIMIT = 3


def per_category_limit(limit: int, category_count: int) -> int:
    """Results requested from each category search."""
    return max(MIN_PER_CATEGORY_LIMIT, limit // max(category_count, 1))


def build_category_query(category: str, city: Optional[str] = None) -> str:
    """Synthetic query for one category, e.g. "cafes near Hà Nội"."""
    return f"{category} near {city or 'me'}"


class NearbySearchService:
    """
    Service for multi-category searches around one origin.

    Category searches run concurrently, bounded by
    ``settings.nearby_max_concurrency``. A failing category is logged and
    left out of the merged result; it never cancels the other categories.
    """

    def __init__(
        self,
        search_service: PlaceSearchService,
        settings: Optional[EngineSettings] = None,
    ):
        self.search_service = search_service
        self.settings = settings or get_settings()

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
        """
        Search several categories around an origin.

        Args:
            latitude, longitude: Search origin
            city: City name used in the per-category queries ("me" if absent)
            categories: Categories to search (configured defaults if empty)
            radius_meters: Search radius
            limit: Overall number of places returned
            language: Result language

        Returns:
            NearbySearchResult with places deduplicated by id (first category
            in iteration order wins) and ranked by relevance

        Raises:
            ConfigurationError: the provider API key is missing
        """
        categories = list(categories) if categories else list(self.settings.nearby_default_categories)
        limit = limit if limit is not None else self.settings.nearby_default_limit
        category_limit = per_category_limit(limit, len(categories))
        semaphore = asyncio.Semaphore(self.settings.nearby_max_concurrency)

        async def run_category(category: str) -> SearchResult:
            async with semaphore:
                return await self.search_service.search_places(
                    query=build_category_query(category, city),
                    latitude=latitude,
                    longitude=longitude,
                    radius_meters=radius_meters,
                    limit=category_limit,
                    language=language,
                    explicit_category=category,
                )

        outcomes = await asyncio.gather(
            *(run_category(category) for category in categories),
            return_exceptions=True,
        )

        collected: List[Place] = []
        for category, outcome in zip(categories, outcomes):
            if isinstance(outcome, ConfigurationError):
                raise outcome
            if isinstance(outcome, Exception):
                logger.error(f"Failed to fetch category {category}: {outcome}")
                continue
            if isinstance(outcome, BaseException):
                raise outcome
            collected.extend(outcome.places)

        # gather preserves input order, so the dedupe below keeps the
        # occurrence from the earliest category regardless of its score
        places = rank_places(dedupe_places(collected), limit)

        logger.info(
            f"Nearby search at ({latitude}, {longitude}) over {len(categories)} categories "
            f"returned {len(places)} places"
        )
        return NearbySearchResult(
            latitude=latitude,
            longitude=longitude,
            categories=categories,
            places=places,
        )
