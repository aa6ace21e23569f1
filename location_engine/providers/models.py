"""
Unified data models for places, searches and geocodes.

Raw provider records are loosely typed; everything leaving the engine is
normalized into these models. All of them are frozen: a ``Place`` is built
once by the normalizer and never mutated afterwards, which also makes it
safe to hand the same cached instance to concurrent callers.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class Coordinates(BaseModel):
    """Geographic point in decimal degrees."""
    latitude: float = Field(..., ge=-90, le=90, description="Latitude coordinate")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude coordinate")

    model_config = {"frozen": True}


class Place(BaseModel):
    """
    Normalized point of interest.

    ``distance_meters`` and ``display_distance`` are derived by the engine,
    never taken as authoritative from the provider. ``relevance_score`` is
    always present and lies in [0, 1].
    """
    id: str = Field(..., description="Provider place id, or a positional placeholder")
    name: str = Field(..., description="Display name")
    category: str = Field(..., description="Taxonomy category or provider type")
    address: Optional[str] = Field(None, description="Formatted address")
    rating: Optional[float] = Field(None, ge=0, le=5, description="Average rating (0-5)")
    review_count: Optional[int] = Field(None, ge=0, description="Number of reviews")
    price_level: Optional[int] = Field(None, description="Currency symbol count or numeric level")
    phone_number: Optional[str] = Field(None, description="Phone number")
    website: Optional[str] = Field(None, description="Website URL")
    coordinates: Optional[Coordinates] = Field(None, description="Geographic location")
    distance_meters: Optional[float] = Field(None, ge=0, description="Distance from the search origin")
    display_distance: Optional[str] = Field(None, description="Human readable distance")
    open_state: Optional[str] = Field(None, description="Provider open/closed label")
    working_hours: Optional[List[str]] = Field(None, description="Opening hours lines")
    thumbnail: Optional[str] = Field(None, description="Thumbnail image URL")
    description: Optional[str] = Field(None, description="Short description")
    maps_url: Optional[str] = Field(None, description="Google Maps link for the place")
    raw_types: Optional[List[str]] = Field(None, description="Provider type labels")
    relevance_score: float = Field(..., ge=0, le=1, description="Engine ranking signal")

    model_config = {"frozen": True}


class SearchResult(BaseModel):
    """Result of a single free-text place search."""
    query: str
    resolved_query: str
    category: Optional[str] = None
    places: List[Place] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)

    model_config = {"frozen": True}


class NearbySearchResult(BaseModel):
    """
    Result of a multi-category search around one origin.

    ``places`` is deduplicated by id and globally ranked, not grouped by
    category.
    """
    latitude: float
    longitude: float
    categories: List[str] = Field(default_factory=list)
    places: List[Place] = Field(default_factory=list)

    model_config = {"frozen": True}


class GeocodeResult(BaseModel):
    """Coordinates resolved for a free-text address."""
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    display_name: str
    address: Optional[str] = None
    provider_id: Optional[str] = None

    model_config = {"frozen": True}


class CacheStats(BaseModel):
    """
    Statistics for the in-process cache.

    Tracks usage so the hit rate of the coordinate rounding and the LRU
    capacity can be monitored.
    """
    entries: int = Field(default=0, description="Entries currently stored")
    max_entries: Optional[int] = Field(None, description="LRU capacity, None when unbounded")
    hits: int = Field(default=0, description="Cache hits")
    misses: int = Field(default=0, description="Cache misses")
    sets: int = Field(default=0, description="Entries written")
    evictions: int = Field(default=0, description="Entries dropped by the LRU cap")
    expirations: int = Field(default=0, description="Entries dropped after their TTL")

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate percentage."""
        total = self.hits + self.misses
        if total == 0:
            return 0.0
        return (self.hits / total) * 100
