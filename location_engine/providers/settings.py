"""
Configuration settings for the location engine using Pydantic Settings.

This module centralizes provider credentials, cache policies and fan-out
limits, loading them from environment variables (or a ``.env`` file)
with validation and defaults.
"""

from typing import Any, Dict, List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class EngineSettings(BaseSettings):
    """
    Settings for the location engine.

    The API key is optional here on purpose: its absence is reported when a
    provider call is attempted, not when the process starts.
    """

    # Place provider (SerpAPI Google Maps search)
    serpapi_key: Optional[str] = Field(
        default=None,
        alias="SERPAPI_KEY",
        description="SerpAPI key used for every maps search request"
    )
    serpapi_endpoint: str = Field(
        default="https://serpapi.com/search.json",
        alias="SERPAPI_ENDPOINT",
        description="SerpAPI search endpoint"
    )
    default_language: str = Field(
        default="vi",
        alias="LOCATION_DEFAULT_LANGUAGE",
        description="Language sent as 'hl' when the caller does not pick one"
    )
    default_country: str = Field(
        default="vn",
        alias="LOCATION_DEFAULT_COUNTRY",
        description="Country sent as 'gl' on every request"
    )
    http_timeout: float = Field(
        default=30.0,
        gt=0,
        alias="LOCATION_HTTP_TIMEOUT",
        description="Transport timeout of the HTTP client in seconds"
    )

    # Cache configuration
    search_cache_ttl: int = Field(
        default=21600,  # 6 hours
        ge=0,
        alias="LOCATION_SEARCH_CACHE_TTL",
        description="Cache TTL for place searches in seconds"
    )
    geocode_cache_ttl: int = Field(
        default=86400,  # 24 hours
        ge=0,
        alias="LOCATION_GEOCODE_CACHE_TTL",
        description="Cache TTL for geocoding results in seconds"
    )
    cache_max_entries: int = Field(
        default=2048,
        ge=0,
        alias="LOCATION_CACHE_MAX_ENTRIES",
        description="LRU capacity of the in-process cache (0 = unbounded)"
    )

    # Nearby aggregation
    nearby_max_concurrency: int = Field(
        default=4,
        ge=1,
        alias="LOCATION_NEARBY_MAX_CONCURRENCY",
        description="Maximum category searches in flight for one nearby request"
    )
    nearby_default_limit: int = Field(
        default=12,
        ge=1,
        alias="LOCATION_NEARBY_DEFAULT_LIMIT",
        description="Result limit for nearby searches when the caller omits it"
    )
    nearby_default_categories: List[str] = Field(
        default_factory=lambda: ["restaurants", "cafes", "attractions", "transport"],
        alias="LOCATION_NEARBY_DEFAULT_CATEGORIES",
        description="Categories searched when the caller does not pass any"
    )

    # Geocoding
    geocode_locality_fallback: bool = Field(
        default=False,
        alias="LOCATION_GEOCODE_LOCALITY_FALLBACK",
        description="Retry unresolved geocodes with the city/country alone"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "env_prefix": "",
        "extra": "ignore",
        "populate_by_name": True,
    }

    @property
    def is_configured(self) -> bool:
        """Whether a usable provider API key is present."""
        return bool(self.serpapi_key and self.serpapi_key.strip())

    def get_cache_ttl(self, operation: str) -> int:
        """Get cache TTL for specific operation."""
        ttl_config = {
            "search": self.search_cache_ttl,
            "geocode": self.geocode_cache_ttl,
        }
        return ttl_config.get(operation, 3600)  # Default 1 hour

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary, without the API key."""
        return self.model_dump(exclude={"serpapi_key"})


# Global settings instance
_settings: Optional[EngineSettings] = None


def get_settings() -> EngineSettings:
    """
    Get global settings instance (singleton pattern).

    Returns:
        Validated EngineSettings instance
    """
    global _settings
    if _settings is None:
        _settings = EngineSettings()
    return _settings


def reset_settings() -> None:
    """Reset global settings (useful for testing)."""
    global _settings
    _settings = None
