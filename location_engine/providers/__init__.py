"""
Place provider abstraction layer.

This module provides the contract for the third-party maps search API,
the unified models every provider record is normalized into, and the
shared cache and settings used by the services.
"""

from .base import PlaceProvider, ProviderType
from .cache import CacheKey, TTLCache
from .models import Coordinates, Place, SearchResult, NearbySearchResult, GeocodeResult

__all__ = [
    'PlaceProvider',
    'ProviderType',
    'CacheKey',
    'TTLCache',
    'Coordinates',
    'Place',
    'SearchResult',
    'NearbySearchResult',
    'GeocodeResult',
]
