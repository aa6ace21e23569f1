"""SerpAPI Google Maps provider for place search and geocoding."""

from .client import SerpApiPlaceProvider
from .normalizer import normalize_place

__all__ = [
    "SerpApiPlaceProvider",
    "normalize_place",
]
