"""
Location intelligence engine.

Turns free-text place queries and raw coordinates into a ranked, normalized
catalogue of nearby places, and free-text addresses into coordinates, on
top of a third-party maps search API.
"""

from .engine import LocationEngine, create_engine
from .providers.errors import (
    ConfigurationError,
    LocationEngineError,
    LocationNotFoundError,
    ProviderError,
)
from .providers.models import (
    Coordinates,
    GeocodeResult,
    NearbySearchResult,
    Place,
    SearchResult,
)

__version__ = "1.0.0"

__all__ = [
    'LocationEngine',
    'create_engine',
    'LocationEngineError',
    'ConfigurationError',
    'ProviderError',
    'LocationNotFoundError',
    'Coordinates',
    'Place',
    'SearchResult',
    'NearbySearchResult',
    'GeocodeResult',
]
