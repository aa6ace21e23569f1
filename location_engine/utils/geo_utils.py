"""
Geographic utility functions for distance and coordinate handling.

This module contains pure mathematical functions with no dependencies on
providers or services. All functions are stateless and can be tested independently.
"""

import math
from typing import Any, Optional, Tuple

# Earth radius in meters
EARTH_RADIUS_METERS = 6371000


def calculate_distance_meters(
    lat1: float, lon1: float, lat2: float, lon2: float
) -> float:
    """
    Calculate the distance between two points using Haversine formula.

    Args:
        lat1, lon1: First point coordinates (degrees)
        lat2, lon2: Second point coordinates (degrees)

    Returns:
        Distance in meters
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    dlat = lat2_rad - lat1_rad
    dlon = math.radians(lon2 - lon1)

    a = (
        math.sin(dlat / 2) * math.sin(dlat / 2)
        + math.cos(lat1_rad)
        * math.cos(lat2_rad)
        * math.sin(dlon / 2)
        * math.sin(dlon / 2)
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_METERS * c


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return float(value)


def coerce_coordinates(latitude: Any, longitude: Any) -> Optional[Tuple[float, float]]:
    """
    Validate a loosely typed latitude/longitude pair.

    Returns:
        (lat, lon) as floats, or None when either value is missing,
        non-numeric or out of range
    """
    lat = _as_number(latitude)
    lon = _as_number(longitude)
    if lat is None or lon is None:
        return None
    if not (-90 <= lat <= 90 and -180 <= lon <= 180):
        return None
    return lat, lon
