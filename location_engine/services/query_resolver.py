"""
Query resolution helpers.

Builds the text and viewport hint actually sent to the place provider.
"""

from typing import Optional

# (max radius in meters, zoom) - smaller radius means a tighter viewport
_ZOOM_STEPS = (
    (500, 16),
    (1000, 15),
    (3000, 14),
    (7000, 13),
)
DEFAULT_ZOOM = 15
WIDEST_ZOOM = 12


def build_resolved_query(query: str, fallback_keyword: Optional[str] = None) -> str:
    """
    Append the category fallback keyword unless the query already contains it.

    Example:
        ("bún chả ngon", "restaurants") -> "bún chả ngon restaurants"
        ("best restaurants", "restaurants") -> "best restaurants"
    """
    if fallback_keyword and fallback_keyword not in query.lower():
        return f"{query} {fallback_keyword}"
    return query


def determine_zoom(radius_meters: Optional[float] = None) -> int:
    """
    Derive the provider zoom level from a search radius.

    This only tunes the provider's own relevance; it is not a precise
    mapping from meters to map scale.
    """
    if not radius_meters:
        return DEFAULT_ZOOM
    for max_radius, zoom in _ZOOM_STEPS:
        if radius_meters <= max_radius:
            return zoom
    return WIDEST_ZOOM


def build_viewport_hint(
    latitude: Optional[float],
    longitude: Optional[float],
    radius_meters: Optional[float] = None,
) -> Optional[str]:
    """Return the "@lat,lng,zoomz" hint, or None without a complete origin."""
    if latitude is None or longitude is None:
        return None
    return f"@{latitude},{longitude},{determine_zoom(radius_meters)}z"
