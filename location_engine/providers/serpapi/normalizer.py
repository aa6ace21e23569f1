"""
Normalization of SerpAPI Google Maps records into ``Place`` models.

Provider records are loosely typed and frequently incomplete. Every helper
here tolerates missing or malformed fields: anything that cannot be read
becomes None, so normalizing a record never raises.
"""

import math
import re
from typing import Any, Dict, List, Optional

from ..models import Coordinates, Place
from ...services.category_classifier import classify_place_types
from ...services.relevance_service import compute_relevance_score
from ...utils.geo_utils import calculate_distance_meters, coerce_coordinates

DEFAULT_PLACE_NAME = "Địa điểm"
DEFAULT_CATEGORY = "attraction"
MAPS_PLACE_URL = "https://www.google.com/maps/place/?q=place_id:{place_id}"

_DISTANCE_PATTERN = re.compile(r"([\d.,]+)\s*(km|m)", re.IGNORECASE)


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return float(value)


def _string_list(value: Any) -> Optional[List[str]]:
    if not isinstance(value, list):
        return None
    items = [item for item in value if isinstance(item, str)]
    return items or None


def parse_distance(distance: Optional[str]) -> Optional[float]:
    """
    Parse a provider distance label into meters.

    Example:
        "1.2 km" -> 1200.0
        "350 m" -> 350.0
        "1,5 km" -> 1500.0
    """
    if not isinstance(distance, str) or not distance:
        return None
    match = _DISTANCE_PATTERN.search(distance)
    if not match:
        return None
    try:
        value = float(match.group(1).replace(",", ".", 1))
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value * 1000 if match.group(2).lower() == "km" else value


def format_distance(meters: float) -> str:
    """Whole meters below 1 km, one-decimal kilometers above."""
    if meters < 1000:
        return f"{int(math.floor(meters + 0.5))}m"
    return f"{meters / 1000:.1f} km"


def parse_price_level(value: Any) -> Optional[int]:
    """
    Parse a price level.

    Numbers pass through, rounded to the nearest whole level (2.5 -> 2,
    2.6 -> 3); strings count their "$" symbols, and a string with no "$"
    yields None rather than 0.
    """
    number = _number(value)
    if number is not None:
        return int(round(number))
    if isinstance(value, str):
        count = value.count("$")
        return count if count > 0 else None
    return None


def extract_coordinates(record: Dict[str, Any]) -> Optional[Coordinates]:
    """Read ``gps_coordinates`` when it holds a valid numeric pair."""
    gps = record.get("gps_coordinates")
    if not isinstance(gps, dict):
        return None
    pair = coerce_coordinates(gps.get("latitude"), gps.get("longitude"))
    if pair is None:
        return None
    return Coordinates(latitude=pair[0], longitude=pair[1])


def extract_working_hours(record: Dict[str, Any]) -> Optional[List[str]]:
    operating_hours = record.get("operating_hours")
    if isinstance(operating_hours, dict):
        weekday_text = _string_list(operating_hours.get("weekday_text"))
        if weekday_text:
            return weekday_text
        # SerpAPI also returns {"monday": "8 AM-10 PM", ...}
        lines = [
            f"{day}: {hours}"
            for day, hours in operating_hours.items()
            if isinstance(hours, str)
        ]
        if lines:
            return lines
    hours = _text(record.get("hours"))
    return [hours] if hours else None


def _description(record: Dict[str, Any]) -> Optional[str]:
    description = _text(record.get("description"))
    if description:
        return description
    summary = record.get("editorial_summary")
    if isinstance(summary, dict):
        return _text(summary.get("overview"))
    return None


def _rating(value: Any) -> Optional[float]:
    rating = _number(value)
    if rating is None or not 0 <= rating <= 5:
        return None
    return rating


def _review_count(value: Any) -> Optional[int]:
    count = _number(value)
    if count is None or count < 0:
        return None
    return int(count)


def _position(value: Any) -> Optional[float]:
    position = _number(value)
    if position is None or position < 1:
        return None
    return position


def resolve_category(record: Dict[str, Any]) -> str:
    """Taxonomy category from the provider type labels, else the raw type."""
    primary_type = _text(record.get("type"))
    types = _string_list(record.get("types")) or []
    category = classify_place_types([primary_type, *types])
    if category:
        return category
    return primary_type or (types[0] if types else DEFAULT_CATEGORY)


def normalize_place(
    record: Dict[str, Any],
    index: int,
    origin: Optional[Coordinates] = None,
) -> Place:
    """
    Convert one raw ``local_results`` record into a Place.

    Args:
        record: Raw provider record
        index: Position of the record in the provider response (0-based)
        origin: Search origin; when given, distances are computed from it

    Returns:
        Normalized Place with its relevance score
    """
    if not isinstance(record, dict):
        record = {}

    place_id = _text(record.get("place_id"))
    data_id = _text(record.get("data_id"))
    identifier = place_id or data_id or f"place-{index}"

    coordinates = extract_coordinates(record)
    raw_distance = _text(record.get("distance"))

    if origin is not None and coordinates is not None:
        distance_meters = calculate_distance_meters(
            origin.latitude, origin.longitude,
            coordinates.latitude, coordinates.longitude,
        )
    else:
        distance_meters = parse_distance(raw_distance)

    if distance_meters is not None:
        display_distance = format_distance(distance_meters)
    else:
        display_distance = raw_distance

    rating = _rating(record.get("rating"))
    review_count = _review_count(record.get("reviews"))
    price_source = record.get("price_level")
    if price_source is None:
        price_source = record.get("price")

    return Place(
        id=identifier,
        name=_text(record.get("title")) or DEFAULT_PLACE_NAME,
        category=resolve_category(record),
        address=_text(record.get("address")),
        rating=rating,
        review_count=review_count,
        price_level=parse_price_level(price_source),
        phone_number=_text(record.get("phone")),
        website=_text(record.get("website")),
        coordinates=coordinates,
        distance_meters=distance_meters,
        display_distance=display_distance,
        open_state=_text(record.get("open_state")),
        working_hours=extract_working_hours(record),
        thumbnail=_text(record.get("thumbnail")),
        description=_description(record),
        maps_url=MAPS_PLACE_URL.format(place_id=place_id) if place_id else None,
        raw_types=_string_list(record.get("types")),
        relevance_score=compute_relevance_score(
            rating=rating,
            review_count=review_count,
            distance_meters=distance_meters,
            position=_position(record.get("position")),
        ),
    )
