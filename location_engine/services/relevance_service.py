"""
Relevance scoring for normalized places.

The score is a deterministic weighted sum of four observable signals.
Each signal is clipped into its own bounded sub-score before summing, so
no single signal can outweigh its share. A missing signal contributes a
neutral floor instead of zero.
"""

from typing import Optional

RATING_WEIGHT = 0.5
REVIEW_WEIGHT = 0.2
DISTANCE_WEIGHT = 0.2
POSITION_WEIGHT = 0.1

UNKNOWN_RATING_SCORE = 0.2
UNKNOWN_REVIEW_SCORE = 0.05
UNKNOWN_DISTANCE_SCORE = 0.05
UNKNOWN_POSITION_SCORE = 0.05

REVIEW_SATURATION = 1000
DISTANCE_HORIZON_METERS = 5000
POSITION_DECAY = 0.05

MIN_SCORE = 0.15
MAX_SCORE = 1.0


def rating_score(rating: Optional[float]) -> float:
    if rating is None:
        return UNKNOWN_RATING_SCORE
    return min(max(rating, 0.0), 5.0) / 5 * RATING_WEIGHT


def review_score(review_count: Optional[float]) -> float:
    if review_count is None:
        return UNKNOWN_REVIEW_SCORE
    return min(max(review_count, 0) / REVIEW_SATURATION, 1) * REVIEW_WEIGHT


def distance_score(distance_meters: Optional[float]) -> float:
    if distance_meters is None:
        return UNKNOWN_DISTANCE_SCORE
    clipped = min(max(distance_meters, 0.0), DISTANCE_HORIZON_METERS)
    return max(0.0, 1 - clipped / DISTANCE_HORIZON_METERS) * DISTANCE_WEIGHT


def position_score(position: Optional[float]) -> float:
    if position is None:
        return UNKNOWN_POSITION_SCORE
    return min(max(0.0, 1 - (position - 1) * POSITION_DECAY), 1.0) * POSITION_WEIGHT


def compute_relevance_score(
    rating: Optional[float] = None,
    review_count: Optional[float] = None,
    distance_meters: Optional[float] = None,
    position: Optional[float] = None,
) -> float:
    """
    Compute the 0..1 relevance score of a place.

    Args:
        rating: Average rating (0-5)
        review_count: Number of reviews
        distance_meters: Distance from the search origin
        position: 1-based rank in the provider's own result list

    Returns:
        Score rounded to 3 decimals, kept within [MIN_SCORE, MAX_SCORE]
    """
    total = (
        rating_score(rating)
        + review_score(review_count)
        + distance_score(distance_meters)
        + position_score(position)
    )
    return round(min(max(total, MIN_SCORE), MAX_SCORE), 3)
