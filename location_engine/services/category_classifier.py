"""
Category taxonomy and keyword classifier.

Maps free-text queries (Vietnamese, English or a mix of both) onto a fixed
set of place categories. Matching is substring containment over
diacritic-free, lower-cased text, scanned in taxonomy order: the first
category with a matching keyword wins, which keeps classification
deterministic when a query mentions several categories.
"""

import re
import unicodedata
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple


@dataclass(frozen=True)
class CategoryRule:
    """One taxonomy entry: keywords that select it and the text appended to queries."""
    category: str
    keywords: Tuple[str, ...]
    fallback_query: str
    normalized_keywords: Tuple[str, ...] = field(init=False, repr=False)

    def __post_init__(self):
        # Keywords are normalized once, when the taxonomy is built
        normalized = tuple(k for k in (normalize_text(kw) for kw in self.keywords) if k)
        object.__setattr__(self, "normalized_keywords", normalized)

    def matches(self, normalized_query: str) -> bool:
        return any(keyword in normalized_query for keyword in self.normalized_keywords)


@dataclass(frozen=True)
class CategoryMatch:
    """Outcome of classification."""
    category: Optional[str]
    fallback_query: Optional[str] = None


_COMBINING_MARKS = re.compile(r"[\u0300-\u036f]")
_WHITESPACE = re.compile(r"\s+")


def normalize_text(text: Optional[str]) -> str:
    """
    Normalize text for keyword matching.

    Removes accents, folds the Vietnamese "đ" to "d" and lower-cases.

    Example:
        "Quán Cà Phê" -> "quan ca phe"
        "Điểm du lịch" -> "diem du lich"
    """
    if not text:
        return ""

    text = unicodedata.normalize("NFD", text)
    text = _COMBINING_MARKS.sub("", text)
    text = text.replace("đ", "d").replace("Đ", "D")
    text = _WHITESPACE.sub(" ", text.lower())

    return text.strip()


CATEGORY_TAXONOMY: Tuple[CategoryRule, ...] = (
    CategoryRule(
        category="restaurant",
        keywords=(
            "restaurant", "nhà hàng", "ăn uống", "ăn tối", "quán ăn", "món ăn",
            "đặc sản", "hải sản", "ăn ngon", "bún chả", "bún bò",
            "phở bò", "phở gà", "cơm tấm", "bánh mì", "food", "buffet",
            "fine dining",
        ),
        fallback_query="restaurants",
    ),
    CategoryRule(
        category="cafe",
        keywords=("cafe", "coffee", "cà phê", "quán cà phê", "coffee shop"),
        fallback_query="cafes",
    ),
    CategoryRule(
        category="bar",
        keywords=("bar", "cocktail", "pub", "bia", "beer"),
        fallback_query="bars",
    ),
    CategoryRule(
        category="attraction",
        keywords=(
            "attraction", "tham quan", "điểm du lịch", "tourist", "landmark",
            "sightseeing",
        ),
        fallback_query="tourist attractions",
    ),
    CategoryRule(
        category="transport",
        keywords=(
            "transport", "dịch vụ xe", "xe đưa đón", "đưa đón", "airport",
            "sân bay", "taxi", "grab", "car rental", "thuê xe",
        ),
        fallback_query="transportation",
    ),
    CategoryRule(
        category="shopping",
        keywords=("shopping", "mua sắm", "mall", "trung tâm thương mại", "market", "chợ"),
        fallback_query="shopping",
    ),
    CategoryRule(
        category="spa",
        keywords=("spa", "massage", "wellness", "chăm sóc", "làm đẹp"),
        fallback_query="spa",
    ),
    CategoryRule(
        category="pharmacy",
        keywords=("pharmacy", "drugstore", "drug store", "nhà thuốc"),
        fallback_query="pharmacy",
    ),
    CategoryRule(
        category="hospital",
        keywords=("hospital", "clinic", "bệnh viện"),
        fallback_query="hospital",
    ),
)


def taxonomy_categories() -> List[str]:
    """Category names in taxonomy order."""
    return [rule.category for rule in CATEGORY_TAXONOMY]


def infer_category(query: Optional[str], explicit: Optional[str] = None) -> CategoryMatch:
    """
    Classify a query.

    An explicit category always wins (lower-cased, with no fallback query).
    Otherwise the first taxonomy rule matching the normalized query is
    returned with its fallback query. Never raises.

    Args:
        query: Free-text query
        explicit: Caller-supplied category override

    Returns:
        CategoryMatch; ``category`` is None when nothing matched
    """
    if explicit:
        return CategoryMatch(category=explicit.lower())

    normalized = normalize_text(query)
    if not normalized:
        return CategoryMatch(category=None)

    for rule in CATEGORY_TAXONOMY:
        if rule.matches(normalized):
            return CategoryMatch(category=rule.category, fallback_query=rule.fallback_query)

    return CategoryMatch(category=None)


def classify_place_types(labels: Iterable[Optional[str]]) -> Optional[str]:
    """
    Map provider type labels (e.g. "Vietnamese restaurant") onto a taxonomy category.

    Labels are tried in order; the first one that classifies wins.
    """
    for label in labels:
        match = infer_category(label)
        if match.category:
            return match.category
    return None
