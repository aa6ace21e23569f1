"""
Pytest configuration and shared fixtures.

Provides a fake place provider, a controllable clock and sample SerpAPI
payloads, so no test ever reaches the network.
"""

import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional
from unittest.mock import patch

import pytest

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from location_engine.providers.base import PlaceProvider, ProviderType
from location_engine.providers.cache import TTLCache
from location_engine.providers.settings import EngineSettings, reset_settings


class FakeClock:
    """Manually advanced time source for the cache."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakePlaceProvider(PlaceProvider):
    """
    In-memory provider.

    ``responses`` maps a query to a payload (or to an exception to raise);
    queries without an entry get ``default``. Every call is recorded.
    """

    def __init__(self, responses: Optional[Dict[str, Any]] = None, default: Optional[Dict] = None):
        self.responses = responses or {}
        self.default = default if default is not None else {}
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    @property
    def provider_type(self) -> ProviderType:
        return ProviderType.SERPAPI

    async def maps_search(self, query, language, country, open_now=False, viewport=None):
        self.calls.append({
            "query": query,
            "language": language,
            "country": country,
            "open_now": open_now,
            "viewport": viewport,
        })
        response = self.responses.get(query, self.default)
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def close(self):
        self.closed = True


def make_record(
    place_id: str,
    title: str,
    latitude: float = 21.0290,
    longitude: float = 105.8050,
    rating: Optional[float] = 4.5,
    reviews: Optional[int] = 500,
    position: Optional[int] = 1,
    **extra: Any,
) -> Dict[str, Any]:
    """Build one raw SerpAPI ``local_results`` record."""
    record: Dict[str, Any] = {
        "place_id": place_id,
        "title": title,
        "gps_coordinates": {"latitude": latitude, "longitude": longitude},
        "type": "Vietnamese restaurant",
        "address": "Hà Nội, Việt Nam",
    }
    if rating is not None:
        record["rating"] = rating
    if reviews is not None:
        record["reviews"] = reviews
    if position is not None:
        record["position"] = position
    record.update(extra)
    return record


@pytest.fixture
def fake_clock():
    """Provide a clock that only moves when told to."""
    return FakeClock()


@pytest.fixture
def cache(fake_clock):
    """Provide an empty cache driven by the fake clock."""
    return TTLCache(max_entries=100, clock=fake_clock)


@pytest.fixture
def settings():
    """Provide configured settings isolated from the environment."""
    return EngineSettings(_env_file=None, serpapi_key="test-key")


@pytest.fixture
def fake_provider():
    """Provide an empty fake provider."""
    return FakePlaceProvider()


@pytest.fixture
def search_payload():
    """Provide a SerpAPI payload with five restaurants around Hoàn Kiếm lake."""
    return {
        "search_metadata": {"status": "Success"},
        "local_results": [
            make_record("p1", "Bún Chả Hương Liên", 21.0180, 105.8530, rating=4.4, reviews=9500, position=1),
            make_record("p2", "Bún Chả Đắc Kim", 21.0330, 105.8490, rating=4.1, reviews=3000, position=2),
            make_record("p3", "Bún Chả Ta", 21.0290, 105.8050, rating=4.7, reviews=1200, position=3),
            make_record("p4", "Bún Chả Sinh Từ", 21.0300, 105.8100, rating=None, reviews=None, position=4),
            make_record("p5", "Bún Chả 34", 21.0275, 105.8040, rating=3.9, reviews=80, position=5),
        ],
        "related_questions": [
            {"question": "Bún chả nào ngon nhất Hà Nội?"},
            {"question": ""},
            {"snippet": "no question"},
        ],
    }


@pytest.fixture
def mock_env_vars():
    """Mock environment variables for testing."""
    test_values = {
        "SERPAPI_KEY": "env-key",
        "LOCATION_DEFAULT_LANGUAGE": "en",
        "LOCATION_SEARCH_CACHE_TTL": "60",
        "LOCATION_NEARBY_MAX_CONCURRENCY": "2",
    }

    with patch.dict(os.environ, test_values, clear=True):
        reset_settings()
        yield test_values

    reset_settings()


@pytest.fixture
def record_factory():
    """Provide the raw record builder."""
    return make_record


@pytest.fixture
def provider_factory():
    """Provide the fake provider class for tests that script responses."""
    return FakePlaceProvider
