"""
Tests for query resolution helpers.
"""

import pytest

from location_engine.services.query_resolver import (
    build_resolved_query,
    build_viewport_hint,
    determine_zoom,
)


class TestBuildResolvedQuery:
    """Test suite for the resolved query text."""

    def test_appends_fallback(self):
        """It should append the fallback keyword."""
        assert build_resolved_query("bún chả ngon", "restaurants") == "bún chả ngon restaurants"

    def test_skips_fallback_already_present(self):
        """It should not append a keyword the query already contains (case-insensitive)."""
        assert build_resolved_query("Best Restaurants Hà Nội", "restaurants") == "Best Restaurants Hà Nội"

    def test_no_fallback(self):
        """It should return the query unchanged without a fallback."""
        assert build_resolved_query("Hồ Gươm", None) == "Hồ Gươm"


class TestDetermineZoom:
    """Test suite for the radius to zoom step table."""

    @pytest.mark.parametrize("radius,zoom", [
        (None, 15),
        (0, 15),
        (200, 16),
        (500, 16),
        (501, 15),
        (1000, 15),
        (2500, 14),
        (3000, 14),
        (7000, 13),
        (7001, 12),
        (50000, 12),
    ])
    def test_zoom_steps(self, radius, zoom):
        """It should derive the zoom from the radius."""
        assert determine_zoom(radius) == zoom


class TestBuildViewportHint:
    """Test suite for the viewport hint."""

    def test_hint_format(self):
        """It should format the hint as @lat,lng,zoomz."""
        assert build_viewport_hint(21.0285, 105.8048, 1000) == "@21.0285,105.8048,15z"

    def test_default_zoom(self):
        """It should use the default zoom without a radius."""
        assert build_viewport_hint(10.7769, 106.7009) == "@10.7769,106.7009,15z"

    def test_incomplete_origin(self):
        """It should return None when either coordinate is missing."""
        assert build_viewport_hint(21.0285, None) is None
        assert build_viewport_hint(None, 105.8048) is None
