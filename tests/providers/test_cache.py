"""
Tests for the in-process TTL cache.

Covers key generation and normalization, lazy expiry, the LRU capacity
and the statistics counters.
"""

from location_engine.providers.cache import CacheEntry, CacheKey, TTLCache


class TestCacheKey:
    """Test suite for CacheKey generation."""

    def test_cache_key_structure(self):
        """It should generate keys with operation:hash structure."""
        key = CacheKey(operation="geocode", params={"address": "36 Hàng Bạc"}).generate_key()

        operation, digest = key.split(":")
        assert operation == "geocode"
        assert len(digest) == 32  # MD5 hash length

    def test_cache_key_consistency(self):
        """It should generate identical keys for identical parameters."""
        params = {"query": "cafes", "limit": 5}

        assert CacheKey("search", params).generate_key() == CacheKey("search", dict(params)).generate_key()

    def test_cache_key_ignores_parameter_order(self):
        """It should not depend on the insertion order of the parameters."""
        key1 = CacheKey("search", {"query": "cafes", "limit": 5})
        key2 = CacheKey("search", {"limit": 5, "query": "cafes"})

        assert key1.generate_key() == key2.generate_key()

    def test_cache_key_different_operations(self):
        """It should generate different keys for different operations."""
        params = {"query": "Hà Nội"}

        assert CacheKey("search", params).generate_key() != CacheKey("geocode", params).generate_key()

    def test_coordinates_rounded_to_four_decimals(self):
        """It should share one key for origins closer than the rounding step."""
        key1 = CacheKey("search", {"latitude": 21.02851, "longitude": 105.80481})
        key2 = CacheKey("search", {"latitude": 21.02849, "longitude": 105.80479})
        key3 = CacheKey("search", {"latitude": 21.0295, "longitude": 105.8048})

        assert key1.generate_key() == key2.generate_key()
        assert key1.generate_key() != key3.generate_key()

    def test_none_values_dropped(self):
        """It should treat a None parameter like an absent one."""
        key1 = CacheKey("search", {"query": "cafes", "radius": None})
        key2 = CacheKey("search", {"query": "cafes"})

        assert key1.generate_key() == key2.generate_key()

    def test_lists_sorted(self):
        """It should not depend on the order of list values."""
        key1 = CacheKey("search", {"categories": ["cafes", "bars"]})
        key2 = CacheKey("search", {"categories": ["bars", "cafes"]})

        assert key1.generate_key() == key2.generate_key()

    def test_boolean_not_confused_with_number(self):
        """It should keep booleans distinct from other values."""
        key1 = CacheKey("search", {"open_now": True})
        key2 = CacheKey("search", {"open_now": False})

        assert key1.generate_key() != key2.generate_key()


class TestCacheEntry:
    """Test suite for CacheEntry expiry."""

    def test_entry_expired_at_deadline(self):
        """It should be expired from its deadline onwards."""
        entry = CacheEntry(payload="x", expires_at=100.0)

        assert entry.is_expired(99.9) is False
        assert entry.is_expired(100.0) is True
        assert entry.is_expired(150.0) is True


class TestTTLCache:
    """Test suite for TTLCache get/set behavior."""

    def test_get_missing_key(self, cache):
        """It should return None for unknown keys."""
        assert cache.get("missing") is None

    def test_set_and_get(self, cache):
        """It should return the stored payload before it expires."""
        payload = {"places": [1, 2, 3]}
        cache.set("key", payload, ttl=60)

        assert cache.get("key") is payload

    def test_entry_expires_lazily(self, cache, fake_clock):
        """It should drop an entry on the first read past its TTL."""
        cache.set("key", "value", ttl=60)

        fake_clock.advance(59)
        assert cache.get("key") == "value"

        fake_clock.advance(1)
        assert cache.get("key") is None
        assert len(cache) == 0

    def test_expired_entry_not_returned_before_read(self, cache, fake_clock):
        """It should report an expired entry as absent even before it is purged."""
        cache.set("key", "value", ttl=10)
        fake_clock.advance(10)

        assert "key" not in cache
        assert len(cache) == 1

    def test_overwrite_resets_ttl(self, cache, fake_clock):
        """It should replace the payload and the deadline on set."""
        cache.set("key", "old", ttl=10)
        fake_clock.advance(8)
        cache.set("key", "new", ttl=10)
        fake_clock.advance(8)

        assert cache.get("key") == "new"

    def test_zero_ttl_never_served(self, cache):
        """It should never serve an entry stored with a zero TTL."""
        cache.set("key", "value", ttl=0)

        assert cache.get("key") is None

    def test_delete(self, cache):
        """It should remove an entry and report whether it existed."""
        cache.set("key", "value", ttl=60)

        assert cache.delete("key") is True
        assert cache.delete("key") is False
        assert cache.get("key") is None

    def test_clear(self, cache):
        """It should remove every entry."""
        cache.set("a", 1, ttl=60)
        cache.set("b", 2, ttl=60)

        cache.clear()

        assert len(cache) == 0


class TestTTLCacheCapacity:
    """Test suite for the LRU capacity."""

    def test_evicts_least_recently_used(self, fake_clock):
        """It should evict the entry read or written least recently."""
        cache = TTLCache(max_entries=2, clock=fake_clock)
        cache.set("a", 1, ttl=60)
        cache.set("b", 2, ttl=60)
        cache.get("a")

        cache.set("c", 3, ttl=60)

        assert cache.get("a") == 1
        assert cache.get("b") is None
        assert cache.get("c") == 3
        assert cache.get_stats().evictions == 1

    def test_zero_capacity_is_unbounded(self, fake_clock):
        """It should not evict anything when the capacity is 0."""
        cache = TTLCache(max_entries=0, clock=fake_clock)
        for i in range(500):
            cache.set(f"key-{i}", i, ttl=60)

        assert len(cache) == 500
        assert cache.get_stats().max_entries is None


class TestCacheStats:
    """Test suite for cache statistics."""

    def test_stats_counters(self, cache, fake_clock):
        """It should count hits, misses, sets and expirations."""
        cache.set("a", 1, ttl=10)
        cache.get("a")
        cache.get("missing")
        fake_clock.advance(10)
        cache.get("a")

        stats = cache.get_stats()

        assert stats.hits == 1
        assert stats.misses == 2
        assert stats.sets == 1
        assert stats.expirations == 1
        assert stats.entries == 0
        assert stats.max_entries == 100

    def test_hit_rate(self, cache):
        """It should compute the hit rate as a percentage."""
        cache.set("a", 1, ttl=10)
        cache.get("a")
        cache.get("a")
        cache.get("a")
        cache.get("b")

        assert cache.get_stats().hit_rate == 75.0

    def test_hit_rate_without_reads(self, cache):
        """It should report a 0 hit rate before any read."""
        assert cache.get_stats().hit_rate == 0.0
