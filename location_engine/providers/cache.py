"""
In-process TTL cache shared by place searches and geocoding.

Entries expire lazily: an entry past its deadline is dropped the next time
it is read, never by a background sweep. Unlike a plain dict the cache is
bounded by an LRU capacity, so high query cardinality cannot grow it
without limit. It is created once per process and injected into the
services that use it.
"""

import hashlib
import json
import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from .models import CacheStats

logger = logging.getLogger(__name__)

# Coordinates are rounded to 4 decimals (~11m) so that near-duplicate user
# locations share one entry.
COORDINATE_PRECISION = 4
COORDINATE_KEYS = {"latitude", "longitude", "lat", "lng", "lon"}


@dataclass
class CacheKey:
    """Structure for generating consistent cache keys."""
    operation: str  # search, geocode
    params: Dict[str, Any]

    def generate_key(self) -> str:
        """Generate a unique key based on operation and effective parameters."""
        normalized_params = self._normalize_params(self.params)
        params_json = json.dumps(normalized_params, sort_keys=True, ensure_ascii=False)
        param_hash = hashlib.md5(params_json.encode("utf-8")).hexdigest()

        return f"{self.operation}:{param_hash}"

    def _normalize_params(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """Normalize parameters for consistent hashing."""
        normalized = {}

        for key, value in params.items():
            if value is None:
                # Absent parameters must not split entries
                continue
            if isinstance(value, bool):
                normalized[key] = value
            elif isinstance(value, (int, float)) and key in COORDINATE_KEYS:
                normalized[key] = round(float(value), COORDINATE_PRECISION)
            elif isinstance(value, (list, tuple, set)):
                normalized[key] = sorted(value)
            else:
                normalized[key] = value

        return normalized


@dataclass
class CacheEntry:
    """Cache entry holding the payload and its expiry deadline."""
    payload: Any
    expires_at: float
    created_at: float = 0.0
    hit_count: int = 0

    def is_expired(self, now: float) -> bool:
        """An entry is expired from its deadline onwards."""
        return now >= self.expires_at


@dataclass
class _Counters:
    hits: int = 0
    misses: int = 0
    sets: int = 0
    evictions: int = 0
    expirations: int = 0


class TTLCache:
    """
    Key -> (payload, expiry) store with lazy expiry and an LRU cap.

    Payloads are returned as stored, without copying; callers must treat
    them as read-only. Reads and writes are not locked: two concurrent
    requests missing the same key may both reach the provider, and the
    last write wins.
    """

    def __init__(
        self,
        max_entries: Optional[int] = 2048,
        clock: Optional[Callable[[], float]] = None,
    ):
        """
        Initialize the cache.

        Args:
            max_entries: LRU capacity; ``None`` or ``0`` keeps it unbounded
            clock: Monotonic time source in seconds (injectable for tests)
        """
        self.max_entries = max_entries or None
        self._clock = clock or time.monotonic
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._counters = _Counters()

    def get(self, key: str) -> Optional[Any]:
        """Return the cached payload, or None when missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            self._counters.misses += 1
            return None

        if entry.is_expired(self._clock()):
            del self._entries[key]
            self._counters.expirations += 1
            self._counters.misses += 1
            logger.debug(f"Cache entry expired: {key}")
            return None

        self._entries.move_to_end(key)
        entry.hit_count += 1
        self._counters.hits += 1
        return entry.payload

    def set(self, key: str, value: Any, ttl: float) -> None:
        """
        Store a payload for ``ttl`` seconds.

        Args:
            key: Cache key (see ``CacheKey``)
            value: Payload to store
            ttl: Time to live in seconds
        """
        now = self._clock()
        self._entries[key] = CacheEntry(payload=value, expires_at=now + ttl, created_at=now)
        self._entries.move_to_end(key)
        self._counters.sets += 1

        if self.max_entries is not None:
            while len(self._entries) > self.max_entries:
                evicted_key, _ = self._entries.popitem(last=False)
                self._counters.evictions += 1
                logger.debug(f"Cache capacity reached, evicted {evicted_key}")

    def delete(self, key: str) -> bool:
        """Remove an entry; returns whether it existed."""
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        """Clear all cache entries."""
        self._entries.clear()
        logger.info("Cache cleared")

    def get_stats(self) -> CacheStats:
        """Get cache statistics."""
        return CacheStats(
            entries=len(self._entries),
            max_entries=self.max_entries,
            hits=self._counters.hits,
            misses=self._counters.misses,
            sets=self._counters.sets,
            evictions=self._counters.evictions,
            expirations=self._counters.expirations,
        )

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        entry = self._entries.get(key)
        return entry is not None and not entry.is_expired(self._clock())
