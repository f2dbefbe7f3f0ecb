"""
In-memory snapshot cache with TTL support.

Every SSE subscriber polls the same snapshots (the vote list for the
dashboard, one full vote state per admin panel). The cache lets all of them
share a single database read per refresh, and every write invalidates the
affected keys so subscribers see the change on their next tick instead of
waiting out the TTL.

Entries are kept in insertion/access order and the least recently used one is
evicted once ``max_size`` is exceeded. Ages use the monotonic clock.
"""

import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Dict, NamedTuple, Optional

VOTE_LIST_KEY = "vote_list"
VOTE_STATE_PREFIX = "vote_state:"

_MISSING = object()


def vote_state_key(vote_id: str) -> str:
    return f"{VOTE_STATE_PREFIX}{vote_id}"


class _Entry(NamedTuple):
    value: Any
    stored_at: float


class TTLCache:
    """Thread-safe LRU cache whose freshness is decided per read."""

    def __init__(self, max_size: int = 256):
        self._entries: "OrderedDict[str, _Entry]" = OrderedDict()
        self._lock = threading.RLock()
        self._max_size = max_size
        self._hits = 0
        self._misses = 0

    def _lookup(self, key: str, ttl_seconds: Optional[float] = None) -> Any:
        """Entry value, or ``_MISSING`` when absent or older than ``ttl_seconds``."""
        entry = self._entries.get(key)
        if entry is None:
            return _MISSING
        if ttl_seconds is not None and time.monotonic() - entry.stored_at > ttl_seconds:
            return _MISSING
        self._entries.move_to_end(key)
        return entry.value

    def get(self, key: str) -> Optional[Any]:
        """Stored value regardless of age; does not touch hit/miss counters."""
        with self._lock:
            value = self._lookup(key)
            return None if value is _MISSING else value

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._entries[key] = _Entry(value, time.monotonic())
            self._entries.move_to_end(key)
            while len(self._entries) > self._max_size:
                self._entries.popitem(last=False)

    def is_expired(self, key: str, ttl_seconds: float) -> bool:
        with self._lock:
            entry = self._entries.get(key)
            return entry is None or time.monotonic() - entry.stored_at > ttl_seconds

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def fetch(self, key: str, fetch_func: Callable[[], Any], ttl_seconds: float) -> Any:
        """
        Fresh value for ``key``, calling ``fetch_func`` at most once per expiry.

        The lock is held across the fetch, so concurrent subscribers asking
        for the same stale key wait for one database read and share it.
        """
        with self._lock:
            value = self._lookup(key, ttl_seconds)
            if value is not _MISSING:
                self._hits += 1
                return value

            self._misses += 1
            value = fetch_func()
            self.set(key, value)
            return value

    def get_stats(self) -> Dict[str, Any]:
        """Size, hit/miss counters and entry ages for the health endpoint."""
        with self._lock:
            lookups = self._hits + self._misses
            now = time.monotonic()
            return {
                "size": len(self._entries),
                "max_size": self._max_size,
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate_percent": round(self._hits * 100 / lookups, 2) if lookups else 0,
                "entries": {
                    key: {"age_seconds": round(now - entry.stored_at, 2)}
                    for key, entry in self._entries.items()
                },
            }


def get_or_fetch(
    cache: TTLCache,
    cache_key: str,
    fetch_func: Callable[[], Any],
    ttl_seconds: float = 2.0
) -> Any:
    """Return the cached snapshot for ``cache_key`` or fetch and store a new one."""
    return cache.fetch(cache_key, fetch_func, ttl_seconds)


def invalidate_vote(cache: TTLCache, vote_id: str) -> None:
    """Drop every snapshot that contains ``vote_id``."""
    cache.invalidate(VOTE_LIST_KEY)
    cache.invalidate(vote_state_key(vote_id))


# Shared across all SSE connections
global_cache = TTLCache()
