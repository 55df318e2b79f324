"""
Short-lived cache for ranked search responses.

Design:
  - In-process OrderedDict, no external services
  - TTL expiry (5 minutes by default, 0 disables caching)
  - LRU eviction once max_size is reached
  - Thread-safe; Flask may serve requests from several threads

Usage:
    cache = SearchCache(ttl=300, max_size=500)
    cache.set("dune", SearchMediaType.BOOK, response)
    cached = cache.get("dune", SearchMediaType.BOOK)
"""

import hashlib
import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Dict, Optional, Tuple

from ..catalog.models import SearchMediaType, SearchResponse


class SearchCache:
    """Thread-safe in-memory cache of SearchResponse objects."""

    def __init__(
        self,
        ttl: float = 300,
        max_size: int = 500,
        clock: Callable[[], float] = time.time
    ):
        self.ttl = ttl
        self.max_size = max_size
        self._clock = clock
        self._entries: "OrderedDict[str, Tuple[float, SearchResponse]]" = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    @property
    def enabled(self) -> bool:
        return self.ttl > 0

    def _make_key(self, query: str, media_type: SearchMediaType) -> str:
        data = f"{query.lower().strip()}:{media_type.value}"
        return hashlib.md5(data.encode()).hexdigest()

    def get(self, query: str, media_type: SearchMediaType) -> Optional[SearchResponse]:
        """Return the cached response, or None when missing or expired."""
        if not self.enabled:
            return None

        key = self._make_key(query, media_type)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None

            stored_at, response = entry
            if self._clock() - stored_at > self.ttl:
                del self._entries[key]
                self._misses += 1
                return None

            self._entries.move_to_end(key)
            self._hits += 1
            return response

    def set(self, query: str, media_type: SearchMediaType, response: SearchResponse) -> None:
        if not self.enabled:
            return

        key = self._make_key(query, media_type)
        with self._lock:
            if key not in self._entries and len(self._entries) >= self.max_size:
                self._entries.popitem(last=False)
            self._entries[key] = (self._clock(), response)
            self._entries.move_to_end(key)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0

    def evict_expired(self) -> int:
        """Drop every expired entry; returns how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [key for key, (stored_at, _) in self._entries.items() if now - stored_at > self.ttl]
            for key in expired:
                del self._entries[key]
        return len(expired)

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            total = self._hits + self._misses
            hit_rate = (self._hits / total * 100) if total else 0.0
            return {
                'size': len(self._entries),
                'max_size': self.max_size,
                'ttl': self.ttl,
                'hits': self._hits,
                'misses': self._misses,
                'hit_rate': round(hit_rate, 2)
            }
