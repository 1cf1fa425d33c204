"""In-memory TTL cache for query results."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar

from . import config

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Default cache duration in seconds (30 minutes unless overridden).
DEFAULT_CACHE_DURATION = config.CACHE_TTL_SECONDS


@dataclass
class CacheEntry:
    """Stored value plus the bookkeeping needed to judge freshness."""

    data: Any
    timestamp: float
    expires_in: float

    def is_live(self, now: float) -> bool:
        return now < self.timestamp + self.expires_in


class TTLCache:
    """Unbounded get-or-compute cache with per-entry expiry.

    Expired entries are not evicted proactively; they are treated as absent and
    overwritten by the next ``get_or_set`` for the same key, or removed by
    ``invalidate_expired``.

    Concurrent misses on the same key are not coalesced: each caller awaits its
    own ``compute`` and the last write wins.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._store: Dict[str, CacheEntry] = {}
        self._clock = clock

    async def get_or_set(
        self,
        key: str,
        compute: Callable[[], Awaitable[T]],
        ttl: float = DEFAULT_CACHE_DURATION,
    ) -> T:
        """Return the cached value for ``key`` or compute and store it.

        Args:
            key: Colon-namespaced cache key (``entity:operation:params``).
            compute: Zero-argument coroutine factory producing the value.
            ttl: Lifetime of a freshly stored entry, in seconds.

        Returns:
            The live cached value, or the freshly computed one.

        Raises:
            Exception: Whatever ``compute`` raises; nothing is cached then.
        """
        now = self._clock()
        entry = self._store.get(key)
        if entry is not None and entry.is_live(now):
            logger.debug("Cache hit for %s", key)
            return entry.data

        logger.debug("Cache miss for %s", key)
        data = await compute()
        # Freshness counts from the start of compute, not its end.
        self._store[key] = CacheEntry(data=data, timestamp=now, expires_in=ttl)
        return data

    def get(self, key: str, default: Any = None) -> Any:
        """Return the live value stored under ``key``, or ``default``."""
        entry = self._store.get(key)
        if entry is not None and entry.is_live(self._clock()):
            return entry.data
        return default

    def set(self, key: str, data: Any, ttl: float = DEFAULT_CACHE_DURATION) -> None:
        """Store ``data`` under ``key``, stamped with the current time."""
        self._store[key] = CacheEntry(data=data, timestamp=self._clock(), expires_in=ttl)

    def clear(self, pattern: Optional[str] = None) -> None:
        """Remove every entry, or every entry whose key contains ``pattern``."""
        if pattern:
            for key in [k for k in self._store if pattern in k]:
                del self._store[key]
        else:
            self._store.clear()

    def invalidate_expired(self) -> None:
        """Drop entries whose expiry has already passed."""
        now = self._clock()
        for key in [k for k, entry in self._store.items() if not entry.is_live(now)]:
            del self._store[key]

    def keys(self) -> List[str]:
        return list(self._store)

    def __contains__(self, key: object) -> bool:
        return key in self._store

    def __len__(self) -> int:
        return len(self._store)


# Process-wide instance used by the MCP server; empty at import, gone at exit.
shared_cache = TTLCache()
