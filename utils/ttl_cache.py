"""
In-memory TTL cache wrapping asynchronous fetches.

Fresh entries are served without I/O. When a refresh fails the last good
value is served instead, and with no prior value the caller gets an empty
default. Failures are logged, never raised.

Entries are only ever replaced, never evicted. The key space is one entry
per distinct query (sessions per season, results per session, drivers per
season) so it stays small; unbounded key spaces would grow without limit.
Concurrent misses on the same key may each call the producer.
"""
import logging
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Awaitable, Callable, Dict, Hashable, Optional, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """A cached value with the clock reading taken when it was stored."""

    data: Any
    stored_at: float


class TTLCache:
    """Keyed cache of async fetch results. Create one per owner, not per module."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._entries: Dict[Hashable, CacheEntry] = {}
        self._clock = clock

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries

    def peek(self, key: Hashable) -> Optional[CacheEntry]:
        """Return the stored entry for key regardless of age, without fetching."""
        return self._entries.get(key)

    def clear(self) -> None:
        self._entries.clear()

    async def get_or_fetch(
        self,
        key: Hashable,
        ttl: Union[float, timedelta],
        fetch_fn: Callable[[], Awaitable[Any]],
        default_factory: Callable[[], Any] = list,
    ) -> Any:
        """
        Return cached data for key, refreshing it through fetch_fn when stale.

        Args:
            key: Identifies the query; distinct queries must use distinct keys
            ttl: Freshness window in seconds (or a timedelta)
            fetch_fn: Zero-argument coroutine function producing the data
            default_factory: Builds the empty value returned on a cold failure

        Returns:
            Fresh data, stale data if the refresh failed, or default_factory()
            if the refresh failed and nothing was ever cached.
        """
        ttl_seconds = ttl.total_seconds() if isinstance(ttl, timedelta) else float(ttl)
        entry = self._entries.get(key)
        if entry is not None and self._clock() - entry.stored_at < ttl_seconds:
            return entry.data

        try:
            data = await fetch_fn()
        except Exception:
            if entry is not None:
                logger.exception("Refresh failed for %s, serving stale data", key)
                return entry.data
            logger.exception("Fetch failed for %s with nothing cached, serving empty default", key)
            return default_factory()

        self._entries[key] = CacheEntry(data=data, stored_at=self._clock())
        return data
