"""Short-TTL async cache with single-flight population.

Entries are invalidated purely by age. Concurrent callers that miss the
same key wait on one in-flight population instead of each fetching.
"""

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class TTLCache:
    """Keyed cache whose entries expire ``ttl_seconds`` after they were stored."""

    def __init__(
        self,
        ttl_seconds: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize cache.

        Args:
            ttl_seconds: Lifetime of each entry
            clock: Monotonic time source (injectable for tests)
        """
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[Any, float]] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def get(self, key: str) -> Optional[Any]:
        """Return a fresh value for key, or None if missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, stored_at = entry
        if self._clock() - stored_at >= self.ttl_seconds:
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = (value, self._clock())

    def invalidate(self, key: str) -> None:
        self._entries.pop(key, None)

    async def get_or_populate(
        self,
        key: str,
        factory: Callable[[], Awaitable[Any]],
    ) -> Any:
        """
        Return the cached value for key, populating it on a miss.

        At most one population per key runs at a time. If the factory raises,
        nothing is stored and the error propagates to every waiting caller
        that retries it.

        Args:
            key: Cache key
            factory: Coroutine function producing the value

        Returns:
            Cached or freshly produced value
        """
        value = self.get(key)
        if value is not None:
            return value

        lock = self._locks.setdefault(key, asyncio.Lock())
        async with lock:
            # Another caller may have populated while we waited
            value = self.get(key)
            if value is not None:
                return value

            logger.debug("[CACHE] Populating %s", key)
            value = await factory()
            self.set(key, value)
            return value
