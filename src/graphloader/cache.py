"""Time-expiring keyed cache with single-flight loading.

Resolved values are stored as futures in a :class:`cachetools.TTLCache`,
written when the load completes, so an entry lives for ``ttl`` seconds after
write. Loads still in flight are kept in a separate, unbounded map until they
resolve: every caller for the same key shares one loader invocation, however
long it takes and whatever the size pressure. Absent results (``None``) are
cached like any other value. Expiry is lazy: an entry older than the TTL is
never returned, but it is only dropped when the cache is touched.

All access happens on one event loop; no locking is done.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable, Hashable
from typing import Generic, TypeVar

from cachetools import TTLCache

from .config import Settings, settings as default_settings
from .logging import get_logger

logger = get_logger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class KeyedCache(Generic[K, V]):
    """Bounded, time-expiring memoization keyed by identifier.

    Parameters
    ----------
    ttl: float
        Seconds an entry stays live after it is written.
    maxsize: int
        Maximum number of resolved entries; the least recently used entry is
        evicted first when the cache is full. Pending loads do not count.
    timer: Callable[[], float]
        Monotonic clock used for expiry. Injectable for tests.
    """

    def __init__(
        self,
        ttl: float = 600.0,
        maxsize: int = 1024,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl = ttl
        self.maxsize = maxsize
        self._entries: TTLCache[K, asyncio.Future[V | None]] = TTLCache(
            maxsize=maxsize, ttl=ttl, timer=timer
        )
        self._pending: dict[K, asyncio.Future[V | None]] = {}

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> KeyedCache[K, V]:
        settings = settings or default_settings
        return cls(ttl=settings.cache_ttl_seconds, maxsize=settings.cache_max_size)

    def __contains__(self, key: object) -> bool:
        return key in self._pending or key in self._entries

    def __len__(self) -> int:
        self._entries.expire()
        return len(self._entries) + len(self._pending)

    async def get_or_load(
        self, key: K, loader: Callable[[K], Awaitable[V | None]]
    ) -> V | None:
        """Return the live value for ``key``, calling ``loader`` only on a miss.

        A loader failure propagates to the caller and to every concurrent
        waiter, and nothing is cached so the next call retries.
        """
        while True:
            future = self._pending.get(key)
            if future is None:
                future = self._entries.get(key)
            if future is None or future.cancelled():
                break

            logger.debug("Cache hit", key=key, pending=not future.done())
            if future.done():
                return future.result()
            try:
                return await asyncio.shield(future)
            except asyncio.CancelledError:
                task = asyncio.current_task()
                if not future.cancelled() or (task is not None and task.cancelling()):
                    raise
                # The loading caller was cancelled; take over the load.

        return await self._load(key, loader)

    async def _load(self, key: K, loader: Callable[[K], Awaitable[V | None]]) -> V | None:
        future: asyncio.Future[V | None] = asyncio.get_running_loop().create_future()
        self._pending[key] = future
        logger.debug("Cache miss", key=key)

        try:
            value = await loader(key)
        except asyncio.CancelledError:
            self._settle(key, future)
            future.cancel()
            raise
        except Exception as e:
            self._settle(key, future)
            future.set_exception(e)
            # Waiters re-raise it from the future; the caller gets it below.
            future.exception()
            logger.warning("Cache load failed", key=key, error=str(e))
            raise

        future.set_result(value)
        # Invalidated or cleared mid-load: hand the value to waiters, don't keep it.
        if self._settle(key, future):
            self._entries[key] = future
        return value

    def _settle(self, key: K, future: asyncio.Future[V | None]) -> bool:
        """Drop ``future`` from the pending map; False if it was no longer current."""
        if self._pending.get(key) is future:
            del self._pending[key]
            return True
        return False

    def invalidate(self, key: K) -> None:
        """Drop the entry for ``key`` if there is one."""
        self._pending.pop(key, None)
        self._entries.pop(key, None)

    def clear(self) -> None:
        """Drop every entry."""
        self._pending.clear()
        self._entries.clear()
