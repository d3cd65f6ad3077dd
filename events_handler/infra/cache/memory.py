"""In-process read-through cache with single-flight loading.

Values are loaded at most once per key even when many tasks ask for the same
missing key at the same time: the first caller starts the load as a task and
every concurrent caller awaits that same task. Failed loads are not cached.
"""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from typing import TYPE_CHECKING, Generic, TypeVar

from events_handler.infra.metrics.prometheus import cache_lookups_total

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Hashable

logger = logging.getLogger(__name__)

K = TypeVar("K", bound="Hashable")
V = TypeVar("V")


class SingleFlightCache(Generic[K, V]):
    """Bounded, process-wide read-through cache.

    Entries are never invalidated explicitly; once ``max_entries`` is reached
    the least recently used entry is evicted.

    Example:
            cache: SingleFlightCache[str, CaseType] = SingleFlightCache(name="case_type")

        case_type = await cache.get_or_fetch(
            key=status.case_type_ref,
            fetch_func=lambda: client.get_case_type(status.case_type_ref),
        )
    """

    def __init__(self, name: str, max_entries: int = 1024) -> None:
        if max_entries < 1:
            msg = "max_entries must be at least 1"
            raise ValueError(msg)
        self.name = name
        self.max_entries = max_entries
        self._entries: OrderedDict[K, V] = OrderedDict()
        self._in_flight: dict[K, asyncio.Task[V]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def peek(self, key: K) -> V | None:
        """Return the cached value without loading or touching recency."""
        return self._entries.get(key)

    async def get_or_fetch(
        self,
        key: K,
        fetch_func: Callable[[], Awaitable[V]],
    ) -> V:
        """Get value from cache or load it once from the source.

        Args:
            key: Cache key.
            fetch_func: Zero-argument callable returning an awaitable of the value.

        Returns:
            Cached or freshly loaded value.

        Raises:
            Whatever ``fetch_func`` raises; the failure is shared by every
            caller waiting on the same load and nothing is stored.
        """
        if key in self._entries:
            self._entries.move_to_end(key)
            cache_lookups_total.labels(cache=self.name, result="hit").inc()
            return self._entries[key]

        task = self._in_flight.get(key)
        if task is None:
            cache_lookups_total.labels(cache=self.name, result="miss").inc()
            task = asyncio.ensure_future(self._load(key, fetch_func))
            self._in_flight[key] = task
        else:
            cache_lookups_total.labels(cache=self.name, result="joined").inc()

        # Shielded so that one cancelled waiter does not abort the load for the others
        return await asyncio.shield(task)

    async def _load(self, key: K, fetch_func: Callable[[], Awaitable[V]]) -> V:
        try:
            value = await fetch_func()
        except BaseException:
            logger.debug("Cache load failed", extra={"cache": self.name, "key": str(key)})
            raise
        else:
            self._store(key, value)
            return value
        finally:
            self._in_flight.pop(key, None)

    def _store(self, key: K, value: V) -> None:
        self._entries[key] = value
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("Cache entry evicted", extra={"cache": self.name, "key": str(evicted)})

    def clear(self) -> None:
        """Drop every cached entry. In-flight loads still complete."""
        self._entries.clear()


__all__ = ["SingleFlightCache"]
