"""
Resolution cache and in-flight request table.

ResolutionCache maps a normalized cache key to a resolved video id. It is
bounded and evicts strictly by insertion order (FIFO): reading an entry
never moves it, so the first key stored is the first key dropped once the
capacity is exceeded. Only successful resolutions are stored; misses are
not cached so they can be retried later.

InFlightTable maps a cache key to the pending future of the resolution
running for it. Concurrent callers for the same key await that one future
instead of starting a second provider search sequence. Registering a
future attaches a done-callback that removes the entry when the future
settles, whether it succeeded, missed, raised or was cancelled.
"""

import asyncio
from collections import OrderedDict

from tunebridge.core.logger import get_logger


logger = get_logger(__name__)


DEFAULT_CAPACITY = 100


class ResolutionCache:
    """
    Bounded key -> video id store with FIFO eviction.

    Attributes:
        capacity: Maximum number of entries kept.
        _entries: Insertion-ordered storage.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be a positive integer")
        self.capacity = capacity
        self._entries: OrderedDict[str, str] = OrderedDict()

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> str | None:
        return self._entries.get(key)

    def put(self, key: str, video_id: str) -> None:
        """
        Store a video id.

        A new key evicts the oldest-inserted entry when the cache is full.
        Re-storing an existing key updates its value in place and keeps its
        original position.
        """
        if key not in self._entries and len(self._entries) >= self.capacity:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(f"Cache full, evicted '{evicted}'")
        self._entries[key] = video_id

    def size(self) -> int:
        return len(self._entries)

    def keys(self) -> tuple[str, ...]:
        """Keys in insertion order, oldest first."""
        return tuple(self._entries)

    def clear(self) -> None:
        self._entries.clear()


class InFlightTable:
    """Cache key -> pending resolution future."""

    def __init__(self) -> None:
        self._pending: dict[str, asyncio.Future] = {}

    def __len__(self) -> int:
        return len(self._pending)

    def has(self, key: str) -> bool:
        return key in self._pending

    def get(self, key: str) -> asyncio.Future | None:
        """Return the shared future so every caller awaits the same result."""
        return self._pending.get(key)

    def register(self, key: str, future: asyncio.Future) -> None:
        """
        Track a pending resolution and schedule its unconditional removal.

        Raises:
            ValueError: If a resolution for the key is already in flight.
        """
        if key in self._pending:
            raise ValueError(f"resolution already in flight for '{key}'")
        self._pending[key] = future
        future.add_done_callback(lambda settled: self._discard(key, settled))

    def _discard(self, key: str, future: asyncio.Future) -> None:
        # A cleared-then-reregistered key must not lose its newer future.
        if self._pending.get(key) is future:
            del self._pending[key]

    def remove(self, key: str) -> None:
        self._pending.pop(key, None)

    def clear(self) -> None:
        self._pending.clear()
