"""
API key pool for the video search provider.

Each YouTube Data API key has a daily quota. The pool keeps the keys in
configured order, remembers which ones were rejected for quota, and points
at the key the next request should use. Exhaustion is sticky for the life
of the process: nothing here resets on a timer, an external scheduler
(a daily job, an admin command) must call reset().

State per key index i:
    Active(i)    - usable, may be the cursor
    Exhausted(i) - rejected for quota, skipped by acquire()

Usage:
    pool = CredentialPool(["key-a", "key-b"])
    index, key = pool.acquire()
    ...
    pool.mark_exhausted(index)   # on HTTP 403
    pool.acquire()               # -> (1, "key-b")
    pool.status()                # -> CredentialStatus(total=2, active_index=2, exhausted_indices=(1,))

acquire() and mark_exhausted() use 0-based indices; status() numbers
credentials from 1, like the "key #n" log lines.
"""

from typing import Iterable

from tunebridge.core.exceptions import QuotaExhaustedError
from tunebridge.core.logger import get_logger
from tunebridge.youtube.models import CredentialStatus


logger = get_logger(__name__)


class CredentialPool:
    """
    Ordered credentials with quota-exhaustion tracking.

    Attributes:
        _keys: The API keys, in rotation order.
        _exhausted: Indices rejected for quota since the last reset.
        _cursor: Index of the key the next request will use.

    Thread Safety:
        Not thread-safe. The resolver runs on a single asyncio event loop,
        where no await happens between reading and updating the cursor.
    """

    def __init__(self, keys: Iterable[str]) -> None:
        self._keys: tuple[str, ...] = tuple(k for k in keys if k)
        self._exhausted: set[int] = set()
        self._cursor = 0

    def __len__(self) -> int:
        return len(self._keys)

    def items(self) -> tuple[tuple[int, str], ...]:
        """All (index, key) pairs in rotation order, exhausted or not."""
        return tuple(enumerate(self._keys))

    def _next_available(self) -> int | None:
        total = len(self._keys)
        for offset in range(total):
            index = (self._cursor + offset) % total
            if index not in self._exhausted:
                return index
        return None

    def acquire(self) -> tuple[int, str]:
        """
        Return the active (index, key) pair.

        Moves the cursor forward past exhausted keys, wrapping around.

        Raises:
            QuotaExhaustedError: If the pool is empty or every key is exhausted.
        """
        index = self._next_available()
        if index is None:
            raise QuotaExhaustedError(
                "YouTube API quota exceeded on all credentials"
                if self._keys else "No YouTube API credentials configured",
                details={"total_credentials": len(self._keys)}
            )
        self._cursor = index
        return index, self._keys[index]

    def mark_exhausted(self, index: int) -> bool:
        """
        Mark a key as quota-exhausted and rotate away from it.

        Idempotent: two concurrent requests failing on the same key leave
        the cursor on the first still-usable key.

        Args:
            index: 0-based index returned by acquire().

        Returns:
            True if another key is still available, False if the whole
            pool is now exhausted.
        """
        if index not in self._exhausted:
            self._exhausted.add(index)
            logger.warning(f"YouTube API key #{index + 1} quota exceeded, switching to backup")

        next_index = self._next_available()
        if next_index is None:
            logger.error("All YouTube API keys exhausted")
            return False

        if next_index != self._cursor:
            self._cursor = next_index
            logger.info(f"Switched to YouTube API key #{next_index + 1}")
        return True

    def reset(self) -> None:
        """Clear every exhaustion flag and rewind the cursor to index 0."""
        self._exhausted.clear()
        self._cursor = 0
        logger.info("YouTube API keys reset")

    def status(self) -> CredentialStatus:
        """Snapshot with 1-based numbering, matching the "key #n" log lines."""
        return CredentialStatus(
            total=len(self._keys),
            active_index=self._cursor + 1,
            exhausted_indices=tuple(sorted(index + 1 for index in self._exhausted)),
        )
