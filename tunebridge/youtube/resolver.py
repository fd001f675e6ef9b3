"""
Video-match resolution engine.

Given a song title and artist, finds the video id of the "pure" official
audio or video for that song on YouTube, skipping reactions, covers,
remixes, live recordings and other variants.

Resolution Algorithm:
    1. Normalize (title, artist) and compute the cache key
    2. Cache hit -> return the cached video id, no network call
    3. Resolution already in flight for the key -> await the same future
    4. Otherwise register a new in-flight future and, for each of the six
       generated queries in priority order:
       a. Search the provider (key rotation happens inside the client)
       b. Score every candidate, discard scores <= REJECTION_FLOOR
       c. If anything is left, take the best one and stop
       d. A ProviderError abandons this query only; the loop moves on
    5. Found -> cache it and return the video id
       Nothing acceptable in any query -> return None (not cached)
       Every credential exhausted -> QuotaExhaustedError propagates

    The in-flight entry is removed when the future settles, on every path.

Outcomes:
    A genuine miss and "every query failed with a ProviderError" both
    return None. Callers that need to tell them apart should read the
    resolver log; only quota exhaustion is a distinct failure.

Concurrency:
    Designed for one asyncio event loop. Queries for one song run strictly
    in sequence; different songs resolve concurrently. A running resolution
    cannot be cancelled by a caller that stops waiting for it: callers await
    a shielded view of the shared future.

Usage:
    resolver = VideoResolver.from_config(config)
    try:
        video_id = await resolver.resolve("Blinding Lights", "The Weeknd")
    except QuotaExhaustedError:
        ...  # show "service temporarily unavailable"
    finally:
        await resolver.close()
"""

import asyncio
from typing import Any, Iterable, Mapping

from tunebridge.core.config import Config
from tunebridge.core.exceptions import ProviderError
from tunebridge.core.logger import format_resolved_message, get_logger, log_resolution_miss
from tunebridge.youtube.cache import DEFAULT_CAPACITY, InFlightTable, ResolutionCache
from tunebridge.youtube.client import YouTubeSearchClient
from tunebridge.youtube.credentials import CredentialPool
from tunebridge.youtube.models import CacheStats, CredentialStatus, NormalizedQuery, SongRef
from tunebridge.youtube.normalizer import normalize
from tunebridge.youtube.queries import build_queries
from tunebridge.youtube.scorer import pick_best, score_candidates


logger = get_logger(__name__)


PREFETCH_BATCH_SIZE = 3


class VideoResolver:
    """
    Resolver service owning the cache, in-flight table and search client.

    Construct one per process at startup and inject it wherever resolution
    is needed; its state is meant to be shared for the process lifetime.

    Attributes:
        _client: Quota-aware search client (owns the CredentialPool).
        _cache: Successful resolutions, FIFO-bounded.
        _in_flight: Pending resolutions by cache key.
        _prefetch_batch_size: How many tracks prefetch_batch() warms.
    """

    def __init__(
        self,
        client: YouTubeSearchClient,
        cache: ResolutionCache | None = None,
        prefetch_batch_size: int = PREFETCH_BATCH_SIZE
    ) -> None:
        self._client = client
        self._cache = cache if cache is not None else ResolutionCache(DEFAULT_CAPACITY)
        self._in_flight = InFlightTable()
        self._prefetch_batch_size = prefetch_batch_size

    @classmethod
    def from_config(cls, config: Config, session: Any = None) -> "VideoResolver":
        """
        Build a resolver from application configuration.

        Args:
            config: Loaded configuration.
            session: Optional aiohttp.ClientSession to share.
        """
        client = YouTubeSearchClient(
            CredentialPool(config.youtube.api_keys),
            session=session,
            timeout=config.youtube.timeout,
            max_results=config.youtube.max_results,
        )
        return cls(
            client,
            cache=ResolutionCache(config.cache.capacity),
            prefetch_batch_size=config.cache.prefetch_batch_size,
        )

    async def __aenter__(self) -> "VideoResolver":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.close()

    @property
    def in_flight(self) -> InFlightTable:
        return self._in_flight

    # =========================================================================
    # Resolution
    # =========================================================================

    async def resolve(self, title: str, artist: str) -> str | None:
        """
        Resolve a song to a video id.

        Args:
            title: Song title, decorations allowed.
            artist: Artist name or comma separated artist list.

        Returns:
            The video id, or None when no acceptable video was found.

        Raises:
            QuotaExhaustedError: If every API key is exhausted during the attempt.
        """
        query = normalize(title, artist)
        key = query.cache_key

        cached = self._cache.get(key)
        if cached is not None:
            logger.debug(f"Cache hit: {query.display}")
            return cached

        pending = self._in_flight.get(key)
        if pending is None:
            pending = self._start(query)
        else:
            logger.debug(f"Waiting for in-flight resolution: {query.display}")

        return await asyncio.shield(pending)

    def _start(self, query: NormalizedQuery) -> asyncio.Future:
        task = asyncio.ensure_future(self._resolve_uncached(query))
        self._in_flight.register(query.cache_key, task)
        return task

    async def _resolve_uncached(self, query: NormalizedQuery) -> str | None:
        for search_query in build_queries(query):
            try:
                candidates = await self._client.search(search_query)
            except ProviderError as e:
                logger.error(f"Search failed: '{search_query}': {e.message}")
                continue

            best = pick_best(score_candidates(candidates, query))
            if best is None:
                continue

            logger.info(format_resolved_message(
                query.clean_title, query.clean_artist, best.candidate.video_id, best.score
            ))
            logger.debug(
                f"Selected '{best.candidate.title[:50]}' from channel "
                f"'{best.candidate.channel_name}' for query '{search_query}'"
            )
            self._cache.put(query.cache_key, best.candidate.video_id)
            return best.candidate.video_id

        log_resolution_miss(logger, query.clean_title, query.clean_artist, query.cache_key)
        return None

    # =========================================================================
    # Prefetching
    # =========================================================================

    def prefetch(self, title: str, artist: str) -> None:
        """
        Start resolving a song in the background without waiting for it.

        Does nothing if the song is cached or already in flight. Must be
        called from a running event loop. A later resolve() for the same
        song joins the running resolution. Failures of a prefetch nobody
        awaits are logged, not raised.
        """
        query = normalize(title, artist)
        key = query.cache_key
        if key in self._cache or self._in_flight.has(key):
            return

        logger.debug(f"Prefetching: {query.display}")
        self._start(query).add_done_callback(_log_prefetch_failure)

    async def prefetch_batch(self, tracks: Iterable[SongRef | Mapping[str, Any]]) -> None:
        """
        Prefetch the first few tracks of an upcoming queue.

        Args:
            tracks: SongRef objects or {"title", "artist"} / {"name",
                    "artistName"} mappings, in play order. Only the first
                    prefetch batch size entries are used.
        """
        for position, track in enumerate(tracks):
            if position >= self._prefetch_batch_size:
                break
            song = track if isinstance(track, SongRef) else SongRef.from_mapping(track)
            self.prefetch(song.title, song.artist)

        # Let the scheduled resolutions start their first request
        await asyncio.sleep(0)

    # =========================================================================
    # Diagnostics and operational controls
    # =========================================================================

    def cache_stats(self) -> CacheStats:
        return CacheStats(size=self._cache.size(), keys=self._cache.keys())

    def clear_cache(self) -> None:
        """Drop every cached video id and forget in-flight resolutions."""
        self._cache.clear()
        self._in_flight.clear()
        logger.debug("Video cache cleared")

    def reset_credentials(self) -> None:
        """Clear all quota-exhaustion flags. Meant for a daily scheduler."""
        self._client.credentials.reset()

    def credential_status(self) -> CredentialStatus:
        return self._client.credentials.status()

    async def check_credentials(self) -> CredentialStatus:
        """Send one search per usable key and return the refreshed status."""
        return await self._client.check_credentials()


def _log_prefetch_failure(future: asyncio.Future) -> None:
    if future.cancelled():
        return
    error = future.exception()
    if error is not None:
        logger.warning(f"Prefetch failed: {error}")
