"""
Quota-aware YouTube Data API search client.

Issues search.list requests with a key from the CredentialPool. When the
API rejects a key for quota (HTTP 403), the key is marked exhausted and the
SAME query is retried with the next key. The retry loop is bounded by the
pool size, so callers see either candidates, a ProviderError for this one
query, or a terminal QuotaExhaustedError once no key is left.

Error mapping:
    403                         -> rotate key, retry (QuotaExhaustedError when none left)
    other non-2xx               -> ProviderError(status=...)
    network error / timeout     -> ProviderError
    malformed JSON / structure  -> ProviderError

Usage:
    pool = CredentialPool(config.youtube.api_keys)
    async with YouTubeSearchClient(pool, timeout=15) as client:
        candidates = await client.search('"Song" "Artist" official audio')
"""

import asyncio
from typing import Any

import aiohttp

from tunebridge.core.exceptions import ProviderError, QuotaExhaustedError
from tunebridge.core.logger import get_logger
from tunebridge.youtube.credentials import CredentialPool
from tunebridge.youtube.models import Candidate, CredentialStatus


logger = get_logger(__name__)


SEARCH_URL = "https://www.googleapis.com/youtube/v3/search"

# Status the Data API uses for quotaExceeded / dailyLimitExceeded
QUOTA_STATUS_CODES = frozenset({403})

# YouTube video category "Music"
MUSIC_CATEGORY_ID = "10"

DEFAULT_TIMEOUT_SECONDS = 15.0
DEFAULT_MAX_RESULTS = 10

# Cheap search used by check_credentials()
CHECK_QUERY = "music"


class YouTubeSearchClient:
    """
    Keyword search against the video provider with credential rotation.

    Attributes:
        credentials: The shared CredentialPool (exposed for status/reset).
        _session: aiohttp session, created lazily unless injected.
        _owns_session: Whether close() should close the session.
        _timeout: Per-request timeout in seconds.
        _max_results: Candidates requested per search.
    """

    def __init__(
        self,
        credentials: CredentialPool,
        session: aiohttp.ClientSession | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        max_results: int = DEFAULT_MAX_RESULTS,
        base_url: str = SEARCH_URL
    ) -> None:
        self.credentials = credentials
        self._session = session
        self._owns_session = session is None
        self._timeout = timeout
        self._max_results = max_results
        self._base_url = base_url

    async def __aenter__(self) -> "YouTubeSearchClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    async def search(self, query: str) -> list[Candidate]:
        """
        Search for videos matching a query.

        Args:
            query: Free-text search query.

        Returns:
            Candidates in the provider's result order (possibly empty).

        Raises:
            QuotaExhaustedError: If every credential is rejected for quota.
            ProviderError: For any other failure of this request.
        """
        for _ in range(max(len(self.credentials), 1)):
            index, key = self.credentials.acquire()
            status, payload = await self._request(query, key)

            if status in QUOTA_STATUS_CODES:
                if not self.credentials.mark_exhausted(index):
                    break
                logger.debug(f"Retrying '{query}' with the next API key")
                continue

            return self._parse_candidates(payload, query)

        raise QuotaExhaustedError(
            "YouTube API quota exceeded on all credentials",
            details={"query": query, "total_credentials": len(self.credentials)}
        )

    async def check_credentials(self, query: str = CHECK_QUERY) -> CredentialStatus:
        """
        Check every non-exhausted key with a one-result search.

        Keys rejected for quota are marked exhausted. Any other failure
        leaves the key as it was and is logged. Each check costs the same
        quota as a normal search.

        Returns:
            The pool status after the check.
        """
        exhausted = set(self.credentials.status().exhausted_indices)
        for index, key in self.credentials.items():
            if index + 1 in exhausted:
                continue
            try:
                status, _ = await self._request(query, key, max_results=1)
            except ProviderError as e:
                logger.warning(f"YouTube API key #{index + 1} check failed: {e.message}")
                continue
            if status in QUOTA_STATUS_CODES:
                self.credentials.mark_exhausted(index)
        return self.credentials.status()

    async def _request(
        self,
        query: str,
        key: str,
        max_results: int | None = None
    ) -> tuple[int, Any]:
        params = {
            "part": "snippet",
            "q": query,
            "type": "video",
            "videoCategoryId": MUSIC_CATEGORY_ID,
            "maxResults": str(max_results or self._max_results),
            "key": key,
        }
        session = self._get_session()

        try:
            async with session.get(
                self._base_url,
                params=params,
                timeout=aiohttp.ClientTimeout(total=self._timeout)
            ) as response:
                status = response.status
                if status in QUOTA_STATUS_CODES:
                    return status, None
                if status >= 400:
                    body = await response.text()
                    raise ProviderError(
                        f"YouTube API error {status} for '{query}'",
                        details={"query": query, "status": status, "body": body[:500]},
                        status=status
                    )
                payload = await response.json(content_type=None)
        except asyncio.TimeoutError as e:
            raise ProviderError(
                f"YouTube search timed out after {self._timeout}s for '{query}'",
                details={"query": query, "timeout": self._timeout}
            ) from e
        except aiohttp.ClientError as e:
            raise ProviderError(
                f"YouTube search request failed for '{query}': {e}",
                details={"query": query, "original_error": str(e)}
            ) from e
        except ValueError as e:
            raise ProviderError(
                f"YouTube search returned invalid JSON for '{query}'",
                details={"query": query, "original_error": str(e)}
            ) from e

        return status, payload

    @staticmethod
    def _parse_candidates(payload: Any, query: str) -> list[Candidate]:
        if not isinstance(payload, dict):
            raise ProviderError(
                f"Unexpected YouTube search response for '{query}'",
                details={"query": query}
            )

        items = payload.get("items") or []
        if not isinstance(items, list):
            raise ProviderError(
                f"Unexpected 'items' in YouTube search response for '{query}'",
                details={"query": query}
            )

        candidates = []
        for item in items:
            if not isinstance(item, dict):
                continue
            candidate = Candidate.from_search_item(item)
            if candidate is not None:
                candidates.append(candidate)

        logger.debug(f"'{query}': {len(candidates)} candidates")
        return candidates
