"""
Lyrics fetching from LRCLIB for tunebridge.

Lyrics are OPTIONAL - a failed lookup must never break a unified lookup.
LrclibClient.fetch() therefore always returns a Lyrics object; on any
failure it is empty and the reason is logged.

API:
    GET https://lrclib.net/api/get?artist_name=...&track_name=...&duration=...
    200 -> {"syncedLyrics": "[00:15.00]...", "plainLyrics": "...", ...}
    404 -> no lyrics for this recording

Usage:
    async with LrclibClient() as lyrics_client:
        lyrics = await lyrics_client.fetch("The Weeknd", "Blinding Lights", 200)
        if lyrics.synced:
            ...
"""

import asyncio
from dataclasses import dataclass
from typing import Any

import aiohttp

from tunebridge.core.exceptions import LyricsError
from tunebridge.core.logger import get_logger


logger = get_logger(__name__)


LRCLIB_GET_URL = "https://lrclib.net/api/get"
USER_AGENT = "tunebridge (https://github.com/tunebridge/tunebridge)"
DEFAULT_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class Lyrics:
    """
    Container for fetched lyrics.

    Attributes:
        synced: LRC text with timestamps ("[00:15.00]First line..."), or None.
        plain: Plain text lyrics, or None.
    """

    synced: str | None = None
    plain: str | None = None

    @property
    def found(self) -> bool:
        return bool(self.synced or self.plain)

    def to_dict(self) -> dict[str, str | None]:
        return {"synced": self.synced, "plain": self.plain}


class LrclibClient:
    """
    Async LRCLIB client.

    Attributes:
        _session: aiohttp session, created lazily unless injected.
        _timeout: Per-request timeout in seconds.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        base_url: str = LRCLIB_GET_URL
    ) -> None:
        self._session = session
        self._owns_session = session is None
        self._timeout = timeout
        self._base_url = base_url

    async def __aenter__(self) -> "LrclibClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(headers={"User-Agent": USER_AGENT})
            self._owns_session = True
        return self._session

    async def fetch(self, artist: str, title: str, duration_seconds: int) -> Lyrics:
        """
        Fetch lyrics for a recording.

        Args:
            artist: Primary artist name.
            title: Track title.
            duration_seconds: Track duration; LRCLIB uses it to pick the
                              matching recording.

        Returns:
            Lyrics, empty when not found or when the request failed.
        """
        try:
            payload = await self._request(artist, title, duration_seconds)
        except LyricsError as e:
            logger.warning(f"Lyrics lookup failed for {artist} - {title}: {e.message}")
            return Lyrics()

        if payload is None:
            logger.debug(f"No lyrics found for: {artist} - {title}")
            return Lyrics()

        return Lyrics(
            synced=payload.get("syncedLyrics") or None,
            plain=payload.get("plainLyrics") or None,
        )

    async def _request(self, artist: str, title: str, duration_seconds: int) -> dict[str, Any] | None:
        params = {
            "artist_name": artist,
            "track_name": title,
            "duration": str(duration_seconds),
        }
        session = self._get_session()

        try:
            async with session.get(
                self._base_url,
                params=params,
                timeout=aiohttp.ClientTimeout(total=self._timeout)
            ) as response:
                if response.status == 404:
                    return None
                if response.status >= 400:
                    raise LyricsError(
                        f"LRCLIB returned {response.status}",
                        details={"artist": artist, "title": title},
                        status=response.status
                    )
                payload = await response.json(content_type=None)
        except asyncio.TimeoutError as e:
            raise LyricsError(
                f"LRCLIB timed out after {self._timeout}s",
                details={"artist": artist, "title": title}
            ) from e
        except aiohttp.ClientError as e:
            raise LyricsError(
                f"LRCLIB request failed: {e}",
                details={"artist": artist, "title": title, "original_error": str(e)}
            ) from e
        except ValueError as e:
            raise LyricsError(
                "LRCLIB returned invalid JSON",
                details={"artist": artist, "title": title, "original_error": str(e)}
            ) from e

        if not isinstance(payload, dict):
            raise LyricsError(
                "Unexpected LRCLIB response",
                details={"artist": artist, "title": title}
            )
        return payload
