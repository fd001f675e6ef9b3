"""
Unified track lookup for tunebridge.

Turns one free-text query into everything the player needs for a song:
catalog metadata from Spotify, a playable YouTube video id and lyrics.

Lookup Workflow:
    1. Search Spotify for the query, take the top track (None if no hit)
    2. Concurrently:
       - resolve the YouTube video id from the track title and primary artist
       - fetch lyrics from LRCLIB using artist, title and duration
    3. Shape the result; to_dict() gives the JSON document served to clients:

        {
          "spotify": {"id", "name", "artist", "album", "image", "duration_ms", "url"},
          "youtube": {"videoId", "url"},
          "lyrics": {"synced", "plain"}
        }

    A video miss leaves youtube.videoId null. QuotaExhaustedError and
    SpotifyError propagate to the caller; lyrics failures never do.

Usage:
    service = UnifiedMusicService(spotify_client, resolver, lyrics_client)
    data = await service.get_unified_data("blinding lights")
"""

import asyncio
from dataclasses import dataclass
from typing import Any

from tunebridge.core.config import Config
from tunebridge.core.logger import get_logger
from tunebridge.lyrics import LrclibClient, Lyrics
from tunebridge.spotify import SpotifyClient, Track
from tunebridge.youtube import VideoResolver
from tunebridge.youtube.models import WATCH_URL_TEMPLATE


logger = get_logger(__name__)


@dataclass(frozen=True)
class UnifiedTrackData:
    track: Track
    video_id: str | None
    lyrics: Lyrics

    @property
    def video_url(self) -> str | None:
        if self.video_id is None:
            return None
        return WATCH_URL_TEMPLATE.format(video_id=self.video_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "spotify": self.track.to_dict(),
            "youtube": {"videoId": self.video_id, "url": self.video_url},
            "lyrics": self.lyrics.to_dict(),
        }


class UnifiedMusicService:
    """
    Assembles unified track data from the three providers.

    The service does not own its collaborators' lifetimes except through
    close(), which closes all of them.
    """

    def __init__(
        self,
        spotify: SpotifyClient,
        resolver: VideoResolver,
        lyrics: LrclibClient
    ) -> None:
        self._spotify = spotify
        self._resolver = resolver
        self._lyrics = lyrics

    @classmethod
    def from_config(cls, config: Config) -> "UnifiedMusicService":
        return cls(
            SpotifyClient(config.spotify.client_id, config.spotify.client_secret),
            VideoResolver.from_config(config),
            LrclibClient(timeout=config.lyrics.timeout),
        )

    @property
    def resolver(self) -> VideoResolver:
        return self._resolver

    async def __aenter__(self) -> "UnifiedMusicService":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self._resolver.close()
        await self._lyrics.close()

    async def get_unified_data(self, query: str) -> UnifiedTrackData | None:
        """
        Look up a song by free-text query.

        Args:
            query: Free-text search. Example: "the weeknd blinding lights"

        Returns:
            UnifiedTrackData, or None when Spotify has no matching track.

        Raises:
            SpotifyError: If the track search fails.
            QuotaExhaustedError: If every YouTube API key is exhausted.
        """
        track = await self._spotify.search_track(query)
        if track is None:
            logger.info(f"No track found for query '{query}'")
            return None

        video_id, lyrics = await asyncio.gather(
            self._resolver.resolve(track.name, track.artist),
            self._lyrics.fetch(track.artist, track.name, track.duration_seconds),
        )

        return UnifiedTrackData(track=track, video_id=video_id, lyrics=lyrics)
