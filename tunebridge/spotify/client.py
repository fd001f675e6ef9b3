"""
Spotify track search client for tunebridge.

Wraps spotipy with the client credentials flow. Only public catalog data is
needed: the unified lookup turns a free-text query into a Track whose title
and artist then seed video resolution.

spotipy is synchronous; the async methods run its calls in a worker thread
so the event loop keeps serving other resolutions meanwhile.

Usage:
    client = SpotifyClient(config.spotify.client_id, config.spotify.client_secret)
    track = await client.search_track("blinding lights")
    if track:
        print(track.name, track.artist)
"""

import asyncio
from typing import Any

import spotipy
from spotipy.oauth2 import SpotifyClientCredentials, SpotifyOauthError

from tunebridge.core.exceptions import SpotifyError
from tunebridge.core.logger import get_logger
from tunebridge.spotify.models import Track


logger = get_logger(__name__)


class SpotifyClient:
    """
    Spotify Web API client (client credentials flow).

    Attributes:
        _spotify: The underlying spotipy.Spotify instance.

    Rate Limiting:
        spotipy retries 429 responses with backoff on its own. A rate
        limit that survives those retries surfaces as SpotifyError.
    """

    def __init__(
        self,
        client_id: str | None = None,
        client_secret: str | None = None,
        spotify_instance: spotipy.Spotify | None = None
    ) -> None:
        """
        Create the client.

        Args:
            client_id: Spotify application client ID.
            client_secret: Spotify application client secret.
            spotify_instance: Preconfigured spotipy.Spotify to use instead
                              of building one from the credentials.

        Raises:
            SpotifyError: If neither credentials nor an instance are given.
        """
        if spotify_instance is None:
            if not client_id or not client_secret:
                raise SpotifyError(
                    "Spotify credentials are not set. Configure spotify.client_id "
                    "and spotify.client_secret or SPOTIFY_CLIENT_ID/SPOTIFY_CLIENT_SECRET."
                )
            auth_manager = SpotifyClientCredentials(
                client_id=client_id,
                client_secret=client_secret
            )
            spotify_instance = spotipy.Spotify(auth_manager=auth_manager)
        self._spotify = spotify_instance

    def _search(self, query: str, limit: int) -> dict[str, Any]:
        try:
            return self._spotify.search(q=query, type="track", limit=limit) or {}
        except spotipy.SpotifyException as e:
            message = (
                f"Rate limited while searching tracks: {query}"
                if e.http_status == 429 else f"Spotify track search failed: {e}"
            )
            raise SpotifyError(
                message,
                details={"query": query, "http_status": e.http_status, "original_error": str(e)},
                status=e.http_status
            ) from e
        except SpotifyOauthError as e:
            raise SpotifyError(
                f"Spotify authentication failed: {e}",
                details={"query": query, "original_error": str(e)}
            ) from e

    async def search_tracks(self, query: str, limit: int = 10) -> list[Track]:
        """
        Search the Spotify catalog.

        Args:
            query: Free-text query. Example: "the weeknd blinding lights"
            limit: Maximum number of tracks (1-50).

        Returns:
            Tracks in Spotify's relevance order (possibly empty).

        Raises:
            SpotifyError: On API, auth or rate-limit failure.
        """
        result = await asyncio.to_thread(self._search, query, limit)
        items = (result.get("tracks") or {}).get("items") or []
        return [Track.from_spotify_api(item) for item in items if item and item.get("id")]

    async def search_track(self, query: str) -> Track | None:
        """Return the top search hit, or None when nothing matches."""
        tracks = await self.search_tracks(query, limit=1)
        if not tracks:
            logger.debug(f"No Spotify track for '{query}'")
            return None
        return tracks[0]
