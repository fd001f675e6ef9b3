"""Test Spotify search and the unified track lookup"""

from unittest.mock import AsyncMock, Mock

import pytest
from spotipy import SpotifyException

from tunebridge.core.exceptions import QuotaExhaustedError, SpotifyError
from tunebridge.lyrics import Lyrics
from tunebridge.spotify import SpotifyClient, Track
from tunebridge.unified import UnifiedMusicService


class TestSpotifyModels:
    """Test Track"""

    def test_track_from_api(self, sample_spotify_track):
        """Test Track creation from a search hit"""
        track = Track.from_spotify_api(sample_spotify_track)

        assert track.spotify_id == "0VjIjW4GlUZAMYd2vXMi3b"
        assert track.artist == "The Weeknd"
        assert track.image_url == "https://i.scdn.co/image/large"
        assert track.duration_seconds == 200
        assert track.song_ref.title == "Blinding Lights"

    def test_track_missing_optional_fields(self):
        """Test defaults for sparse track data"""
        track = Track.from_spotify_api({"id": "x", "name": "Song", "artists": []})

        assert track.artist == "Unknown Artist"
        assert track.image_url == ""
        assert track.duration_ms == 0


class TestSpotifyClient:
    """Test SpotifyClient"""

    def test_requires_credentials(self):
        """Test construction fails without credentials or instance"""
        with pytest.raises(SpotifyError):
            SpotifyClient()

    @pytest.mark.asyncio
    async def test_search_track(self, mock_spotify):
        """Test the top hit is returned"""
        client = SpotifyClient(spotify_instance=mock_spotify)

        track = await client.search_track("blinding lights")

        assert track.name == "Blinding Lights"
        mock_spotify.search.assert_called_once_with(q="blinding lights", type="track", limit=1)

    @pytest.mark.asyncio
    async def test_search_track_no_results(self):
        """Test no hit gives None"""
        spotify = Mock()
        spotify.search.return_value = {"tracks": {"items": []}}
        client = SpotifyClient(spotify_instance=spotify)

        assert await client.search_track("zzzz") is None

    @pytest.mark.asyncio
    async def test_rate_limit_maps_to_spotify_error(self):
        """Test spotipy errors are wrapped with their status"""
        spotify = Mock()
        spotify.search.side_effect = SpotifyException(429, -1, "rate limited")
        client = SpotifyClient(spotify_instance=spotify)

        with pytest.raises(SpotifyError) as exc_info:
            await client.search_tracks("q")

        assert exc_info.value.status == 429


def make_service(spotify, video_id="4NRXx6U8ABQ", lyrics=None):
    resolver = Mock()
    resolver.resolve = AsyncMock(return_value=video_id)
    resolver.close = AsyncMock()
    lyrics_client = Mock()
    lyrics_client.fetch = AsyncMock(return_value=lyrics or Lyrics(synced="[00:01.00]la", plain="la"))
    lyrics_client.close = AsyncMock()
    return UnifiedMusicService(SpotifyClient(spotify_instance=spotify), resolver, lyrics_client)


class TestUnifiedMusicService:
    """Test get_unified_data()"""

    @pytest.mark.asyncio
    async def test_unified_document(self, mock_spotify):
        """Test the combined JSON document"""
        service = make_service(mock_spotify)

        data = await service.get_unified_data("blinding lights")

        assert data.to_dict() == {
            "spotify": {
                "id": "0VjIjW4GlUZAMYd2vXMi3b",
                "name": "Blinding Lights",
                "artist": "The Weeknd",
                "album": "After Hours",
                "image": "https://i.scdn.co/image/large",
                "duration_ms": 200040,
                "url": "https://open.spotify.com/track/0VjIjW4GlUZAMYd2vXMi3b",
            },
            "youtube": {
                "videoId": "4NRXx6U8ABQ",
                "url": "https://www.youtube.com/watch?v=4NRXx6U8ABQ",
            },
            "lyrics": {"synced": "[00:01.00]la", "plain": "la"},
        }
        service.resolver.resolve.assert_awaited_once_with("Blinding Lights", "The Weeknd")
        service._lyrics.fetch.assert_awaited_once_with("The Weeknd", "Blinding Lights", 200)

    @pytest.mark.asyncio
    async def test_video_miss(self, mock_spotify):
        """Test a video miss leaves the youtube fields null"""
        service = make_service(mock_spotify, video_id=None)

        data = await service.get_unified_data("blinding lights")

        assert data.to_dict()["youtube"] == {"videoId": None, "url": None}

    @pytest.mark.asyncio
    async def test_track_not_found(self):
        """Test no Spotify hit gives None without resolving"""
        spotify = Mock()
        spotify.search.return_value = {"tracks": {"items": []}}
        service = make_service(spotify)

        assert await service.get_unified_data("zzzz") is None
        service.resolver.resolve.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_quota_error_propagates(self, mock_spotify):
        """Test quota exhaustion is not hidden by the unified lookup"""
        service = make_service(mock_spotify)
        service.resolver.resolve.side_effect = QuotaExhaustedError("all keys exhausted")

        with pytest.raises(QuotaExhaustedError):
            await service.get_unified_data("blinding lights")

    @pytest.mark.asyncio
    async def test_close(self, mock_spotify):
        """Test close() closes resolver and lyrics client"""
        service = make_service(mock_spotify)

        async with service:
            pass

        service.resolver.close.assert_awaited_once()
        service._lyrics.close.assert_awaited_once()
