"""
Track search provider (Spotify) for tunebridge.

Usage:
    from tunebridge.spotify import SpotifyClient, Track

    client = SpotifyClient(client_id, client_secret)
    track = await client.search_track("blinding lights")
"""

from tunebridge.spotify.client import SpotifyClient
from tunebridge.spotify.models import Track

__all__ = [
    "SpotifyClient",
    "Track",
]
