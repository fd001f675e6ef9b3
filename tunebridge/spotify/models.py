"""
Data models for the track search provider (Spotify).
"""

from dataclasses import dataclass
from typing import Any

from tunebridge.youtube.models import SongRef


@dataclass(frozen=True)
class Track:
    """
    Immutable representation of a Spotify track search hit.

    The title and primary artist seed video resolution; the duration is
    passed to the lyrics provider to pick the right recording.

    Attributes:
        spotify_id: Unique Spotify track ID (22-character base62 string).
                    Example: "0VjIjW4GlUZAMYd2vXMi3b"
        name: Track title as it appears on Spotify. Example: "Blinding Lights"
        artist: Primary artist name (first artist in the list).
        artists: All artist names. Example: ("Calvin Harris", "Dua Lipa")
        album: Album name.
        image_url: Largest album cover URL, or "" when none.
        duration_ms: Track duration in milliseconds.
        url: Spotify URL for the track.
    """

    spotify_id: str
    name: str
    artist: str
    artists: tuple[str, ...]
    album: str
    image_url: str
    duration_ms: int
    url: str

    @classmethod
    def from_spotify_api(cls, track_data: dict[str, Any]) -> "Track":
        """
        Create a Track from a Spotify Web API track object.

        Args:
            track_data: One entry of search()["tracks"]["items"].
        """
        artists_list = [a["name"] for a in track_data.get("artists", []) if a.get("name")]
        artist = artists_list[0] if artists_list else "Unknown Artist"

        album_info = track_data.get("album") or {}
        images = album_info.get("images") or []

        return cls(
            spotify_id=track_data["id"],
            name=track_data["name"],
            artist=artist,
            artists=tuple(artists_list),
            album=album_info.get("name", "Unknown Album"),
            image_url=images[0].get("url", "") if images else "",
            duration_ms=int(track_data.get("duration_ms") or 0),
            url=(track_data.get("external_urls") or {}).get("spotify", ""),
        )

    @property
    def duration_seconds(self) -> int:
        """Duration rounded to whole seconds. Example: 200040 ms -> 200."""
        return round(self.duration_ms / 1000)

    @property
    def song_ref(self) -> SongRef:
        return SongRef(title=self.name, artist=self.artist)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.spotify_id,
            "name": self.name,
            "artist": self.artist,
            "album": self.album,
            "image": self.image_url,
            "duration_ms": self.duration_ms,
            "url": self.url,
        }
