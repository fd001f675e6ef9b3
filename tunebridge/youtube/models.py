"""
Data models for the video-match resolution engine.

This module defines the immutable value types that flow through the
resolver: the requested song, its normalized search form, raw provider
candidates and their scores, plus the diagnostic snapshots returned by
cache_stats() and credential_status().
"""

import html
from dataclasses import dataclass
from typing import Any, Mapping


WATCH_URL_TEMPLATE = "https://www.youtube.com/watch?v={video_id}"


@dataclass(frozen=True)
class SongRef:
    """
    User-supplied identity of a song. Constructed per request, never persisted.

    Attributes:
        title: Song title as shown by the track provider.
               Example: "Blinding Lights (feat. X) [Official Video]"
        artist: Artist name, possibly a comma separated list.
               Example: "The Weeknd, ft. Y"
    """

    title: str
    artist: str

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SongRef":
        """
        Create a SongRef from a queue item dictionary.

        Accepts both {"title", "artist"} and the client's
        {"name", "artistName"} key spelling.
        """
        title = data.get("title", data.get("name", "")) or ""
        artist = data.get("artist", data.get("artistName", "")) or ""
        return cls(title=str(title), artist=str(artist))


@dataclass(frozen=True)
class NormalizedQuery:
    """
    Canonical search form of a SongRef, produced by normalize().

    Attributes:
        clean_title: Title without parentheticals, brackets, feat. clause
                     or dash qualifier. Example: "Blinding Lights"
        clean_artist: First listed artist. Example: "The Weeknd"
    """

    clean_title: str
    clean_artist: str

    @property
    def cache_key(self) -> str:
        """Case-insensitive key shared by every SongRef normalizing to this query."""
        return f"{self.clean_title.lower()}_{self.clean_artist.lower()}"

    @property
    def display(self) -> str:
        return f"{self.clean_title} - {self.clean_artist}"


@dataclass(frozen=True)
class Candidate:
    """
    One raw result from the video search provider.

    Attributes:
        video_id: YouTube video ID (11-character string). Example: "4NRXx6U8ABQ"
        title: Video title with HTML entities decoded.
        channel_name: Uploading channel title. Example: "TheWeekndVEVO"
    """

    video_id: str
    title: str
    channel_name: str

    @classmethod
    def from_search_item(cls, item: Mapping[str, Any]) -> "Candidate | None":
        """
        Create a Candidate from a YouTube Data API search item.

        Args:
            item: One entry of the "items" array of a search.list response:
                  {"id": {"videoId": ...}, "snippet": {"title": ..., "channelTitle": ...}}

        Returns:
            The Candidate, or None when the item carries no video id
            (channels and playlists can slip through a search).
        """
        ids = item.get("id")
        snippet = item.get("snippet")
        if not isinstance(ids, Mapping) or not isinstance(snippet, Mapping):
            return None

        video_id = ids.get("videoId")
        if not video_id:
            return None

        return cls(
            video_id=str(video_id),
            title=html.unescape(str(snippet.get("title") or "")),
            channel_name=html.unescape(str(snippet.get("channelTitle") or "")),
        )

    @property
    def url(self) -> str:
        return WATCH_URL_TEMPLATE.format(video_id=self.video_id)


@dataclass(frozen=True)
class ScoredCandidate:
    """A Candidate paired with its desirability score."""

    candidate: Candidate
    score: int


@dataclass(frozen=True)
class CacheStats:
    """
    Snapshot of the resolution cache.

    Attributes:
        size: Number of cached entries.
        keys: Cache keys in insertion order (oldest first).
    """

    size: int
    keys: tuple[str, ...]


@dataclass(frozen=True)
class CredentialStatus:
    """
    Snapshot of the credential pool.

    Attributes:
        total: Number of credentials in the pool.
        active_index: 1-based number of the credential the next request uses.
        exhausted_indices: Sorted 1-based numbers of quota-exhausted credentials.
                           Example: (1,) once the first key hit its quota.
    """

    total: int
    active_index: int
    exhausted_indices: tuple[int, ...]

    @property
    def all_exhausted(self) -> bool:
        return len(self.exhausted_indices) >= self.total
