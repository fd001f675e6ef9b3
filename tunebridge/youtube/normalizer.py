"""
Query normalization for video resolution.

Turns a raw (title, artist) pair into the canonical search form used for
both query generation and the cache key. Track providers decorate titles
with featured artists, version tags and dash qualifiers that only add noise
to a video search:

    "Blinding Lights (feat. X) [Official Video]" / "The Weeknd, ft. Y"
        -> NormalizedQuery("Blinding Lights", "The Weeknd")

If cleaning would reduce a non-empty field to nothing (a title made only of
a parenthetical, for instance), the trimmed original is kept instead, so a
search is never issued with an empty title and normalize() stays idempotent.
"""

import re

from tunebridge.youtube.models import NormalizedQuery, SongRef


_PARENTHESIZED = re.compile(r"\([^)]*\)")
_BRACKETED = re.compile(r"\[[^\]]*\]")
_FEATURING = re.compile(r"\b(?:feat|ft)\..*", re.IGNORECASE | re.DOTALL)


def clean_title(title: str) -> str:
    """
    Strip decorations from a song title.

    Applied in order: remove (...) segments, remove [...] segments, remove a
    feat./ft. clause through end of string, keep only the text before the
    first '-', trim whitespace.
    """
    cleaned = _PARENTHESIZED.sub("", title)
    cleaned = _BRACKETED.sub("", cleaned)
    cleaned = _FEATURING.sub("", cleaned)
    cleaned = cleaned.split("-", 1)[0]
    return cleaned.strip()


def clean_artist(artist: str) -> str:
    """Keep only the first listed artist."""
    return artist.split(",", 1)[0].strip()


def normalize(title: str, artist: str) -> NormalizedQuery:
    """
    Normalize a (title, artist) pair. Pure, never raises.

    Args:
        title: Raw song title.
        artist: Raw artist name or comma separated artist list.

    Returns:
        NormalizedQuery with cleaned fields. Empty input gives empty output.
    """
    title_out = clean_title(title) or title.strip()
    artist_out = clean_artist(artist) or artist.strip()
    return NormalizedQuery(clean_title=title_out, clean_artist=artist_out)


def normalize_song(song: SongRef) -> NormalizedQuery:
    return normalize(song.title, song.artist)
