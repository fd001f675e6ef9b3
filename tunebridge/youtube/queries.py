"""
Search query generation for video resolution.

Queries run most-specific first. Early queries are precision oriented and
usually return the canonical official upload at the top; later ones trade
precision for recall. The resolver stops at the first query that yields an
acceptable candidate, so the order below is significant.
"""

from tunebridge.youtube.models import NormalizedQuery


# Qualifiers appended to "<title> <artist>", in priority order.
# VEVO channels only carry official uploads; "topic" targets the
# auto-generated "<Artist> - Topic" channels that host pure audio.
OFFICIAL_NETWORK_TERM = "VEVO"
TOPIC_CHANNEL_TERM = "topic"

QUERY_COUNT = 6


def build_queries(query: NormalizedQuery) -> tuple[str, ...]:
    """
    Build the ordered search queries for a normalized song.

    Args:
        query: The normalized title/artist pair.

    Returns:
        Exactly six query strings, most specific first:
            1. '"<title>" "<artist>" official audio'
            2. '<title> <artist> VEVO'
            3. '<title> <artist> official music video'
            4. '<title> <artist> topic'
            5. '<title> <artist> audio'
            6. '<title> <artist>'
    """
    title = query.clean_title
    artist = query.clean_artist
    base = f"{title} {artist}"

    return (
        f'"{title}" "{artist}" official audio',
        f"{base} {OFFICIAL_NETWORK_TERM}",
        f"{base} official music video",
        f"{base} {TOPIC_CHANNEL_TERM}",
        f"{base} audio",
        base,
    )
