"""
Lyrics provider for tunebridge.

Usage:
    from tunebridge.lyrics import LrclibClient, Lyrics
"""

from tunebridge.lyrics.lrclib import LrclibClient, Lyrics

__all__ = [
    "LrclibClient",
    "Lyrics",
]
