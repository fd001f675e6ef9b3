"""
tunebridge: Resolve songs to their official YouTube videos.

Given a song title and artist, tunebridge finds the most likely official
audio or video on YouTube while spending as little API quota as possible.

Architecture:
    RESOLUTION (youtube/):
        - Normalize title and artist into a canonical search form
        - Check the FIFO result cache, then join any in-flight resolution
        - Run up to six search query variants in order
        - Score candidates by channel and title signals, pick the best
        - Rotate API keys when one hits its daily quota

    UNIFIED LOOKUP (unified.py):
        - Search Spotify for a free-text query
        - Resolve the video and fetch LRCLIB lyrics concurrently
        - Shape {spotify, youtube, lyrics} for clients

Modules:
    core/       - Configuration, logging, exceptions
    youtube/    - Normalizer, scorer, key pool, search client, cache, resolver
    spotify/    - Spotify catalog search
    lyrics/     - LRCLIB lyrics client
    unified.py  - Unified track lookup
    cli.py      - Command-line interface

Usage:
    Command Line:
        tunebridge resolve "Blinding Lights" "The Weeknd"
        tunebridge batch queue.txt
        tunebridge unified "blinding lights"

    Python API:
        from tunebridge.core import load_config, setup_logging
        from tunebridge.youtube import VideoResolver

        config = load_config()
        setup_logging(config.logging.directory)
        async with VideoResolver.from_config(config) as resolver:
            video_id = await resolver.resolve("Blinding Lights", "The Weeknd")
"""

__version__ = "0.9.0"
