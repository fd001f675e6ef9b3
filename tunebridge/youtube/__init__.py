"""
YouTube video-match resolution for tunebridge.

Finds the official audio/video for a (title, artist) pair, rotating API
keys on quota exhaustion and caching results.

Components:
    - normalizer: Canonical search form and cache key
    - queries: Ordered search query variants
    - scorer: Candidate desirability scoring
    - credentials: API key pool with exhaustion tracking
    - client: Quota-aware YouTube Data API search client
    - cache: FIFO resolution cache and in-flight table
    - resolver: VideoResolver, the orchestrating service

Usage:
    from tunebridge.youtube import VideoResolver

    resolver = VideoResolver.from_config(config)
    video_id = await resolver.resolve("Song Title", "Artist")
    resolver.prefetch("Next Song", "Next Artist")
"""

from tunebridge.youtube.cache import InFlightTable, ResolutionCache
from tunebridge.youtube.client import YouTubeSearchClient
from tunebridge.youtube.credentials import CredentialPool
from tunebridge.youtube.models import (
    CacheStats,
    Candidate,
    CredentialStatus,
    NormalizedQuery,
    ScoredCandidate,
    SongRef,
)
from tunebridge.youtube.normalizer import normalize
from tunebridge.youtube.queries import build_queries
from tunebridge.youtube.resolver import VideoResolver
from tunebridge.youtube.scorer import pick_best, score, score_candidates

__all__ = [
    # Models
    "SongRef",
    "NormalizedQuery",
    "Candidate",
    "ScoredCandidate",
    "CacheStats",
    "CredentialStatus",
    # Pipeline
    "normalize",
    "build_queries",
    "score",
    "score_candidates",
    "pick_best",
    # Services
    "CredentialPool",
    "YouTubeSearchClient",
    "ResolutionCache",
    "InFlightTable",
    "VideoResolver",
]
