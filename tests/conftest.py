"""Test configuration and fixtures"""

from unittest.mock import Mock

import pytest

from tunebridge.youtube import CredentialPool, ResolutionCache, VideoResolver, YouTubeSearchClient


class FakeResponse:
    """Stand-in for an aiohttp response used as `async with session.get(...)`"""

    def __init__(self, status=200, payload=None, text="", json_error=None):
        self.status = status
        self._payload = payload
        self._text = text
        self._json_error = json_error

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False

    async def json(self, content_type="application/json"):
        if self._json_error is not None:
            raise self._json_error
        return self._payload

    async def text(self):
        return self._text


class FakeSession:
    """
    Records every GET and answers through a handler(url, params).

    The handler returns a FakeResponse or an exception instance to raise.
    """

    def __init__(self, handler):
        self._handler = handler
        self.calls = []
        self.timeouts = []
        self.closed = False

    def get(self, url, params=None, timeout=None):
        params = dict(params or {})
        self.calls.append(params)
        self.timeouts.append(timeout)
        result = self._handler(url, params)
        if isinstance(result, BaseException):
            raise result
        return result

    async def close(self):
        self.closed = True

    @property
    def queries(self):
        return [call.get("q") for call in self.calls]

    @property
    def keys_used(self):
        return [call.get("key") for call in self.calls]


def search_item(video_id, title, channel):
    return {
        "kind": "youtube#searchResult",
        "id": {"kind": "youtube#video", "videoId": video_id},
        "snippet": {"title": title, "channelTitle": channel},
    }


def search_response(*items):
    return FakeResponse(payload={"items": list(items)})


@pytest.fixture
def official_item():
    """A candidate that scores well for "Blinding Lights" / "The Weeknd" """
    return search_item("4NRXx6U8ABQ", "Blinding Lights (Official Audio)", "The Weeknd - Topic")


@pytest.fixture
def reaction_item():
    """A candidate that is always rejected"""
    return search_item("reaction001", "Blinding Lights REACTION", "Some Reactor")


@pytest.fixture
def make_session():
    """Factory for FakeSession objects"""
    return FakeSession


@pytest.fixture
def make_response():
    """Factory for FakeResponse objects"""
    return FakeResponse


@pytest.fixture
def make_search_response():
    return search_response


@pytest.fixture
def make_resolver():
    """Build a VideoResolver on a fake session"""
    def _make(session, keys=("key-1",), capacity=100, prefetch_batch_size=3):
        client = YouTubeSearchClient(CredentialPool(keys), session=session)
        return VideoResolver(
            client,
            cache=ResolutionCache(capacity),
            prefetch_batch_size=prefetch_batch_size,
        )
    return _make


@pytest.fixture
def sample_spotify_track():
    """Sample Spotify search hit"""
    return {
        "id": "0VjIjW4GlUZAMYd2vXMi3b",
        "name": "Blinding Lights",
        "artists": [{"id": "1Xyo4u8uXC1ZmMpatF05PJ", "name": "The Weeknd"}],
        "album": {
            "name": "After Hours",
            "images": [
                {"url": "https://i.scdn.co/image/large", "height": 640, "width": 640},
                {"url": "https://i.scdn.co/image/small", "height": 64, "width": 64},
            ],
        },
        "duration_ms": 200040,
        "external_urls": {"spotify": "https://open.spotify.com/track/0VjIjW4GlUZAMYd2vXMi3b"},
    }


@pytest.fixture
def mock_spotify(sample_spotify_track):
    """Mock spotipy.Spotify whose search returns the sample track"""
    spotify = Mock()
    spotify.search.return_value = {"tracks": {"items": [sample_spotify_track]}}
    return spotify
