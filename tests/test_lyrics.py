"""Test the LRCLIB lyrics client"""

import asyncio

import pytest

from tunebridge.lyrics import LrclibClient, Lyrics


class TestLrclibClient:
    """Test LrclibClient.fetch()"""

    @pytest.mark.asyncio
    async def test_fetch_found(self, make_session, make_response):
        """Test synced and plain lyrics are returned"""
        session = make_session(lambda url, params: make_response(payload={
            "syncedLyrics": "[00:15.00]I've been tryna call",
            "plainLyrics": "I've been tryna call",
        }))
        client = LrclibClient(session=session)

        lyrics = await client.fetch("The Weeknd", "Blinding Lights", 200)

        assert lyrics.found
        assert lyrics.synced.startswith("[00:15.00]")
        assert session.calls[0] == {
            "artist_name": "The Weeknd",
            "track_name": "Blinding Lights",
            "duration": "200",
        }

    @pytest.mark.asyncio
    async def test_not_found(self, make_session, make_response):
        """Test a 404 gives empty lyrics"""
        session = make_session(lambda url, params: make_response(status=404))
        client = LrclibClient(session=session)

        lyrics = await client.fetch("Artist", "Song", 100)

        assert lyrics == Lyrics()
        assert not lyrics.found
        assert lyrics.to_dict() == {"synced": None, "plain": None}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("answer", ["server_error", "timeout", "bad_json", "not_a_dict"])
    async def test_failures_never_raise(self, make_session, make_response, answer):
        """Test every failure mode degrades to empty lyrics"""
        answers = {
            "server_error": make_response(status=502),
            "timeout": asyncio.TimeoutError(),
            "bad_json": make_response(json_error=ValueError("bad")),
            "not_a_dict": make_response(payload=["x"]),
        }
        session = make_session(lambda url, params: answers[answer])
        client = LrclibClient(session=session)

        assert await client.fetch("Artist", "Song", 100) == Lyrics()

    @pytest.mark.asyncio
    async def test_empty_strings_become_none(self, make_session, make_response):
        """Test empty lyric fields are normalized to None"""
        session = make_session(lambda url, params: make_response(payload={
            "syncedLyrics": "",
            "plainLyrics": "words",
        }))
        client = LrclibClient(session=session)

        lyrics = await client.fetch("Artist", "Song", 100)

        assert lyrics.synced is None
        assert lyrics.plain == "words"
