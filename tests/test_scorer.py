"""Test candidate scoring and selection"""

import pytest

from tunebridge.youtube.models import Candidate, NormalizedQuery, ScoredCandidate
from tunebridge.youtube.scorer import REJECTION_FLOOR, pick_best, score, score_candidates


QUERY = NormalizedQuery("Song Title", "Artist")


def scored(video_id, points):
    return ScoredCandidate(Candidate(video_id, f"title {video_id}", "channel"), points)


class TestScore:
    """Test score()"""

    def test_topic_channel_official_audio(self):
        """Test an official audio upload on the topic channel scores high"""
        candidate = Candidate("a", "Song Title Official Audio", "Artist - Topic")

        assert score(candidate, QUERY) == 230
        assert score(candidate, QUERY) >= 185

    def test_reaction_video_is_rejected(self):
        """Test reaction content is pushed far below the rejection floor"""
        candidate = Candidate("b", "Song Title Reaction", "SomeReactor")

        # "reaction" and "react" both match
        assert score(candidate, QUERY) == 25 - 400
        assert score(candidate, QUERY) <= -155

    def test_vevo_channel(self):
        """Test VEVO channel bonus stacks with artist-in-channel bonus"""
        candidate = Candidate("c", "Artist - Song Title (Official Music Video)", "ArtistVEVO")

        # channel 100 + 40, title 25 + 20 + 40 + 15
        assert score(candidate, QUERY) == 240

    def test_penalties_are_cumulative(self):
        """Test several unwanted version keywords each subtract their penalty"""
        base = score(Candidate("d", "Song Title", "Nobody"), QUERY)
        both = score(Candidate("d", "Song Title karaoke nightcore", "Nobody"), QUERY)

        assert base - both == 300

    def test_official_remix_is_exempt(self):
        """Test the remix penalty does not apply to an official remix"""
        plain = score(Candidate("e", "Song Title remix", "Nobody"), QUERY)
        official = score(Candidate("e", "Song Title official remix", "Nobody"), QUERY)

        # official remix also earns the "official" title bonus
        assert official - plain == 100 + 15

    def test_non_musical_keyword_in_channel(self):
        """Test non-musical keywords are matched in the channel name too"""
        candidate = Candidate("f", "Song Title", "Podcast Daily")

        assert score(candidate, QUERY) == 25 - 200

    def test_unrelated_title_penalized(self):
        """Test a title mentioning neither song nor artist loses points"""
        candidate = Candidate("g", "Something Else", "Nobody")

        assert score(candidate, QUERY) == -50

    def test_case_insensitive(self):
        """Test matching ignores case"""
        lower = score(Candidate("h", "song title official audio", "artist - topic"), QUERY)
        upper = score(Candidate("h", "SONG TITLE OFFICIAL AUDIO", "ARTIST - TOPIC"), QUERY)

        assert lower == upper

    def test_deterministic(self):
        """Test the same input always gives the same score"""
        candidate = Candidate("i", "Song Title (Live at Wembley)", "Artist Official")

        assert score(candidate, QUERY) == score(candidate, QUERY)

    def test_score_candidates_keeps_order(self):
        """Test scored candidates follow the provider order"""
        candidates = [Candidate("1", "x", "y"), Candidate("2", "Song Title", "Artist")]

        result = score_candidates(candidates, QUERY)

        assert [item.candidate.video_id for item in result] == ["1", "2"]


class TestPickBest:
    """Test pick_best()"""

    def test_highest_score_wins(self):
        """Test the highest scoring candidate is selected"""
        best = pick_best([scored("a", 10), scored("b", 90), scored("c", 50)])

        assert best.candidate.video_id == "b"

    def test_tie_goes_to_first(self):
        """Test ties keep the earliest result"""
        best = pick_best([scored("a", 90), scored("b", 90)])

        assert best.candidate.video_id == "a"

    @pytest.mark.parametrize("points", [REJECTION_FLOOR, REJECTION_FLOOR - 1, -375])
    def test_floor_is_exclusive(self, points):
        """Test candidates at or below the floor are never selected"""
        assert pick_best([scored("a", points)]) is None

    def test_just_above_floor_is_accepted(self):
        """Test a score one above the floor is acceptable"""
        best = pick_best([scored("a", REJECTION_FLOOR + 1)])

        assert best.score == REJECTION_FLOOR + 1

    def test_empty(self):
        """Test no candidates gives None"""
        assert pick_best([]) is None
