"""
Candidate scoring for video resolution.

Scores a search result by how likely it is to be the "pure" official audio
or video of the requested song. The score is an integer sum of independent
signals; every signal is a case-insensitive substring test, and bonuses and
penalties never short-circuit each other.

Signal groups:
    Channel trust (highest first):
        VEVO network                       +100
        "<Artist> - Topic" channel          +90
        channel has artist and "official"   +80
        channel has artist                  +40
        label / distributor keyword         +20

    Title:
        clean title +25, clean artist +20, "official audio" +50,
        "official music video" +40, "official video" +35, "official" +15,
        "audio" +10, "provided to youtube" +60 (auto-generated upload)

    Non-musical content (title or channel):  -200 per keyword
    Unwanted versions (title):               -150 per keyword
    Conditional penalties:                   see CONDITIONAL_PENALTIES
    Relevance floor: neither title nor artist in the video title  -50

Candidates at or below REJECTION_FLOOR are never selected.

Example:
    query = normalize("Song Title", "Artist")
    score(Candidate("id", "Song Title Official Audio", "Artist - Topic"), query)
    # -> 25 + 50 + 15 + 10 (title) + 90 + 40 (channel) = 230
"""

from typing import Iterable

from tunebridge.youtube.models import Candidate, NormalizedQuery, ScoredCandidate


# Candidates scoring at or below this are discarded
REJECTION_FLOOR = -100

OFFICIAL_NETWORK_MARKER = "vevo"
TOPIC_CHANNEL_SUFFIX = "- topic"
AUTO_ATTRIBUTION_PHRASE = "provided to youtube"

LABEL_KEYWORDS = (
    "records",
    "music",
    "entertainment",
    "universal",
    "sony",
    "warner",
)

# Talking, reacting or commenting over the song. Matched in title OR channel.
NON_MUSICAL_KEYWORDS = (
    "reaction",
    "react",
    "review",
    "podcast",
    "interview",
    "behind the scenes",
    "making of",
    "explained",
    "breakdown",
    "analysis",
    "commentary",
    "first time",
    "listening to",
    "hearing",
    "unboxing",
    "story time",
    "my thoughts",
    "opinion",
    "discussion",
    "talk about",
    "reacting",
)
NON_MUSICAL_PENALTY = 200

# Alternative renditions of the song. Matched in title only.
UNWANTED_VERSION_KEYWORDS = (
    "cover",
    "karaoke",
    "instrumental",
    "slowed",
    "reverb",
    "bass boosted",
    "sped up",
    "nightcore",
    "8d audio",
    "lofi",
    "mashup",
    "parody",
    "tutorial",
    "lesson",
    "how to play",
    "guitar cover",
    "piano cover",
    "drum cover",
    "fingerstyle",
    "unplugged",
    "rehearsal",
    "practice",
    "soundcheck",
    "acapella",
    "minus one",
)
UNWANTED_VERSION_PENALTY = 150

# (keyword, exemption or None, penalty). The penalty applies when the title
# contains the keyword and does not contain the exemption.
CONDITIONAL_PENALTIES = (
    ("remix", "official remix", 100),
    ("live", "official live", 80),
    ("lyric", "official", 30),
    ("concert", None, 70),
    ("performance", "official", 50),
    ("full album", None, 150),
    ("playlist", None, 150),
    ("mix 20", None, 150),  # year-tagged mixes, "mix 2024"
    ("compilation", None, 150),
    ("best of", None, 100),
    ("top 10", None, 150),
    ("extended", None, 30),
    ("edit", None, 20),
)

TITLE_BONUSES = (
    ("official audio", 50),
    ("official music video", 40),
    ("official video", 35),
    ("official", 15),
    ("audio", 10),
    (AUTO_ATTRIBUTION_PHRASE, 60),
)

RELEVANCE_FLOOR_PENALTY = 50


def _channel_score(channel: str, artist: str) -> int:
    points = 0
    if OFFICIAL_NETWORK_MARKER in channel:
        points += 100
    if TOPIC_CHANNEL_SUFFIX in channel:
        points += 90
    if artist in channel and "official" in channel:
        points += 80
    if artist in channel:
        points += 40
    if any(keyword in channel for keyword in LABEL_KEYWORDS):
        points += 20
    return points


def _title_score(title: str, song_title: str, artist: str) -> int:
    points = 0
    if song_title in title:
        points += 25
    if artist in title:
        points += 20
    for phrase, bonus in TITLE_BONUSES:
        if phrase in title:
            points += bonus
    return points


def _penalties(title: str, channel: str, song_title: str, artist: str) -> int:
    points = 0

    for keyword in NON_MUSICAL_KEYWORDS:
        if keyword in title or keyword in channel:
            points -= NON_MUSICAL_PENALTY

    for keyword in UNWANTED_VERSION_KEYWORDS:
        if keyword in title:
            points -= UNWANTED_VERSION_PENALTY

    for keyword, exemption, penalty in CONDITIONAL_PENALTIES:
        if keyword in title and (exemption is None or exemption not in title):
            points -= penalty

    if song_title not in title and artist not in title:
        points -= RELEVANCE_FLOOR_PENALTY

    return points


def score(candidate: Candidate, query: NormalizedQuery) -> int:
    """
    Compute the desirability score of a candidate. Pure and deterministic.

    Args:
        candidate: Raw search result.
        query: The normalized song the candidate should represent.

    Returns:
        Integer score; higher is better.
    """
    title = candidate.title.lower()
    channel = candidate.channel_name.lower()
    song_title = query.clean_title.lower()
    artist = query.clean_artist.lower()

    return (
        _channel_score(channel, artist)
        + _title_score(title, song_title, artist)
        + _penalties(title, channel, song_title, artist)
    )


def score_candidates(
    candidates: Iterable[Candidate],
    query: NormalizedQuery
) -> list[ScoredCandidate]:
    """Score candidates, keeping the provider's result order."""
    return [ScoredCandidate(candidate=c, score=score(c, query)) for c in candidates]


def pick_best(scored: Iterable[ScoredCandidate]) -> ScoredCandidate | None:
    """
    Select the best acceptable candidate.

    Candidates scoring at or below REJECTION_FLOOR are discarded. Among the
    rest the highest score wins; ties go to the earliest result.

    Returns:
        The winning ScoredCandidate, or None if nothing is acceptable.
    """
    best: ScoredCandidate | None = None
    for item in scored:
        if item.score <= REJECTION_FLOOR:
            continue
        if best is None or item.score > best.score:
            best = item
    return best
